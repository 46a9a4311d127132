import atexit
import logging
import logging.handlers
import os
from pathlib import (
    Path,
)
import queue
import sys
import threading
from typing import (
    Any,
)

ROOT_LOGGER_NAME = "blockservice"

DEBUG_ENV_VAR = "BLOCKSERVICE_DEBUG"
DEBUG_FILE_ENV_VAR = "BLOCKSERVICE_DEBUG_FILE"

# Records from every blockservice logger are funnelled through this queue
log_queue: "queue.Queue[Any]" = queue.Queue()

# Store the current listener to stop it on exit
_current_listener: logging.handlers.QueueListener | None = None

# Event to track when the listener is ready
_listener_ready = threading.Event()

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _parse_debug_modules(debug_str: str) -> dict[str, int]:
    """
    Parse the BLOCKSERVICE_DEBUG environment variable into module log levels.

    Format examples:
    - "DEBUG"  # All modules at DEBUG level
    - "blockservice.service:DEBUG"  # Only the routing core at DEBUG
    - "service:DEBUG"  # Same as above, blockservice prefix is optional
    - "service:DEBUG,exchange.peer:INFO"  # Multiple modules

    The empty-string key holds the global level, if one was given.
    """
    module_levels: dict[str, int] = {}

    if not debug_str or debug_str.isspace():
        return module_levels

    if ":" not in debug_str:
        level = logging.getLevelName(debug_str.strip().upper())
        if isinstance(level, int):
            module_levels[""] = level
        return module_levels

    for part in debug_str.split(","):
        if part.count(":") != 1:
            continue
        module, level_name = (s.strip() for s in part.split(":"))
        level = logging.getLevelName(level_name.upper())
        if not isinstance(level, int):
            continue

        # The prefix is added back when the logger is created
        if module == ROOT_LOGGER_NAME:
            module = ""
        elif module.startswith(ROOT_LOGGER_NAME + "."):
            module = module[len(ROOT_LOGGER_NAME) + 1 :]
        module = module.replace("/", ".").strip(".")

        module_levels[module] = level

    return module_levels


def _disable(root_logger: logging.Logger) -> None:
    root_logger.handlers.clear()
    root_logger.setLevel(logging.WARNING)
    root_logger.propagate = False


def setup_logging() -> None:
    """
    Set up logging configuration based on environment variables.

    Environment Variables:
        BLOCKSERVICE_DEBUG
            Controls logging levels. Examples:
            - "DEBUG" (all modules at DEBUG level)
            - "blockservice.service:DEBUG" (only the routing core at DEBUG)
            - "service:DEBUG" (same as above, blockservice prefix optional)
            - "service:DEBUG,exchange.peer:INFO" (multiple modules)

        BLOCKSERVICE_DEBUG_FILE
            If set, log records are also written to this file. Parent
            directories are created as needed. Records always go to stderr.

    Without BLOCKSERVICE_DEBUG the ``blockservice`` logger stays silent below
    WARNING and has no handlers, leaving output to the host application.
    """
    global _current_listener

    _listener_ready.clear()

    if _current_listener is not None:
        _current_listener.stop()
        _current_listener = None

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    module_levels = _parse_debug_modules(os.environ.get(DEBUG_ENV_VAR, ""))

    if not module_levels:
        _disable(root_logger)
        _listener_ready.set()
        return

    formatter = logging.Formatter(DEFAULT_LOG_FORMAT)

    handlers: list[logging.Handler] = []

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    log_file = os.environ.get(DEBUG_FILE_ENV_VAR)
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode="w")
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    queue_handler = logging.handlers.QueueHandler(log_queue)

    root_logger.handlers.clear()
    root_logger.addHandler(queue_handler)
    root_logger.propagate = False
    # Default to INFO for module-specific logging
    root_logger.setLevel(module_levels.get("", logging.INFO))

    for module, level in module_levels.items():
        if module:
            logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{module}")
            logger.handlers.clear()
            logger.addHandler(queue_handler)
            logger.setLevel(level)
            # Prevent message duplication
            logger.propagate = False

    # Start the listener after configuring all loggers
    _current_listener = logging.handlers.QueueListener(
        log_queue, *handlers, respect_handler_level=True
    )
    _current_listener.start()

    _listener_ready.set()


@atexit.register
def cleanup_logging() -> None:
    """Clean up logging resources on exit."""
    global _current_listener
    if _current_listener is not None:
        _current_listener.stop()
        _current_listener = None
