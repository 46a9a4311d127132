"""
Block service configuration constants and defaults.
"""

from dataclasses import dataclass

from .cid import CID_V1

# Default timeout for exchange retrievals (in seconds)
DEFAULT_TIMEOUT = 30.0

# Maximum number of concurrent peer requests per exchange
MAX_CONCURRENT_REQUESTS = 100

# Maximum block size accepted by the exchange (1 MiB)
MAX_BLOCK_SIZE = 1024 * 1024

# CID version used by Block.from_data
DEFAULT_CID_VERSION = CID_V1


@dataclass
class ExchangeConfig:
    """
    Configuration for the peer exchange.

    Attributes:
        timeout: Seconds to wait for peers to answer a retrieval before
                 giving up. Default: 30.0 seconds
        max_concurrent_requests: Upper bound on peer requests in flight at
                                 once, and the window size of ``get_many``.
                                 Default: 100
        max_block_size: Largest payload accepted by ``put``/``put_many``, in
                        bytes. Default: 1 MiB
        verify_blocks: Whether blocks received from peers are hashed and
                       checked against their CID. Default: True

    """

    timeout: float = DEFAULT_TIMEOUT
    max_concurrent_requests: int = MAX_CONCURRENT_REQUESTS
    max_block_size: int = MAX_BLOCK_SIZE
    verify_blocks: bool = True

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.max_concurrent_requests < 1:
            raise ValueError("max_concurrent_requests must be at least 1")
        if self.max_block_size < 1:
            raise ValueError("max_block_size must be at least 1")
