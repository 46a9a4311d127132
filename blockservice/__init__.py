"""
Content-addressed block access layer.

A :class:`BlockService` routes block reads and writes either to a local block
store (offline) or to a network exchange (online), chosen once when the
service is built.
"""

from importlib.metadata import (
    PackageNotFoundError,
    version as __version,
)

from blockservice.abc import (
    IBlockStore,
    IExchange,
)
from blockservice.block import Block
from blockservice.blockstore import (
    MemoryBlockStore,
    SQLiteBlockStore,
)
from blockservice.cid import (
    CID_V0,
    CID_V1,
    CODEC_DAG_PB,
    CODEC_RAW,
    cid_from_string,
    cid_to_string,
    compute_cid,
    compute_cid_v0,
    compute_cid_v1,
    parse_cid_version,
    validate_cid,
    verify_cid,
)
from blockservice.config import ExchangeConfig
from blockservice.errors import (
    BlockNotFoundError,
    BlockServiceError,
    BlockTooLargeError,
    BlockUnavailableError,
    CollaboratorError,
    InvalidBlockError,
    InvalidCIDError,
    StoreClosedError,
    StoreError,
    TimeoutError,
)
from blockservice.exchange import PeerExchange
from blockservice.service import (
    BlockService,
    BlockServiceMode,
    Offline,
    Online,
)
from blockservice.utils.logging import (
    setup_logging,
)

# Initialize logging configuration
setup_logging()

try:
    __version__ = __version("blockservice")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "Block",
    "BlockService",
    "BlockServiceMode",
    "Offline",
    "Online",
    "IBlockStore",
    "IExchange",
    "MemoryBlockStore",
    "SQLiteBlockStore",
    "PeerExchange",
    "ExchangeConfig",
    "setup_logging",
    # CID utilities
    "CID_V0",
    "CID_V1",
    "CODEC_DAG_PB",
    "CODEC_RAW",
    "cid_from_string",
    "cid_to_string",
    "compute_cid",
    "compute_cid_v0",
    "compute_cid_v1",
    "parse_cid_version",
    "validate_cid",
    "verify_cid",
    # Errors
    "BlockServiceError",
    "BlockNotFoundError",
    "BlockUnavailableError",
    "CollaboratorError",
    "StoreError",
    "StoreClosedError",
    "TimeoutError",
    "InvalidBlockError",
    "BlockTooLargeError",
    "InvalidCIDError",
]
