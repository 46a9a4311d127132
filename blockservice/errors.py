"""
Block service errors.
"""


class BlockServiceError(Exception):
    """Base exception for block service errors."""

    pass


class BlockNotFoundError(BlockServiceError):
    """Raised when a requested block is not found."""

    def __init__(self, cid: bytes, message: str | None = None) -> None:
        self.cid = cid
        super().__init__(message or f"Block {cid.hex()[:16]}... not found")


class BlockUnavailableError(BlockNotFoundError):
    """Raised when no peer could provide a requested block."""

    pass


class CollaboratorError(BlockServiceError):
    """Raised when a block store or exchange fails to perform an operation."""

    pass


class StoreError(CollaboratorError):
    """Raised when the local block store hits an I/O failure."""

    pass


class StoreClosedError(StoreError):
    """Raised when a block store is used after it has been closed."""

    pass


class TimeoutError(CollaboratorError):
    """Raised when an exchange retrieval times out."""

    pass


class InvalidBlockError(BlockServiceError):
    """Raised when a block is invalid or malformed."""

    pass


class BlockTooLargeError(InvalidBlockError):
    """Raised when a block exceeds the maximum size."""

    pass


class InvalidCIDError(BlockServiceError):
    """Raised when a CID is invalid."""

    pass
