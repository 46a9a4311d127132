"""
The immutable block value shared by every component.
"""

from dataclasses import dataclass

from .cid import CODEC_RAW, compute_cid, cid_to_string, verify_cid
from .config import DEFAULT_CID_VERSION


@dataclass(frozen=True)
class Block:
    """
    An immutable pair of content identifier and raw payload.

    The CID is an opaque key as far as the block service is concerned; it is
    never checked against the data unless :meth:`verify` is called.
    """

    cid: bytes
    data: bytes

    @classmethod
    def from_data(
        cls,
        data: bytes,
        version: int = DEFAULT_CID_VERSION,
        codec: int = CODEC_RAW,
    ) -> "Block":
        """Build a block whose CID is computed from ``data``."""
        return cls(compute_cid(data, version, codec), data)

    @property
    def size(self) -> int:
        return len(self.data)

    def verify(self) -> bool:
        """Return whether the payload hashes to the block's CID."""
        return verify_cid(self.cid, self.data)

    def __repr__(self) -> str:
        return f"<Block {cid_to_string(self.cid)} ({self.size} bytes)>"
