"""
In-memory block store.
"""

from collections.abc import Iterable

from blockservice.abc import IBlockStore
from blockservice.block import Block
from blockservice.errors import BlockNotFoundError


class MemoryBlockStore(IBlockStore):
    """In-memory block store implementation."""

    def __init__(self) -> None:
        """Initialize the memory block store."""
        self._blocks: dict[bytes, Block] = {}

    async def put(self, block: Block) -> None:
        """Store a block."""
        self._blocks[block.cid] = block

    async def put_many(self, blocks: Iterable[Block]) -> None:
        """Store several blocks."""
        for block in blocks:
            self._blocks[block.cid] = block

    async def get(self, cid: bytes) -> Block:
        """Get a block by its CID."""
        try:
            return self._blocks[cid]
        except KeyError:
            raise BlockNotFoundError(cid) from None

    async def has(self, cid: bytes) -> bool:
        """Check if a block exists."""
        return cid in self._blocks

    async def delete(self, cid: bytes) -> None:
        """Delete a block."""
        self._blocks.pop(cid, None)

    def get_all_cids(self) -> list[bytes]:
        """Get all CIDs in the store."""
        return list(self._blocks.keys())

    def size(self) -> int:
        """Get the number of blocks in the store."""
        return len(self._blocks)
