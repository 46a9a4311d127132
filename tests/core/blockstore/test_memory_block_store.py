"""Unit tests for the in-memory block store."""

import pytest

from blockservice.blockstore.memory import MemoryBlockStore
from blockservice.errors import BlockNotFoundError
from tests.factories import BlockFactory


class TestMemoryBlockStore:
    """Test MemoryBlockStore implementation."""

    def test_init_empty(self):
        store = MemoryBlockStore()
        assert store.get_all_cids() == []
        assert store.size() == 0

    @pytest.mark.trio
    async def test_put_and_get_block(self):
        store = MemoryBlockStore()
        block = BlockFactory()

        await store.put(block)

        assert await store.get(block.cid) == block

    @pytest.mark.trio
    async def test_get_nonexistent_block(self):
        store = MemoryBlockStore()
        cid = BlockFactory().cid

        with pytest.raises(BlockNotFoundError) as excinfo:
            await store.get(cid)
        assert excinfo.value.cid == cid

    @pytest.mark.trio
    async def test_has_block(self):
        store = MemoryBlockStore()
        block = BlockFactory()

        assert not await store.has(block.cid)
        await store.put(block)
        assert await store.has(block.cid)

    @pytest.mark.trio
    async def test_delete_block(self):
        store = MemoryBlockStore()
        block = BlockFactory()
        await store.put(block)

        await store.delete(block.cid)

        assert not await store.has(block.cid)

    @pytest.mark.trio
    async def test_delete_nonexistent_block(self):
        """Deleting a block that doesn't exist should not raise."""
        store = MemoryBlockStore()
        await store.delete(BlockFactory().cid)

    @pytest.mark.trio
    async def test_put_duplicate_block(self):
        store = MemoryBlockStore()
        block = BlockFactory()

        await store.put(block)
        await store.put(block)

        assert store.get_all_cids() == [block.cid]

    @pytest.mark.trio
    async def test_put_many(self):
        store = MemoryBlockStore()
        blocks = BlockFactory.build_batch(5)

        await store.put_many(iter(blocks))

        assert store.size() == 5
        for block in blocks:
            assert await store.get(block.cid) == block
