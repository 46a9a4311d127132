import pytest

from blockservice.blockstore.memory import MemoryBlockStore
from tests.factories import BlockFactory


@pytest.fixture
def store():
    return MemoryBlockStore()


@pytest.fixture
def blocks():
    return BlockFactory.build_batch(3)
