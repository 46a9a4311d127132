"""
Collaborator interfaces consumed by the block service.
"""

from abc import (
    ABC,
    abstractmethod,
)
from collections.abc import (
    AsyncIterator,
    Iterable,
)

from .block import Block


class IBlockStore(ABC):
    """
    Durable local mapping from CID to block.

    Implementations may be shared by several consumers; they own their own
    locking and transaction discipline.
    """

    @abstractmethod
    async def put(self, block: Block) -> None:
        """
        Store a block.

        :param block: the block to store
        """

    @abstractmethod
    async def put_many(self, blocks: Iterable[Block]) -> None:
        """
        Store several blocks in one batched call.

        Whether the batch is all-or-nothing is up to the implementation.

        :param blocks: the blocks to store
        """

    @abstractmethod
    async def get(self, cid: bytes) -> Block:
        """
        Retrieve a block by CID.

        :param cid: the CID of the block
        :return: the stored block
        :raises BlockNotFoundError: if the block is not held
        """

    @abstractmethod
    async def has(self, cid: bytes) -> bool:
        """
        :param cid: the CID of the block
        :return: whether the block is held
        """

    @abstractmethod
    async def delete(self, cid: bytes) -> None:
        """
        Remove a block. Deleting an absent block is not an error.

        :param cid: the CID of the block
        """


class IExchange(ABC):
    """
    Network-aware block provider.

    An exchange consults its own local cache before asking the network, and
    owns any retry, timeout and ordering policy of its retrievals.
    """

    @abstractmethod
    async def put(self, block: Block) -> None:
        """
        Make a block available, locally and to peers that want it.

        :param block: the block to provide
        """

    @abstractmethod
    async def put_many(self, blocks: Iterable[Block]) -> None:
        """
        :param blocks: the blocks to provide
        """

    @abstractmethod
    async def get(self, cid: bytes) -> Block:
        """
        Retrieve a block, from the local cache or from peers.

        :param cid: the CID of the block
        :return: the block
        :raises BlockNotFoundError: if no source could provide the block
        :raises TimeoutError: if the retrieval timed out
        """

    @abstractmethod
    def get_many(self, cids: Iterable[bytes]) -> AsyncIterator[Block]:
        """
        Retrieve several blocks.

        Delivery order and parallelism are implementation defined.

        :param cids: the CIDs to retrieve
        :return: a single-pass async iterator over the retrieved blocks
        """
