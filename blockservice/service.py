"""
Block service: routes block operations to a local store or an exchange.

A service runs in one of two modes, fixed when it is built:

- :class:`Offline` - every operation goes to the local block store.
- :class:`Online` - reads and writes go to the exchange, which checks its own
  local cache before asking peers. Deletes still go to the local store, since
  there is no network-wide delete.

The service keeps no state beyond its mode. It never retries, never falls
back from the exchange to the store, and never wraps collaborator errors.
"""

from collections.abc import (
    AsyncIterator,
    Iterable,
)
from dataclasses import dataclass
import logging

from .abc import (
    IBlockStore,
    IExchange,
)
from .block import Block

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Offline:
    """Local-store-only mode."""

    store: IBlockStore


@dataclass(frozen=True)
class Online:
    """Exchange-backed mode."""

    store: IBlockStore
    exchange: IExchange


BlockServiceMode = Offline | Online


class BlockService:
    """
    Hybrid block access layer.

    Stores blocks in a local block store and, when an exchange is supplied,
    routes reads and writes through that exchange so blocks missing locally
    can be fetched from the network. To run offline, leave ``exchange`` unset.
    """

    _mode: BlockServiceMode

    def __init__(self, store: IBlockStore, exchange: IExchange | None = None) -> None:
        """
        :param store: the local block store, possibly shared with others
        :param exchange: the network exchange; ``None`` for offline mode
        """
        if exchange is not None:
            self._mode = Online(store, exchange)
        else:
            self._mode = Offline(store)
        logger.debug("Block service created (mode: %s)", type(self._mode).__name__)

    @classmethod
    def from_mode(cls, mode: BlockServiceMode) -> "BlockService":
        if isinstance(mode, Online):
            return cls(mode.store, mode.exchange)
        return cls(mode.store)

    @property
    def mode(self) -> BlockServiceMode:
        return self._mode

    @property
    def store(self) -> IBlockStore:
        return self._mode.store

    @property
    def exchange(self) -> IExchange | None:
        if isinstance(self._mode, Online):
            return self._mode.exchange
        return None

    def online(self) -> bool:
        """Return whether the service has an exchange."""
        return isinstance(self._mode, Online)

    async def put(self, block: Block) -> None:
        """
        Add a block.

        :param block: an immutable block of data
        """
        mode = self._mode
        if isinstance(mode, Online):
            logger.debug("put %r via exchange", block.cid)
            return await mode.exchange.put(block)
        logger.debug("put %r to local store", block.cid)
        return await mode.store.put(block)

    async def put_many(self, blocks: Iterable[Block]) -> None:
        """
        Add several blocks in one batched call.

        The iterable is handed to the active collaborator as is.

        :param blocks: the blocks to add
        """
        mode = self._mode
        if isinstance(mode, Online):
            logger.debug("put_many via exchange")
            return await mode.exchange.put_many(blocks)
        logger.debug("put_many to local store")
        return await mode.store.put_many(blocks)

    async def get(self, cid: bytes) -> Block:
        """
        Return a block by CID.

        Online, the exchange checks its local cache and then the network.

        :param cid: the content identifier of the block
        :raises BlockNotFoundError: if the active path does not have the block
        """
        mode = self._mode
        if isinstance(mode, Online):
            logger.debug("get %r via exchange", cid)
            return await mode.exchange.get(cid)
        logger.debug("get %r from local store", cid)
        return await mode.store.get(cid)

    def get_many(self, cids: Iterable[bytes]) -> AsyncIterator[Block]:
        """
        Return a lazy, single-pass iterator over several blocks.

        Online, the exchange's own iterator is returned untouched, so its
        ordering and concurrency apply. Offline, blocks are fetched from the
        local store one at a time in input order, each only when the consumer
        asks for it; the first failure ends the iteration.

        :param cids: the content identifiers of the blocks
        """
        mode = self._mode
        if isinstance(mode, Online):
            logger.debug("get_many via exchange")
            return mode.exchange.get_many(cids)
        return self._get_many_from_store(mode.store, cids)

    async def _get_many_from_store(
        self, store: IBlockStore, cids: Iterable[bytes]
    ) -> AsyncIterator[Block]:
        for cid in cids:
            logger.debug("get_many: fetching %r from local store", cid)
            yield await store.get(cid)

    async def delete(self, cid: bytes) -> None:
        """
        Remove a block from the local block store.

        Never touches the exchange, even when online.

        :param cid: the content identifier of the block
        """
        logger.debug("delete %r from local store", cid)
        return await self._mode.store.delete(cid)
