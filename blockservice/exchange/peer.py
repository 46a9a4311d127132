"""
In-process peer exchange.

Serves blocks from its own block store and, on a miss, asks a set of peer
block stores for them concurrently.
"""

from collections.abc import (
    AsyncIterator,
    Iterable,
    Sequence,
)
import itertools
import logging

import trio

from blockservice.abc import (
    IBlockStore,
    IExchange,
)
from blockservice.block import Block
from blockservice.blockstore.memory import MemoryBlockStore
from blockservice.cid import cid_to_string
from blockservice.config import ExchangeConfig
from blockservice.errors import (
    BlockNotFoundError,
    BlockTooLargeError,
    BlockUnavailableError,
    TimeoutError as ExchangeTimeoutError,
)

logger = logging.getLogger(__name__)


class PeerExchange(IExchange):
    """
    Exchange that falls back to peer block stores for missing blocks.

    Every retrieval checks the local block store first. Missing blocks are
    requested from all peers at once; the first valid answer wins, is cached
    locally, and the other requests are cancelled.
    """

    def __init__(
        self,
        block_store: IBlockStore | None = None,
        peers: Sequence[IBlockStore] = (),
        config: ExchangeConfig | None = None,
    ):
        """
        Initialize the peer exchange.

        Args:
            block_store: Local block cache (defaults to in-memory)
            peers: Block stores of the peers to fetch missing blocks from
            config: Exchange configuration (defaults to ``ExchangeConfig()``)

        """
        self.block_store = block_store or MemoryBlockStore()
        self.config = config or ExchangeConfig()
        self._peers: list[IBlockStore] = list(peers)
        self._limiter = trio.CapacityLimiter(self.config.max_concurrent_requests)

    @property
    def peers(self) -> tuple[IBlockStore, ...]:
        return tuple(self._peers)

    def add_peer(self, peer: IBlockStore) -> None:
        """Add a peer to fetch missing blocks from."""
        if peer not in self._peers:
            self._peers.append(peer)

    def remove_peer(self, peer: IBlockStore) -> None:
        """
        Stop fetching blocks from a peer.

        Raises:
            ValueError: If the peer is unknown

        """
        self._peers.remove(peer)

    def _check_size(self, block: Block) -> None:
        if block.size > self.config.max_block_size:
            raise BlockTooLargeError(
                f"Block size {block.size} exceeds maximum {self.config.max_block_size}"
            )

    async def put(self, block: Block) -> None:
        """
        Add a block to the local store.

        Raises:
            BlockTooLargeError: If the block exceeds maximum size

        """
        self._check_size(block)
        await self.block_store.put(block)
        logger.debug(f"Added block {cid_to_string(block.cid)} to store")

    async def put_many(self, blocks: Iterable[Block]) -> None:
        """
        Add several blocks to the local store.

        Every block is size-checked before any of them is stored.

        Raises:
            BlockTooLargeError: If any block exceeds maximum size

        """
        batch = list(blocks)
        for block in batch:
            self._check_size(block)
        await self.block_store.put_many(batch)
        logger.debug(f"Added {len(batch)} blocks to store")

    async def get(self, cid: bytes) -> Block:
        """
        Get a block, fetching from peers if not available locally.

        Args:
            cid: The CID of the block to fetch

        Returns:
            The block

        Raises:
            BlockUnavailableError: If no peer could provide the block
            TimeoutError: If the peers did not answer in time

        """
        try:
            return await self.block_store.get(cid)
        except BlockNotFoundError:
            logger.debug(f"Block {cid_to_string(cid)} not cached, asking peers")
        return await self._request_block(cid)

    async def _request_block(self, cid: bytes) -> Block:
        """Request a block from all peers, keeping the first valid answer."""
        peers = list(self._peers)
        if not peers:
            raise BlockUnavailableError(cid, f"No peers to fetch {cid.hex()} from")

        found: list[Block] = []

        async def ask(peer: IBlockStore, scope: trio.CancelScope) -> None:
            async with self._limiter:
                try:
                    block = await peer.get(cid)
                except BlockNotFoundError:
                    return
                except Exception as e:
                    logger.warning(f"Peer {peer!r} failed to provide {cid.hex()}: {e}")
                    return
            if not self._is_valid(cid, block, peer):
                return
            if not found:
                found.append(block)
                scope.cancel()

        try:
            with trio.fail_after(self.config.timeout):
                async with trio.open_nursery() as nursery:
                    for peer in peers:
                        nursery.start_soon(ask, peer, nursery.cancel_scope)
        except trio.TooSlowError as e:
            logger.error(f"Timeout waiting for block {cid.hex()}")
            raise ExchangeTimeoutError(
                f"Timeout waiting for block {cid.hex()[:16]}..."
            ) from e

        if not found:
            raise BlockUnavailableError(
                cid, f"None of {len(peers)} peers has block {cid.hex()[:16]}..."
            )

        block = found[0]
        await self.block_store.put(block)
        logger.info(f"Fetched block {cid_to_string(cid)} ({block.size} bytes)")
        return block

    def _is_valid(self, cid: bytes, block: Block, peer: IBlockStore) -> bool:
        if block.cid != cid:
            logger.warning(f"Peer {peer!r} answered {cid.hex()} with another block")
            return False
        if self.config.verify_blocks and not block.verify():
            logger.warning(f"Peer {peer!r} sent corrupt data for {cid.hex()}")
            return False
        return True

    async def get_many(self, cids: Iterable[bytes]) -> AsyncIterator[Block]:
        """
        Get several blocks, fetching them concurrently.

        CIDs are processed in windows of ``max_concurrent_requests``. Within a
        window, blocks are yielded in the order their retrieval completed, not
        in input order. The first failure of a window is raised once the
        blocks that completed before it have been yielded.
        """
        pending = iter(cids)
        while True:
            window = list(
                itertools.islice(pending, self.config.max_concurrent_requests)
            )
            if not window:
                return

            completed: list[Block | Exception] = []

            async def fetch(cid: bytes) -> None:
                try:
                    completed.append(await self.get(cid))
                except Exception as e:
                    completed.append(e)

            async with trio.open_nursery() as nursery:
                for cid in window:
                    nursery.start_soon(fetch, cid)

            for outcome in completed:
                if isinstance(outcome, Exception):
                    raise outcome
                yield outcome
