"""
SQLite block store implementation.

This provides durable block storage in a single SQLite database file.
"""

from collections.abc import Iterable
import logging
from pathlib import Path
import sqlite3

import trio

from blockservice.abc import IBlockStore
from blockservice.block import Block
from blockservice.errors import (
    BlockNotFoundError,
    StoreClosedError,
    StoreError,
)

logger = logging.getLogger(__name__)


class SQLiteBlockStore(IBlockStore):
    """
    SQLite-based block store.

    The database is opened lazily on first use. Supports the async context
    manager protocol for proper resource management.
    """

    def __init__(self, path: str | Path):
        """
        Initialize SQLite block store.

        Args:
            path: Path to the SQLite database file

        """
        self.path = Path(path)
        self.connection: sqlite3.Connection | None = None
        self._lock = trio.Lock()
        self._closed = False

    async def _ensure_connection(self) -> sqlite3.Connection:
        """
        Ensure database connection is established.

        :raises StoreClosedError: If the store is closed
        :raises StoreError: If the database cannot be opened
        """
        if self._closed:
            raise StoreClosedError(f"Block store {self.path} is closed")

        if self.connection is None:
            async with self._lock:
                if self.connection is None:
                    try:
                        self.connection = self._connect()
                    except (OSError, sqlite3.Error) as e:
                        raise StoreError(
                            f"Cannot open block store {self.path}: {e}"
                        ) from e
                    logger.debug(f"Opened SQLite block store at {self.path}")
        return self.connection

    def _connect(self) -> sqlite3.Connection:
        # Create directory if it doesn't exist
        self.path.parent.mkdir(parents=True, exist_ok=True)

        # Readable/writable by owner only
        if not self.path.exists():
            self.path.touch(mode=0o600)

        connection = sqlite3.connect(
            str(self.path),
            check_same_thread=False,
            timeout=30.0,
        )
        cursor = connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS blocks (
                cid BLOB PRIMARY KEY,
                data BLOB NOT NULL
            )
        """)
        connection.commit()
        return connection

    async def put(self, block: Block) -> None:
        """Store a block."""
        await self.put_many((block,))

    async def put_many(self, blocks: Iterable[Block]) -> None:
        """
        Store several blocks in a single transaction.

        Either every block is written or, on any failure, none is.
        """
        connection = await self._ensure_connection()
        try:
            connection.executemany(
                "INSERT OR REPLACE INTO blocks (cid, data) VALUES (?, ?)",
                ((block.cid, block.data) for block in blocks),
            )
            connection.commit()
        except Exception as e:
            connection.rollback()
            if isinstance(e, sqlite3.Error):
                raise StoreError(f"Failed to store blocks: {e}") from e
            raise

    async def get(self, cid: bytes) -> Block:
        """Get a block by its CID."""
        row = await self._fetchone("SELECT data FROM blocks WHERE cid = ?", (cid,))
        if row is None:
            raise BlockNotFoundError(cid)
        return Block(cid, bytes(row[0]))

    async def has(self, cid: bytes) -> bool:
        """Check if a block exists."""
        row = await self._fetchone("SELECT 1 FROM blocks WHERE cid = ?", (cid,))
        return row is not None

    async def delete(self, cid: bytes) -> None:
        """Delete a block."""
        connection = await self._ensure_connection()
        try:
            connection.execute("DELETE FROM blocks WHERE cid = ?", (cid,))
            connection.commit()
        except sqlite3.Error as e:
            connection.rollback()
            raise StoreError(f"Failed to delete block {cid.hex()}: {e}") from e

    async def _fetchone(self, query: str, params: tuple[bytes, ...]) -> tuple | None:
        connection = await self._ensure_connection()
        try:
            return connection.execute(query, params).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Block store query failed: {e}") from e

    async def get_all_cids(self) -> list[bytes]:
        """Get all CIDs in the store."""
        connection = await self._ensure_connection()
        try:
            rows = connection.execute("SELECT cid FROM blocks").fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Block store query failed: {e}") from e
        return [bytes(row[0]) for row in rows]

    async def size(self) -> int:
        """Get the number of blocks in the store."""
        connection = await self._ensure_connection()
        try:
            return connection.execute("SELECT COUNT(*) FROM blocks").fetchone()[0]
        except sqlite3.Error as e:
            raise StoreError(f"Block store query failed: {e}") from e

    async def close(self) -> None:
        """
        Close the database connection.

        This method is idempotent and can be called multiple times safely.
        """
        async with self._lock:
            if self.connection and not self._closed:
                try:
                    self.connection.close()
                finally:
                    self.connection = None
            self._closed = True

    async def __aenter__(self) -> "SQLiteBlockStore":
        """Async context manager entry."""
        await self._ensure_connection()
        return self

    async def __aexit__(
        self, exc_type: type, exc_val: Exception, exc_tb: object
    ) -> None:
        """Async context manager exit."""
        await self.close()
