"""Shard — one database, one owner, operations applied strictly in order."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, TypeVar

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from blockfs.config import BlockFSConfig

from .database_fs import DatabaseFileSystem
from .dialect import dialect_from_url, get_dialect
from .exceptions import StorageError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from blockfs.models.blocks import BlockBase
    from blockfs.models.entries import EntryBase

    from .types import FileStat, WriteResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _install_sqlite_pragmas(
    engine: AsyncEngine, *, file_backed: bool, busy_timeout_ms: int
) -> None:
    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection: object, connection_record: object) -> None:
        cursor = dbapi_connection.cursor()  # type: ignore[union-attr]
        if file_backed:
            cursor.execute("PRAGMA journal_mode=WAL")
            result = cursor.fetchone()
            if result[0].lower() != "wal":
                logger.warning("WAL mode not active, got: %s", result[0])
        cursor.execute(f"PRAGMA busy_timeout={int(busy_timeout_ms)}")
        cursor.execute("PRAGMA synchronous=FULL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class Shard:
    """Single-owner executor for one partition of the path namespace.

    Owns the engine and session factory of the shard's database, created
    lazily on first use.  ``run()`` holds the shard lock for the whole
    session, so operations never interleave and are applied in arrival
    order (``asyncio.Lock`` wakes waiters first-in, first-out).  Each
    operation runs in its own transaction: it commits when the operation
    returns and rolls back when it raises.
    """

    def __init__(
        self,
        shard_id: str,
        config: BlockFSConfig | None = None,
        *,
        entry_model: type[EntryBase] | None = None,
        block_model: type[BlockBase] | None = None,
    ) -> None:
        self.shard_id = shard_id
        self.config = config or BlockFSConfig()
        self.url = self.config.url_for(shard_id)
        self.backend = DatabaseFileSystem(
            dialect=dialect_from_url(self.url),
            entry_model=entry_model,
            block_model=block_model,
        )

        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._init_lock = asyncio.Lock()
        self._lock = asyncio.Lock()

    @property
    def engine(self) -> AsyncEngine | None:
        """The async engine, available after ``open()`` or the first operation."""
        return self._engine

    @property
    def is_open(self) -> bool:
        return self._session_factory is not None

    # ------------------------------------------------------------------
    # Database Management
    # ------------------------------------------------------------------

    async def _ensure_db(self) -> None:
        """Initialize database if needed."""
        if self._session_factory is not None:
            return
        async with self._init_lock:
            if self._session_factory is not None:
                return

            file_backed = self.config.url_template is None and self.config.data_dir is not None
            try:
                if file_backed:
                    assert self.config.data_dir is not None
                    self.config.data_dir.mkdir(parents=True, exist_ok=True)

                engine = create_async_engine(self.url, echo=self.config.echo)
                if self.backend.dialect == "sqlite":
                    _install_sqlite_pragmas(
                        engine,
                        file_backed=file_backed,
                        busy_timeout_ms=self.config.busy_timeout_ms,
                    )

                async with engine.begin() as conn:
                    await self.backend.create_tables(conn)
            except (OSError, SQLAlchemyError) as e:
                logger.error("Failed to open shard %s: %s", self.shard_id, e, exc_info=True)
                raise StorageError(f"Failed to open shard {self.shard_id}: {e}") from e

            self._engine = engine
            self._session_factory = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
            logger.info("Opened shard %s (%s)", self.shard_id, get_dialect(engine))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def open(self) -> None:
        """Create the engine and tables now instead of on first use."""
        await self._ensure_db()

    async def close(self) -> None:
        """Wait for the running operation, then dispose of the engine."""
        async with self._lock:
            if self._engine is not None:
                await self._engine.dispose()
                self._engine = None
                self._session_factory = None
                logger.info("Closed shard %s", self.shard_id)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def run(self, op: Callable[..., Awaitable[T]], *args: Any) -> T:
        """Run ``op(*args, session=...)`` alone, inside one transaction.

        Database failures surface as ``StorageError``; every other
        exception propagates unchanged after the rollback.
        """
        async with self._lock:
            await self._ensure_db()
            assert self._session_factory is not None
            try:
                async with self._session_factory() as session, session.begin():
                    return await op(*args, session=session)
            except SQLAlchemyError as e:
                logger.error("Storage failure on shard %s: %s", self.shard_id, e, exc_info=True)
                raise StorageError(f"Storage failure on shard {self.shard_id}: {e}") from e

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def write_file(
        self, path: str, content: str | bytes | bytearray | memoryview
    ) -> WriteResult:
        return await self.run(self.backend.write_file, path, content)

    async def read_file(self, path: str, encoding: str | None = None) -> bytes | str:
        return await self.run(self.backend.read_file, path, encoding)

    async def unlink(self, path: str) -> None:
        await self.run(self.backend.unlink, path)

    async def mkdir(self, path: str) -> list[str]:
        return await self.run(self.backend.mkdir, path)

    async def rmdir(self, path: str) -> None:
        await self.run(self.backend.rmdir, path)

    async def readdir(self, path: str) -> list[str]:
        return await self.run(self.backend.readdir, path)

    async def stat(self, path: str) -> FileStat:
        return await self.run(self.backend.stat, path)

    async def exists(self, path: str) -> bool:
        return await self.run(self.backend.exists, path)
