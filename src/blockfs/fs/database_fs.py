"""DatabaseFileSystem — block-based SQL storage, stateless, no base class."""

from __future__ import annotations

from typing import TYPE_CHECKING

from . import operations
from .blocks import BlockService
from .directories import DirectoryService
from .exceptions import BlockFSError
from .metadata import MetadataService

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncConnection, AsyncSession

    from blockfs.models.blocks import BlockBase
    from blockfs.models.entries import EntryBase

    from .types import FileStat, WriteResult


class DatabaseFileSystem:
    """Database-backed file system — stateless, sessions provided per-operation.

    File content is split into fixed-size blocks stored one per row next
    to a path catalog of files and directories.  Works with SQLite and
    PostgreSQL.

    This class holds only configuration (dialect, models) and composed
    services.  It never begins, commits, or closes a transaction: the
    caller wraps each call in one, which is what makes a write's entry
    update and block replacement atomic.
    """

    def __init__(
        self,
        dialect: str = "sqlite",
        entry_model: type[EntryBase] | None = None,
        block_model: type[BlockBase] | None = None,
    ) -> None:
        from blockfs.models.blocks import Block
        from blockfs.models.entries import Entry

        em: type[EntryBase] = entry_model or Entry
        bm: type[BlockBase] = block_model or Block

        self.dialect = dialect
        self._entry_model = em
        self._block_model = bm

        # Composed services
        self.metadata = MetadataService(em)
        self.directories = DirectoryService(em, dialect)
        self.blocks = BlockService(bm)

    @property
    def entry_model(self) -> type[EntryBase]:
        return self._entry_model

    @property
    def block_model(self) -> type[BlockBase]:
        return self._block_model

    def _require_session(self, session: AsyncSession | None) -> AsyncSession:
        if session is None:
            raise BlockFSError("DatabaseFileSystem requires a session")
        return session

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    async def create_tables(self, conn: AsyncConnection) -> None:
        """Create the entry and block tables if they do not exist."""
        entry_table = self._entry_model.__table__  # type: ignore[unresolved-attribute]
        block_table = self._block_model.__table__  # type: ignore[unresolved-attribute]
        await conn.run_sync(lambda c: entry_table.create(c, checkfirst=True))
        await conn.run_sync(lambda c: block_table.create(c, checkfirst=True))

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    async def write_file(
        self,
        path: str,
        content: str | bytes | bytearray | memoryview,
        *,
        session: AsyncSession | None = None,
    ) -> WriteResult:
        sess = self._require_session(session)
        return await operations.write_file(
            path,
            content,
            sess,
            metadata=self.metadata,
            directories=self.directories,
            blocks=self.blocks,
            entry_model=self._entry_model,
        )

    async def read_file(
        self,
        path: str,
        encoding: str | None = None,
        *,
        session: AsyncSession | None = None,
    ) -> bytes | str:
        sess = self._require_session(session)
        return await operations.read_file(
            path,
            encoding,
            sess,
            metadata=self.metadata,
            blocks=self.blocks,
        )

    async def unlink(
        self,
        path: str,
        *,
        session: AsyncSession | None = None,
    ) -> None:
        sess = self._require_session(session)
        await operations.unlink(path, sess, metadata=self.metadata, blocks=self.blocks)

    # ------------------------------------------------------------------
    # Directories
    # ------------------------------------------------------------------

    async def mkdir(
        self,
        path: str,
        *,
        session: AsyncSession | None = None,
    ) -> list[str]:
        sess = self._require_session(session)
        return await operations.mkdir(path, sess, directories=self.directories)

    async def rmdir(
        self,
        path: str,
        *,
        session: AsyncSession | None = None,
    ) -> None:
        sess = self._require_session(session)
        await operations.rmdir(
            path,
            sess,
            metadata=self.metadata,
            directories=self.directories,
        )

    async def readdir(
        self,
        path: str,
        *,
        session: AsyncSession | None = None,
    ) -> list[str]:
        sess = self._require_session(session)
        return await operations.readdir(
            path,
            sess,
            metadata=self.metadata,
            directories=self.directories,
        )

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    async def stat(
        self,
        path: str,
        *,
        session: AsyncSession | None = None,
    ) -> FileStat:
        sess = self._require_session(session)
        return await operations.stat(path, sess, metadata=self.metadata)

    async def exists(
        self,
        path: str,
        *,
        session: AsyncSession | None = None,
    ) -> bool:
        sess = self._require_session(session)
        return await operations.exists(path, sess, metadata=self.metadata)
