"""MetadataService — entry lookup and stat conversion."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlmodel import select

from blockfs.models.entries import EntryKind

from .exceptions import PathNotFoundError
from .types import FileStat
from .utils import ensure_utc

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from blockfs.models.entries import EntryBase


class MetadataService:
    """Stateless helpers for path catalog lookup and conversion.

    Receives the concrete entry model at construction so callers can
    use custom SQLModel subclasses.  Paths must already be normalized.
    """

    def __init__(self, entry_model: type[EntryBase]) -> None:
        self._entry_model = entry_model

    async def get_entry(self, session: AsyncSession, path: str) -> EntryBase | None:
        """Get an entry by path, or ``None``.

        Rows are refreshed from the database, since writes go through core
        statements that bypass the identity map.
        """
        model = self._entry_model
        result = await session.execute(
            select(model).where(model.path == path).execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def require_file(self, session: AsyncSession, path: str) -> EntryBase:
        """Return the File entry at *path* or raise ``PathNotFoundError``."""
        entry = await self.get_entry(session, path)
        if entry is None or not entry.is_file:
            raise PathNotFoundError(f"No such file: {path}")
        return entry

    async def require_directory(self, session: AsyncSession, path: str) -> EntryBase:
        """Return the Directory entry at *path* or raise ``PathNotFoundError``."""
        entry = await self.get_entry(session, path)
        if entry is None or not entry.is_directory:
            raise PathNotFoundError(f"No such directory: {path}")
        return entry

    @staticmethod
    def entry_to_stat(entry: EntryBase) -> FileStat:
        """Convert an entry record to FileStat."""
        kind = EntryKind(entry.kind)
        return FileStat(
            path=entry.path,
            kind=kind,
            size=entry.size if kind is EntryKind.FILE else None,
            created_at=ensure_utc(entry.created_at),
            updated_at=ensure_utc(entry.updated_at),
        )
