"""DirectoryService — ancestor creation, emptiness checks, listings."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import func
from sqlmodel import select

from blockfs.models.entries import EntryKind

from .dialect import insert_ignore
from .exceptions import KindConflictError
from .utils import ancestors, escape_like, is_direct_child, split_path

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from blockfs.models.entries import EntryBase

logger = logging.getLogger(__name__)


class DirectoryService:
    """Dialect-aware directory creation and prefix queries.

    Uses ``insert_ignore`` from ``dialect.py`` so creating a directory that
    already exists is a no-op rather than an error.  Paths must already be
    normalized.
    """

    def __init__(self, entry_model: type[EntryBase], dialect: str = "sqlite") -> None:
        self._entry_model = entry_model
        self.dialect = dialect

    def _descendant_conditions(self, path: str) -> list[Any]:
        # LIKE narrows the scan; the substr comparison keeps the match exact
        # where LIKE is case-insensitive (SQLite).
        model = self._entry_model
        prefix = path + "/"
        return [
            model.path.like(escape_like(path) + "/%", escape="\\"),  # type: ignore[union-attr]
            func.substr(model.path, 1, len(prefix)) == prefix,
        ]

    async def ensure_dirs(self, session: AsyncSession, paths: list[str]) -> list[str]:
        """Create a Directory entry for each of *paths*, in order, where absent.

        Returns the paths that were created.  Raises ``KindConflictError``
        if one of them already exists as a file.
        """
        model = self._entry_model
        created: list[str] = []
        for dir_path in paths:
            now = datetime.now(UTC)
            rowcount = await insert_ignore(
                session,
                self.dialect,
                values={
                    "path": dir_path,
                    "kind": EntryKind.DIRECTORY.value,
                    "size": None,
                    "created_at": now,
                    "updated_at": now,
                },
                conflict_keys=["path"],
                model=model,
            )
            if rowcount > 0:
                created.append(dir_path)
                continue

            result = await session.execute(
                select(model.kind).where(model.path == dir_path)  # type: ignore[arg-type]
            )
            if result.scalar_one() != EntryKind.DIRECTORY.value:
                raise KindConflictError(f"Path exists as file: {dir_path}")

        if created:
            logger.debug("Created directories: %s", created)
        return created

    async def ensure_parent_dirs(self, session: AsyncSession, path: str) -> list[str]:
        """Ensure every ancestor of *path* exists as a directory."""
        return await self.ensure_dirs(session, ancestors(path))

    async def mkdir(self, session: AsyncSession, path: str) -> list[str]:
        """Ensure *path* and all its ancestors exist as directories."""
        return await self.ensure_dirs(session, [*ancestors(path), path])

    async def has_descendants(self, session: AsyncSession, path: str) -> bool:
        """True when any entry lies below *path* at any depth."""
        model = self._entry_model
        result = await session.execute(
            select(model.path).where(*self._descendant_conditions(path)).limit(1)  # type: ignore[arg-type]
        )
        return result.first() is not None

    async def list_children(self, session: AsyncSession, path: str) -> list[str]:
        """Names of entries exactly one segment below *path*, sorted."""
        model = self._entry_model
        result = await session.execute(
            select(model.path).where(  # type: ignore[arg-type]
                *self._descendant_conditions(path),
                model.path.not_like(escape_like(path) + "/%/%", escape="\\"),  # type: ignore[union-attr]
            )
        )
        names = [split_path(child)[1] for (child,) in result.all() if is_direct_child(path, child)]
        return sorted(names)
