"""Standalone orchestration functions for filesystem operations.

Each function takes a session plus the services it needs as parameters.
None of them commits: the caller owns the transaction, so every
statement an operation issues commits or rolls back together.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from blockfs.models.entries import EntryKind

from .blocks import assemble_blocks
from .dialect import upsert
from .exceptions import (
    ContentDecodeError,
    DirectoryNotEmptyError,
    KindConflictError,
    PathNotFoundError,
)
from .metadata import MetadataService
from .types import FileStat, WriteResult
from .utils import ensure_utc, normalize_path, require_valid_path, validate_path

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from blockfs.models.entries import EntryBase

    from .blocks import BlockService
    from .directories import DirectoryService

logger = logging.getLogger(__name__)


def encode_content(content: str | bytes | bytearray | memoryview) -> bytes:
    """Return *content* as bytes, encoding text as UTF-8."""
    if isinstance(content, str):
        return content.encode("utf-8")
    return bytes(content)


async def write_file(
    path: str,
    content: str | bytes | bytearray | memoryview,
    session: AsyncSession,
    *,
    metadata: MetadataService,
    directories: DirectoryService,
    blocks: BlockService,
    entry_model: type[EntryBase],
) -> WriteResult:
    """Orchestrate a file write: validate → parents → entry → replace blocks."""
    path = require_valid_path(path)
    data = encode_content(content)

    existing = await metadata.get_entry(session, path)
    if existing is not None and existing.is_directory:
        raise KindConflictError(f"Path is a directory: {path}")

    await directories.ensure_parent_dirs(session, path)

    now = datetime.now(UTC)
    updated_at = now if existing is None else max(now, ensure_utc(existing.updated_at))
    # created_at is only written on insert; a replace keeps the original.
    await upsert(
        session,
        directories.dialect,
        values={
            "path": path,
            "kind": EntryKind.FILE.value,
            "size": len(data),
            "created_at": now,
            "updated_at": updated_at,
        },
        conflict_keys=["path"],
        model=entry_model,
        update_keys=["size", "updated_at"],
    )
    created = existing is None

    count = await blocks.replace_blocks(session, path, data)

    logger.debug(
        "%s %s (%d bytes, %d blocks)", "Created" if created else "Replaced", path, len(data), count
    )
    return WriteResult(path=path, size=len(data), blocks=count, created=created)


async def read_file(
    path: str,
    encoding: str | None,
    session: AsyncSession,
    *,
    metadata: MetadataService,
    blocks: BlockService,
) -> bytes | str:
    """Orchestrate a file read: validate → lookup → fetch blocks → reassemble."""
    path = require_valid_path(path)
    entry = await metadata.require_file(session, path)
    stored = await blocks.list_blocks(session, path)
    data = assemble_blocks(entry.size or 0, stored, path)
    if encoding is None:
        return data
    try:
        return data.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise ContentDecodeError(f"Cannot decode {path} as {encoding}: {e}") from e


async def unlink(
    path: str,
    session: AsyncSession,
    *,
    metadata: MetadataService,
    blocks: BlockService,
) -> None:
    """Delete a File entry together with its blocks."""
    path = require_valid_path(path)
    entry = await metadata.require_file(session, path)
    removed = await blocks.delete_blocks(session, path)
    await session.delete(entry)
    await session.flush()
    logger.debug("Unlinked %s (%d blocks)", path, removed)


async def mkdir(
    path: str,
    session: AsyncSession,
    *,
    directories: DirectoryService,
) -> list[str]:
    """Create *path* and any missing ancestors. Returns the paths created."""
    path = require_valid_path(path)
    return await directories.mkdir(session, path)


async def rmdir(
    path: str,
    session: AsyncSession,
    *,
    metadata: MetadataService,
    directories: DirectoryService,
) -> None:
    """Delete an empty Directory entry."""
    path = require_valid_path(path)
    entry = await metadata.require_directory(session, path)
    if await directories.has_descendants(session, path):
        raise DirectoryNotEmptyError(f"Directory not empty: {path}")
    await session.delete(entry)
    await session.flush()
    logger.debug("Removed directory %s", path)


async def readdir(
    path: str,
    session: AsyncSession,
    *,
    metadata: MetadataService,
    directories: DirectoryService,
) -> list[str]:
    """Names of the direct children of a directory, sorted."""
    path = require_valid_path(path)
    await metadata.require_directory(session, path)
    return await directories.list_children(session, path)


async def stat(
    path: str,
    session: AsyncSession,
    *,
    metadata: MetadataService,
) -> FileStat:
    """Metadata for the entry at *path*, file or directory."""
    path = require_valid_path(path)
    entry = await metadata.get_entry(session, path)
    if entry is None:
        raise PathNotFoundError(f"No such file or directory: {path}")
    return MetadataService.entry_to_stat(entry)


async def exists(
    path: str,
    session: AsyncSession,
    *,
    metadata: MetadataService,
) -> bool:
    """Check whether any entry exists at *path*."""
    valid, _ = validate_path(path)
    if not valid:
        return False
    return await metadata.get_entry(session, normalize_path(path)) is not None
