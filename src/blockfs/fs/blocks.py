"""Block codec and BlockService — fixed-size content blocks in the database."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import delete as sa_delete
from sqlalchemy import func, insert
from sqlmodel import select

from .exceptions import ConsistencyError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.ext.asyncio import AsyncSession

    from blockfs.models.blocks import BlockBase

BLOCK_SIZE: int = 4096
"""Bytes per block. Part of the storage format, not configurable."""


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------


def block_count(size: int) -> int:
    """Number of blocks needed to hold *size* bytes."""
    return -(-size // BLOCK_SIZE)


def split_into_blocks(data: bytes) -> list[tuple[int, bytes]]:
    """Split *data* into ``(index, payload)`` pairs of at most ``BLOCK_SIZE`` bytes.

    Empty input yields no blocks.
    """
    view = memoryview(data)
    return [
        (offset // BLOCK_SIZE, bytes(view[offset : offset + BLOCK_SIZE]))
        for offset in range(0, len(view), BLOCK_SIZE)
    ]


def assemble_blocks(size: int, blocks: Iterable[tuple[int, bytes]], path: str = "") -> bytes:
    """Rebuild *size* bytes of content from ``(index, payload)`` pairs.

    Blocks may arrive in any order; each payload is copied to offset
    ``index * BLOCK_SIZE`` of a buffer of exactly *size* bytes.  Raises
    ``ConsistencyError`` unless the indices are exactly ``0..n-1``, every
    non-final payload is full, and the payloads add up to *size*.
    """
    ordered = sorted(blocks, key=lambda b: b[0])
    expected = block_count(size)
    if len(ordered) != expected:
        raise ConsistencyError(
            f"Expected {expected} block(s) for {path or 'file'} of {size} bytes, "
            f"found {len(ordered)}"
        )

    buffer = bytearray(size)
    for position, (index, payload) in enumerate(ordered):
        if index != position:
            raise ConsistencyError(f"Missing block {position} for {path or 'file'}")
        offset = index * BLOCK_SIZE
        want = min(BLOCK_SIZE, size - offset)
        if len(payload) != want:
            raise ConsistencyError(
                f"Block {index} of {path or 'file'} holds {len(payload)} bytes, expected {want}"
            )
        buffer[offset : offset + want] = payload

    return bytes(buffer)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class BlockService:
    """Stateless helpers for block record CRUD.

    Receives the concrete block model at construction so callers can
    use custom SQLModel subclasses.  Never creates, commits, or closes
    sessions — callers are responsible for session lifecycle.
    """

    def __init__(self, block_model: type[BlockBase]) -> None:
        self._block_model = block_model

    @property
    def block_model(self) -> type[BlockBase]:
        return self._block_model

    async def replace_blocks(
        self,
        session: AsyncSession,
        path: str,
        content: bytes,
    ) -> int:
        """Delete all blocks for *path*, insert blocks for *content*. Returns count inserted."""
        await self.delete_blocks(session, path)

        rows = [
            {"path": path, "block_index": index, "payload": payload}
            for index, payload in split_into_blocks(content)
        ]
        if rows:
            await session.execute(insert(self._block_model), rows)
        return len(rows)

    async def delete_blocks(self, session: AsyncSession, path: str) -> int:
        """Delete all blocks for *path*. Returns count deleted."""
        model = self._block_model
        result = await session.execute(
            sa_delete(model).where(model.path == path)  # type: ignore[arg-type]
        )
        return result.rowcount  # type: ignore[return-value]

    async def list_blocks(self, session: AsyncSession, path: str) -> list[tuple[int, bytes]]:
        """List ``(index, payload)`` for all blocks of *path*, ordered by index."""
        model = self._block_model
        result = await session.execute(
            select(model.block_index, model.payload)  # type: ignore[arg-type]
            .where(model.path == path)  # type: ignore[arg-type]
            .order_by(model.block_index)  # type: ignore[arg-type]
        )
        return [(row[0], row[1]) for row in result.all()]

    async def count_blocks(self, session: AsyncSession, path: str) -> int:
        """Number of stored blocks for *path*."""
        model = self._block_model
        result = await session.execute(
            select(func.count()).select_from(model).where(model.path == path)  # type: ignore[arg-type]
        )
        return result.scalar_one()
