"""Block model — DB-backed fixed-size content blocks.

Provides ``BlockBase`` (non-table base) and ``Block`` (concrete table).
A subclass with a custom ``__tablename__`` should redeclare ``path`` with a
foreign key to its own entry table.
"""

from __future__ import annotations

from sqlalchemy import LargeBinary
from sqlmodel import Field, SQLModel


class BlockBase(SQLModel):
    """Base fields for a content block. Subclass with ``table=True`` for a concrete table.

    Block ``block_index`` covers bytes ``[block_index * BLOCK_SIZE,
    (block_index + 1) * BLOCK_SIZE)`` of the file at ``path``.
    """

    path: str = Field(primary_key=True)
    block_index: int = Field(primary_key=True)
    payload: bytes = Field(default=b"", sa_type=LargeBinary)  # type: ignore[invalid-argument-type]


class Block(BlockBase, table=True):
    """Default block table — ``blockfs_blocks``."""

    __tablename__ = "blockfs_blocks"

    path: str = Field(
        primary_key=True,
        foreign_key="blockfs_entries.path",
        ondelete="CASCADE",
    )
