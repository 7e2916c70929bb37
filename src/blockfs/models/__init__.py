"""SQLModel database models for blockfs."""

from blockfs.models.blocks import Block, BlockBase
from blockfs.models.entries import Entry, EntryBase, EntryKind

__all__ = [
    "Block",
    "BlockBase",
    "Entry",
    "EntryBase",
    "EntryKind",
]
