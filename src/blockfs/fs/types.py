"""Result types: FileStat, WriteResult."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from blockfs.models.entries import EntryKind

if TYPE_CHECKING:
    from datetime import datetime


@dataclass
class FileStat:
    """File/directory metadata."""

    path: str
    kind: EntryKind
    size: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_file(self) -> bool:
        return self.kind is EntryKind.FILE

    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


@dataclass
class WriteResult:
    """Result of a write operation."""

    path: str
    size: int
    blocks: int
    created: bool = False
