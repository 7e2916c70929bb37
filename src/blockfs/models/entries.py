"""Entry model — one path catalog row per file or directory.

Provides ``EntryBase`` (non-table base) and ``Entry`` (concrete table).
Subclass ``EntryBase`` with ``table=True`` and a custom ``__tablename__``
to use a different table name per backend.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from sqlalchemy import CheckConstraint, DateTime
from sqlmodel import Field, SQLModel


class EntryKind(str, Enum):
    """Kind of a path catalog entry. Fixed for the lifetime of the row."""

    FILE = "file"
    DIRECTORY = "directory"


class EntryBase(SQLModel):
    """Base fields for a path catalog entry. Subclass with ``table=True`` for a concrete table.

    ``path`` is root-relative with no leading or trailing slash.  ``size``
    is the byte length of a file's content and ``None`` for directories.
    """

    path: str = Field(primary_key=True)
    kind: str = Field(default=EntryKind.FILE.value)
    size: int | None = Field(default=None)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),  # type: ignore[invalid-argument-type]
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),  # type: ignore[invalid-argument-type]
    )

    @property
    def is_directory(self) -> bool:
        return self.kind == EntryKind.DIRECTORY.value

    @property
    def is_file(self) -> bool:
        return self.kind == EntryKind.FILE.value


class Entry(EntryBase, table=True):
    """Default path catalog table — ``blockfs_entries``."""

    __tablename__ = "blockfs_entries"
    __table_args__ = (
        CheckConstraint("kind IN ('file', 'directory')", name="ck_blockfs_entries_kind"),
    )
