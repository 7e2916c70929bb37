"""Path utilities and SQL pattern helpers."""

from __future__ import annotations

import posixpath
from datetime import UTC, datetime

from .exceptions import InvalidPathError

MAX_PATH_LENGTH = 4096
MAX_NAME_LENGTH = 255

# =============================================================================
# Path Utilities
# =============================================================================


def normalize_path(path: str) -> str:
    """Normalize a root-relative virtual path.

    - Strips surrounding whitespace
    - Removes leading and trailing slashes
    - Removes double slashes and ``.`` segments
    - Resolves ``..`` where it stays inside the root

    Examples:
        normalize_path("a/b.txt") -> "a/b.txt"
        normalize_path("/a//b.txt") -> "a/b.txt"
        normalize_path("a/./b/") -> "a/b"
        normalize_path("a/../b") -> "b"
        normalize_path("") -> ""
    """
    if not path:
        return ""

    path = path.strip().strip("/")
    if not path:
        return ""

    path = posixpath.normpath(path)
    if path == ".":
        return ""

    return path.strip("/")


def split_path(path: str) -> tuple[str, str]:
    """Split path into (parent_dir, name).

    Examples:
        split_path("a/b/c.txt") -> ("a/b", "c.txt")
        split_path("a") -> ("", "a")
        split_path("") -> ("", "")
    """
    path = normalize_path(path)
    if "/" not in path:
        return "", path
    parent, _, name = path.rpartition("/")
    return parent, name


def parent_path(path: str) -> str:
    """Return the parent of *path*, or ``""`` for a root-level path."""
    return split_path(path)[0]


def root_segment(path: str) -> str:
    """Return the first segment of *path* (``""`` when there is none)."""
    return normalize_path(path).split("/", 1)[0]


def ancestors(path: str) -> list[str]:
    """Return every proper prefix of *path*, root first.

    Examples:
        ancestors("a/b/c.txt") -> ["a", "a/b"]
        ancestors("a") -> []
    """
    parts = normalize_path(path).split("/")
    return ["/".join(parts[:i]) for i in range(1, len(parts))]


def is_direct_child(parent: str, candidate: str) -> bool:
    """True when *candidate* lies exactly one segment below *parent*."""
    prefix = parent + "/"
    if not candidate.startswith(prefix):
        return False
    rest = candidate[len(prefix):]
    return bool(rest) and "/" not in rest


def validate_path(path: str) -> tuple[bool, str]:
    """Validate a path for security and compatibility issues.

    Returns:
        (is_valid, error_message) - error_message is empty if valid
    """
    if "\x00" in path:
        return False, "Path contains null bytes"

    # Reject ASCII control characters (0x01-0x1f), whitespace controls included
    for ch in path:
        code = ord(ch)
        if 0x01 <= code <= 0x1F:
            return False, f"Path contains control character: 0x{code:02x}"

    if len(path) > MAX_PATH_LENGTH:
        return False, f"Path too long (max {MAX_PATH_LENGTH} characters)"

    normalized = normalize_path(path)
    if not normalized:
        return False, "Path is empty"

    if normalized == ".." or normalized.startswith("../"):
        return False, f"Path escapes the root: {path}"

    for name in normalized.split("/"):
        if len(name) > MAX_NAME_LENGTH:
            return False, f"Name too long (max {MAX_NAME_LENGTH} characters): {name[:32]}..."

    return True, ""


def require_valid_path(path: str) -> str:
    """Validate and normalize *path*, raising ``InvalidPathError`` on failure."""
    valid, error = validate_path(path)
    if not valid:
        raise InvalidPathError(error)
    return normalize_path(path)


# =============================================================================
# SQL helpers
# =============================================================================


def escape_like(value: str) -> str:
    r"""Escape ``LIKE`` wildcards in *value* for use with ``escape="\\"``."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops the offset on the way out)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
