"""BlockFSConfig: where each shard's database lives.

Every shard (first path segment) gets its own database.  The URL is chosen
in this order:

1. ``url_template`` with ``{shard}`` replaced by the shard slug, e.g.
   ``"sqlite+aiosqlite:////var/lib/blockfs/{shard}.db"``.
2. ``{data_dir}/{shard}.db`` as an SQLite file when ``data_dir`` is set.
3. A private in-memory SQLite database (nothing persists).

Environment variables (read by ``BlockFSConfig.from_env``):

    BLOCKFS_DATA_DIR        # directory for per-shard SQLite files
    BLOCKFS_URL_TEMPLATE    # overrides BLOCKFS_DATA_DIR
    BLOCKFS_ECHO            # "1"/"true" to log SQL statements
"""

from __future__ import annotations

import hashlib
import os
import re
from dataclasses import dataclass
from pathlib import Path

_SAFE_SLUG = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]{0,127}$")
_MEMORY_URL = "sqlite+aiosqlite://"


def _env_flag(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def shard_slug(shard_id: str) -> str:
    """Filename-safe name for *shard_id*: itself if safe, else its SHA-256 hex."""
    if _SAFE_SLUG.match(shard_id):
        return shard_id
    return hashlib.sha256(shard_id.encode()).hexdigest()


@dataclass
class BlockFSConfig:
    """Storage configuration shared by every shard."""

    data_dir: Path | None = None
    """Directory holding one SQLite file per shard. ``None`` means in-memory."""

    url_template: str | None = None
    """Database URL containing ``{shard}``. Takes precedence over ``data_dir``."""

    echo: bool = False
    """Pass-through to ``create_async_engine(echo=...)``."""

    busy_timeout_ms: int = 5000
    """SQLite ``busy_timeout`` pragma."""

    def __post_init__(self) -> None:
        if self.data_dir is not None:
            self.data_dir = Path(self.data_dir).expanduser()
        if self.url_template is not None and "{shard}" not in self.url_template:
            msg = "url_template must contain a '{shard}' placeholder"
            raise ValueError(msg)

    @classmethod
    def from_env(
        cls,
        data_dir: str | Path | None = None,
        url_template: str | None = None,
    ) -> BlockFSConfig:
        """Build a config from ``BLOCKFS_*`` variables; explicit arguments win."""
        env_dir = os.environ.get("BLOCKFS_DATA_DIR")
        resolved_dir = data_dir or env_dir or None
        return cls(
            data_dir=Path(resolved_dir) if resolved_dir else None,
            url_template=url_template or os.environ.get("BLOCKFS_URL_TEMPLATE") or None,
            echo=_env_flag(os.environ.get("BLOCKFS_ECHO")),
        )

    @property
    def persistent(self) -> bool:
        """True when shard databases outlive the process."""
        return self.url_template is not None or self.data_dir is not None

    def url_for(self, shard_id: str) -> str:
        """Database URL for *shard_id*."""
        slug = shard_slug(shard_id)
        if self.url_template is not None:
            return self.url_template.format(shard=slug)
        if self.data_dir is not None:
            return f"sqlite+aiosqlite:///{self.data_dir / f'{slug}.db'}"
        return _MEMORY_URL
