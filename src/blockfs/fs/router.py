"""ShardRouter — maps a path's root segment to its shard."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from blockfs.config import BlockFSConfig

from .exceptions import InvalidPathError
from .shard import Shard
from .utils import require_valid_path, root_segment

if TYPE_CHECKING:
    from blockfs.models.blocks import BlockBase
    from blockfs.models.entries import EntryBase

logger = logging.getLogger(__name__)


class ShardRouter:
    """Registry of shards keyed by root path segment.

    ``"myapp/config/settings.json"`` routes to shard ``"myapp"``.  Shards
    are created on first use and live until ``close()``.  Shards share
    nothing, so operations on different shards run concurrently.
    """

    def __init__(
        self,
        config: BlockFSConfig | None = None,
        *,
        entry_model: type[EntryBase] | None = None,
        block_model: type[BlockBase] | None = None,
    ) -> None:
        self.config = config or BlockFSConfig()
        self._entry_model = entry_model
        self._block_model = block_model
        self._shards: dict[str, Shard] = {}
        self._lock = asyncio.Lock()

    @staticmethod
    def shard_id_for(path: str) -> str:
        """Return the shard id (first segment) for *path*."""
        path = require_valid_path(path)
        shard_id = root_segment(path)
        if not shard_id:
            raise InvalidPathError(f"Path must start with a root directory: {path!r}")
        return shard_id

    async def get(self, path: str) -> Shard:
        """Return the shard owning *path*, creating it on first use."""
        shard_id = self.shard_id_for(path)
        shard = self._shards.get(shard_id)
        if shard is not None:
            return shard
        async with self._lock:
            shard = self._shards.get(shard_id)
            if shard is None:
                shard = Shard(
                    shard_id,
                    self.config,
                    entry_model=self._entry_model,
                    block_model=self._block_model,
                )
                self._shards[shard_id] = shard
                logger.debug("Registered shard %s", shard_id)
            return shard

    def has_shard(self, shard_id: str) -> bool:
        """Check if a shard has been created for *shard_id*."""
        return shard_id in self._shards

    def shards(self) -> list[Shard]:
        """List all created shards, sorted by shard id."""
        return sorted(self._shards.values(), key=lambda s: s.shard_id)

    async def close(self) -> None:
        """Close every shard, continuing past individual failures."""
        async with self._lock:
            shards = list(self._shards.values())
            self._shards.clear()
        for shard in shards:
            try:
                await shard.close()
            except Exception:
                logger.warning("Shard close failed for %s", shard.shard_id, exc_info=True)
