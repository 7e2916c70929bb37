"""BlockFSAsync — primary async class, one shard per root directory."""

from __future__ import annotations

from typing import TYPE_CHECKING

from blockfs.config import BlockFSConfig
from blockfs.fs.exceptions import ClosedError
from blockfs.fs.router import ShardRouter
from blockfs.fs.utils import validate_path

if TYPE_CHECKING:
    from pathlib import Path

    from blockfs.fs.shard import Shard
    from blockfs.fs.types import FileStat, WriteResult
    from blockfs.models.blocks import BlockBase
    from blockfs.models.entries import EntryBase


class BlockFSAsync:
    """Async facade over a sharded, block-based virtual filesystem.

    The first segment of every path picks the shard; each shard is an
    independent database whose operations run one at a time.  Paths are
    root-relative (``"myapp/config/settings.json"``).

    In-memory (nothing persists)::

        async with BlockFSAsync() as fs:
            await fs.mkdir("myapp/config")
            await fs.write_file("myapp/config/hello.txt", "hello")
            names = await fs.readdir("myapp/config")

    Persistent, one SQLite file per shard (``BLOCKFS_DATA_DIR`` is used
    when no *data_dir* or *config* is given)::

        fs = BlockFSAsync(data_dir="/var/lib/blockfs")
    """

    def __init__(
        self,
        data_dir: str | Path | None = None,
        *,
        config: BlockFSConfig | None = None,
        entry_model: type[EntryBase] | None = None,
        block_model: type[BlockBase] | None = None,
    ) -> None:
        if config is not None and data_dir is not None:
            raise ValueError("Provide data_dir or config, not both")
        self._config = config or BlockFSConfig.from_env(data_dir)
        self._router = ShardRouter(
            self._config,
            entry_model=entry_model,
            block_model=block_model,
        )
        self._closed = False

    @property
    def config(self) -> BlockFSConfig:
        return self._config

    @property
    def router(self) -> ShardRouter:
        return self._router

    async def _shard(self, path: str) -> Shard:
        if self._closed:
            raise ClosedError("BlockFSAsync is closed")
        return await self._router.get(path)

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    async def write_file(
        self, path: str, content: str | bytes | bytearray | memoryview
    ) -> WriteResult:
        """Create or replace the file at *path*, creating missing parent directories."""
        shard = await self._shard(path)
        return await shard.write_file(path, content)

    async def read_file(self, path: str, encoding: str | None = None) -> bytes | str:
        """Return the file's bytes, or text decoded with *encoding* when given."""
        shard = await self._shard(path)
        return await shard.read_file(path, encoding)

    async def unlink(self, path: str) -> None:
        """Delete the file at *path* and its blocks."""
        shard = await self._shard(path)
        await shard.unlink(path)

    # ------------------------------------------------------------------
    # Directories
    # ------------------------------------------------------------------

    async def mkdir(self, path: str) -> list[str]:
        """Create *path* and any missing ancestors. Returns the paths created."""
        shard = await self._shard(path)
        return await shard.mkdir(path)

    async def rmdir(self, path: str) -> None:
        """Remove the empty directory at *path*."""
        shard = await self._shard(path)
        await shard.rmdir(path)

    async def readdir(self, path: str) -> list[str]:
        """Names of the direct children of *path*, sorted."""
        shard = await self._shard(path)
        return await shard.readdir(path)

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    async def stat(self, path: str) -> FileStat:
        shard = await self._shard(path)
        return await shard.stat(path)

    async def exists(self, path: str) -> bool:
        if self._closed:
            raise ClosedError("BlockFSAsync is closed")
        valid, _ = validate_path(path)
        if not valid:
            return False
        shard = await self._shard(path)
        return await shard.exists(path)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._router.close()

    async def __aenter__(self) -> BlockFSAsync:
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        await self.close()
