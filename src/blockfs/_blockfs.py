"""BlockFS — synchronous wrapper around BlockFSAsync."""

from __future__ import annotations

import asyncio
import threading
from typing import TYPE_CHECKING, Any

from blockfs._blockfs_async import BlockFSAsync
from blockfs.fs.exceptions import ClosedError

if TYPE_CHECKING:
    from pathlib import Path

    from blockfs.config import BlockFSConfig
    from blockfs.fs.types import FileStat, WriteResult


class BlockFS:
    """Synchronous block-based virtual filesystem.

    Presents a synchronous API backed by a private event loop in a
    background thread.  Every shard lives on that loop, so the
    one-operation-at-a-time guarantee holds no matter how many threads
    call in.  Errors are the same exceptions ``BlockFSAsync`` raises.

    Usage::

        with BlockFS("/var/lib/blockfs") as fs:
            fs.write_file("myapp/config/settings.json", '{"theme": "dark"}')
            fs.read_file("myapp/config/settings.json", encoding="utf-8")
    """

    def __init__(
        self,
        data_dir: str | Path | None = None,
        *,
        config: BlockFSConfig | None = None,
    ) -> None:
        self._closed = False

        # Private event loop in a daemon thread
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(
            target=self._loop.run_forever, daemon=True
        )
        self._thread.start()

        self._async_fs: BlockFSAsync = self._run(self._async_init(data_dir, config))

    async def _async_init(
        self, data_dir: str | Path | None, config: BlockFSConfig | None
    ) -> BlockFSAsync:
        # Built on the private loop so its locks belong to it.
        return BlockFSAsync(data_dir, config=config)

    def _run(self, coro: Any) -> Any:
        """Submit *coro* to the private loop and block for the result."""
        if self._closed:
            coro.close()
            raise ClosedError("BlockFS is closed")
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        return future.result()

    @property
    def config(self) -> BlockFSConfig:
        return self._async_fs.config

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close every shard, stop the event loop and join the thread."""
        if self._closed:
            return

        try:
            self._run(self._async_fs.close())
        finally:
            self._closed = True
            self._loop.call_soon_threadsafe(self._loop.stop)
            self._thread.join(timeout=5)

    def __enter__(self) -> BlockFS:
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Filesystem wrappers (sync)
    # ------------------------------------------------------------------

    def write_file(self, path: str, content: str | bytes | bytearray | memoryview) -> WriteResult:
        """Create or replace the file at *path*."""
        return self._run(self._async_fs.write_file(path, content))

    def read_file(self, path: str, encoding: str | None = None) -> bytes | str:
        """Read the file at *path* as bytes, or as text when *encoding* is given."""
        return self._run(self._async_fs.read_file(path, encoding))

    def unlink(self, path: str) -> None:
        """Delete the file at *path*."""
        self._run(self._async_fs.unlink(path))

    def mkdir(self, path: str) -> list[str]:
        """Create *path* and its missing ancestors."""
        return self._run(self._async_fs.mkdir(path))

    def rmdir(self, path: str) -> None:
        """Remove the empty directory at *path*."""
        self._run(self._async_fs.rmdir(path))

    def readdir(self, path: str) -> list[str]:
        """List the names directly under *path*."""
        return self._run(self._async_fs.readdir(path))

    def stat(self, path: str) -> FileStat:
        """Metadata for *path*."""
        return self._run(self._async_fs.stat(path))

    def exists(self, path: str) -> bool:
        """Check whether *path* exists."""
        return self._run(self._async_fs.exists(path))
