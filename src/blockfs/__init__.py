"""blockfs: a hierarchical filesystem on flat SQL tables.

Files are split into fixed-size blocks, directories are emulated by path
prefixes, and every root directory is an independent shard.
"""

__version__ = "0.1.0"

from blockfs._blockfs import BlockFS
from blockfs._blockfs_async import BlockFSAsync
from blockfs.config import BlockFSConfig
from blockfs.fs.blocks import BLOCK_SIZE
from blockfs.fs.exceptions import (
    BlockFSError,
    ClosedError,
    ConsistencyError,
    ContentDecodeError,
    DirectoryNotEmptyError,
    InvalidPathError,
    KindConflictError,
    PathNotFoundError,
    StorageError,
)
from blockfs.fs.types import FileStat, WriteResult
from blockfs.models.entries import EntryKind

__all__ = [
    "BLOCK_SIZE",
    "BlockFS",
    "BlockFSAsync",
    "BlockFSConfig",
    "BlockFSError",
    "ClosedError",
    "ConsistencyError",
    "ContentDecodeError",
    "DirectoryNotEmptyError",
    "EntryKind",
    "FileStat",
    "InvalidPathError",
    "KindConflictError",
    "PathNotFoundError",
    "StorageError",
    "WriteResult",
    "__version__",
]
