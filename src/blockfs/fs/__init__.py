"""Filesystem layer — block storage, path catalog, shards, routing."""

from blockfs.fs.blocks import BLOCK_SIZE, BlockService, assemble_blocks, split_into_blocks
from blockfs.fs.database_fs import DatabaseFileSystem
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
from blockfs.fs.router import ShardRouter
from blockfs.fs.shard import Shard
from blockfs.fs.types import FileStat, WriteResult
from blockfs.fs.utils import normalize_path, split_path, validate_path

__all__ = [
    "BLOCK_SIZE",
    "BlockFSError",
    "ClosedError",
    "BlockService",
    "ConsistencyError",
    "ContentDecodeError",
    "DatabaseFileSystem",
    "DirectoryNotEmptyError",
    "FileStat",
    "InvalidPathError",
    "KindConflictError",
    "PathNotFoundError",
    "Shard",
    "ShardRouter",
    "StorageError",
    "WriteResult",
    "assemble_blocks",
    "normalize_path",
    "split_into_blocks",
    "split_path",
    "validate_path",
]
