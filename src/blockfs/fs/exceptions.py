"""Custom exception hierarchy for the blockfs filesystem layer."""


class BlockFSError(Exception):
    """Base exception for all blockfs errors."""


class PathNotFoundError(BlockFSError):
    """Raised when a path has no entry of the kind the operation needs."""


class DirectoryNotEmptyError(BlockFSError):
    """Raised when removing a directory that still has descendants."""


class InvalidPathError(BlockFSError):
    """Raised for empty or malformed paths, or paths without a root segment."""


class KindConflictError(BlockFSError):
    """Raised when a path already exists as the other entry kind."""


class StorageError(BlockFSError):
    """Raised on storage backend failures (DB connection, disk I/O, etc.)."""


class ConsistencyError(BlockFSError):
    """Raised when stored blocks contradict the entry that owns them."""


class ContentDecodeError(BlockFSError):
    """Raised when file content cannot be decoded with the requested encoding."""


class ClosedError(BlockFSError):
    """Raised when an operation is issued after the filesystem was closed."""
