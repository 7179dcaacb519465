"""Error taxonomy for TreeFS.

Every error raised by the library itself derives from ``TreeFSError``,
which is an ``OSError`` so that callers already handling filesystem
failures keep working. Errors coming from the filesystem layer that the
library does not reinterpret (``PermissionError`` and friends) are
propagated unchanged.
"""

import os
from typing import Optional

from ._common import PathLike


class TreeFSError(OSError):
    """Base class for all TreeFS errors."""

    def __init__(self, message: str, path: Optional[PathLike] = None):
        super().__init__(message)
        self.path = os.fspath(path) if path is not None else None

    def __str__(self) -> str:
        return self.args[0] if self.args else self.__class__.__name__


class NotFoundError(TreeFSError, FileNotFoundError):
    """A source path, or a component along it, does not exist."""


class NotADirError(TreeFSError, NotADirectoryError):
    """A path that must be a directory is something else."""


class NotAFileError(TreeFSError):
    """A path that must be a regular file (or link to one) is something else.

    Raised for directories as well as fifos, devices and sockets.
    """


class NotEmptyError(TreeFSError):
    """A directory still had children when it was removed.

    Post-order walks remove children first, so this signals that the tree
    changed underneath the operation.
    """


class SelfCopyError(TreeFSError):
    """Source and destination of a copy are the same object."""


class LinkCycleError(TreeFSError):
    """Symbolic-link resolution exceeded the hop limit."""

    def __init__(self, message: str, path: Optional[PathLike] = None,
                 hops: int = 0):
        super().__init__(message, path)
        self.hops = hops


class ShortWriteError(TreeFSError):
    """A write during a byte copy accepted fewer bytes than requested."""

    def __init__(self, message: str, path: Optional[PathLike] = None,
                 requested: int = 0, written: int = 0):
        super().__init__(message, path)
        self.requested = requested
        self.written = written


class DestinationRequiredError(TreeFSError):
    """A contents-only copy was requested into a missing destination."""
