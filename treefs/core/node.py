"""Node classification for TreeFS.

A node is just a path. Its kind is computed on demand from ``stat`` /
``lstat`` every time it is asked for and never cached, because the
operations built on the walker mutate the tree while walking it.
"""

import os
import stat
from enum import Enum

from .._common import PathLike


class NodeKind(Enum):
    """Kind of filesystem object a path names."""
    FILE = "file"
    DIR = "dir"
    SYMLINK = "symlink"              # Only reported when links are not followed
    FIFO = "fifo"
    BLOCK_DEVICE = "blockDevice"
    CHAR_DEVICE = "charDevice"
    SOCKET = "socket"
    NONE = "none"                    # Nothing there (or a dangling link, followed)


_MODE_KINDS = (
    (stat.S_ISLNK, NodeKind.SYMLINK),
    (stat.S_ISDIR, NodeKind.DIR),
    (stat.S_ISREG, NodeKind.FILE),
    (stat.S_ISFIFO, NodeKind.FIFO),
    (stat.S_ISBLK, NodeKind.BLOCK_DEVICE),
    (stat.S_ISCHR, NodeKind.CHAR_DEVICE),
    (stat.S_ISSOCK, NodeKind.SOCKET),
)


def kind_from_mode(mode: int) -> NodeKind:
    """Map an ``st_mode`` value to a NodeKind."""
    for test, kind in _MODE_KINDS:
        if test(mode):
            return kind
    return NodeKind.NONE


def node_kind(path: PathLike, follow_symlinks: bool = True) -> NodeKind:
    """Return the kind of the object at ``path``.

    Args:
        path: Path to classify
        follow_symlinks: Classify what a link points to (default). When
            False, a link is reported as ``NodeKind.SYMLINK``.

    Returns:
        The node's kind; ``NodeKind.NONE`` when nothing exists there.
        Permission errors from ``stat`` propagate.
    """
    try:
        st = os.stat(path) if follow_symlinks else os.lstat(path)
    except (FileNotFoundError, NotADirectoryError):
        return NodeKind.NONE
    return kind_from_mode(st.st_mode)


def is_symlink(path: PathLike) -> bool:
    """Check whether ``path`` itself is a symbolic link.

    This is independent of what the link resolves to; a dangling link is
    still a link.
    """
    return node_kind(path, follow_symlinks=False) is NodeKind.SYMLINK
