"""Filesystem operations built on the tree walker.

Each operation is a visitor plugged into a walk with the ordering it
needs: remove and rename walk depth-first post-order, find and copy walk
depth-first pre-order.
"""

from .remover import remove
from .renamer import rename
from .finder import find
from .copier import copy, copy_file, copy_tree
from .mover import move
from .mkdirs import mk_dirs

__all__ = [
    "remove",
    "rename",
    "find",
    "copy",
    "copy_file",
    "copy_tree",
    "move",
    "mk_dirs",
]
