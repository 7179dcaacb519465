"""Core components of TreeFS: node classification, link resolution and
the tree walkers every operation is built on.
"""

from .node import NodeKind, node_kind, is_symlink
from .resolver import resolve_link, MAX_LINK_HOPS
from .adapter import FileSystemAdapter
from .walker import (
    VisitResult,
    Visitor,
    TreeWalker,
    DepthFirstWalker,
    BreadthFirstWalker,
    create_walker,
    parse_order,
    traverse,
)

__all__ = [
    "NodeKind",
    "node_kind",
    "is_symlink",
    "resolve_link",
    "MAX_LINK_HOPS",
    "FileSystemAdapter",
    "VisitResult",
    "Visitor",
    "TreeWalker",
    "DepthFirstWalker",
    "BreadthFirstWalker",
    "create_walker",
    "parse_order",
    "traverse",
]
