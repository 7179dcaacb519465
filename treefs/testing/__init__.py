"""Testing utilities for TreeFS."""

from .fixtures import Link, make_tree, snapshot_tree

__all__ = ["Link", "make_tree", "snapshot_tree"]
