"""Test fixtures for TreeFS and its consumers.

Helpers to build a directory tree from a nested dict and to capture a
tree's state for before/after comparisons. They deliberately use plain
``os`` calls rather than TreeFS itself, so they stay trustworthy when
testing TreeFS.
"""

import os
import stat
from pathlib import Path
from typing import Dict, NamedTuple, Tuple, Union

from .._common import PathLike


class Link(NamedTuple):
    """Symbolic link entry for ``make_tree``; ``target`` is used verbatim."""
    target: str


TreeSpec = Dict[str, Union[None, str, bytes, Link, 'TreeSpec']]


def make_tree(base: PathLike, spec: TreeSpec) -> Path:
    """Create the tree described by ``spec`` under ``base``.

    Keys are names; values are a dict (directory), ``None`` (empty file),
    ``str`` / ``bytes`` (file content) or ``Link`` (symbolic link).
    Entries are created in dict order, so a link may point at anything
    created before it.

    Example:
        >>> make_tree(tmp_path, {
        ...     'd1': {
        ...         'f11': None,
        ...         'd12': {'f121': 'a', 'f122': b'b'},
        ...     },
        ... })

    Returns:
        ``base`` as a Path
    """
    base = Path(base)
    base.mkdir(parents=True, exist_ok=True)

    for name, value in spec.items():
        path = base / name
        if isinstance(value, dict):
            make_tree(path, value)
        elif isinstance(value, Link):
            os.symlink(value.target, path)
        elif value is None:
            path.touch()
        elif isinstance(value, bytes):
            path.write_bytes(value)
        else:
            path.write_text(value)
    return base


def snapshot_tree(root: PathLike) -> Dict[str, Tuple]:
    """Capture the structure and content of the tree under ``root``.

    Returns:
        Mapping of path relative to ``root`` (``'.'`` for the root) to
        ``('dir',)``, ``('file', content_bytes)`` or ``('link', target)``.
        Links are recorded, never followed.
    """
    root = os.fspath(root)
    snapshot: Dict[str, Tuple] = {}

    def record(path: str) -> None:
        rel = os.path.relpath(path, root)
        mode = os.lstat(path).st_mode
        if stat.S_ISLNK(mode):
            snapshot[rel] = ('link', os.readlink(path))
        elif stat.S_ISDIR(mode):
            snapshot[rel] = ('dir',)
        else:
            with open(path, 'rb') as f:
                snapshot[rel] = ('file', f.read())

    record(root)
    if os.path.isdir(root) and not os.path.islink(root):
        for dirpath, dirnames, filenames in os.walk(root):
            for name in dirnames + filenames:
                record(os.path.join(dirpath, name))
    return snapshot
