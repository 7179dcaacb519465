"""Filesystem adapter for TreeFS.

The adapter holds the navigation logic for filesystem trees: listing a
directory's children and deciding whether a node is expanded or treated
as a leaf. Keeping this out of the walkers means the traversal
algorithms only deal with ordering and visit timing.
"""

import os
from typing import Dict, List, Optional, Tuple

from ..errors import NotFoundError
from .node import NodeKind, kind_from_mode, node_kind
from .resolver import MAX_LINK_HOPS, resolve_link

_Lineage = Optional[Tuple[Tuple[int, int], "_Lineage"]]


def _in_lineage(identity: Tuple[int, int], lineage: _Lineage) -> bool:
    while lineage is not None:
        if lineage[0] == identity:
            return True
        lineage = lineage[1]
    return False


class FileSystemAdapter:
    """Adapter for filesystem tree traversal.

    One adapter serves exactly one walk: with link following enabled it
    remembers the physical directories (device, inode) on the way from the
    root to each node, so that a link pointing back up the tree cannot
    make the walk loop. Two links to the same directory side by side are
    both expanded.
    """

    def __init__(self,
                 follow_links: bool = False,
                 resolve_root: bool = True,
                 max_hops: int = MAX_LINK_HOPS):
        """Initialize filesystem adapter.

        Args:
            follow_links: Descend into links below the root that resolve
                to directories
            resolve_root: Descend into the root even when it is a link
            max_hops: Hop budget handed to the resolver
        """
        self.follow_links = follow_links
        self.resolve_root = resolve_root
        self.max_hops = max_hops
        # path -> identities of the directory and its ancestors, as a
        # linked (identity, parent_lineage) chain
        self._lineage: Dict[str, _Lineage] = {}
        self._parent_lineage: Dict[str, _Lineage] = {}

    def check_root(self, root: str) -> None:
        """Fail early when the walk's starting point does not exist."""
        if node_kind(root, follow_symlinks=False) is NodeKind.NONE:
            raise NotFoundError(f"No such file or directory: {root!r}", root)

    def get_children(self, path: str) -> List[str]:
        """List the immediate children of a directory, sorted by name."""
        children = [os.path.join(path, name) for name in sorted(os.listdir(path))]
        lineage = self._lineage.pop(path, None)
        if lineage is not None:
            for child in children:
                self._parent_lineage[child] = lineage
        return children

    def should_expand(self, path: str, is_root: bool = False) -> bool:
        """Decide whether ``path`` is a directory the walk descends into.

        Plain directories are always expanded. A link is expanded only if
        link following applies to it (``follow_links``, or ``resolve_root``
        for the walk's root) and it resolves to a directory. Dangling links
        are leaves. With link following, a directory that is already one of
        its own ancestors (a loop) is a leaf too.

        Raises:
            LinkCycleError: If resolving a followed link does not terminate
        """
        parent = self._parent_lineage.pop(path, None)
        try:
            st = os.lstat(path)
        except FileNotFoundError:
            # removed by a pre-order visitor
            return False
        kind = kind_from_mode(st.st_mode)

        if kind is NodeKind.SYMLINK:
            follow = self.resolve_root if is_root else self.follow_links
            if not follow:
                return False
            try:
                target = resolve_link(path, max_hops=self.max_hops)
            except NotFoundError:
                return False
            st = os.stat(target)
            kind = kind_from_mode(st.st_mode)

        if kind is not NodeKind.DIR:
            return False

        if not self.follow_links:
            return True

        identity = (st.st_dev, st.st_ino)
        if _in_lineage(identity, parent):
            return False
        self._lineage[path] = (identity, parent)
        return True

