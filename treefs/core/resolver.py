"""Symbolic-link resolution for TreeFS.

The resolver replaces a path that names a symbolic link with the link's
target, repeating until it reaches something that is not a link. It only
reads from the filesystem (``lstat`` and ``readlink``) and never mutates.

Every hop counts against a single budget so that link loops, whether
direct (``a -> a``) or spread over several links and parent directories,
end in ``LinkCycleError`` instead of spinning forever.
"""

import os
from collections import deque
from typing import Deque, Optional

from .._common import PathLike
from ..errors import LinkCycleError, NotFoundError
from .node import NodeKind, node_kind

# Same order of magnitude as the kernel's own limit (MAXSYMLINKS = 40)
MAX_LINK_HOPS = 40


class _HopCounter:
    """Shared hop budget for one resolution."""

    def __init__(self, origin: str, limit: int):
        self.origin = origin
        self.limit = limit
        self.hops = 0

    def step(self) -> None:
        self.hops += 1
        if self.hops > self.limit:
            raise LinkCycleError(
                f"Too many levels of symbolic links resolving {self.origin!r} "
                f"(limit {self.limit})",
                self.origin,
                hops=self.hops,
            )


def _require_exists(path: str, origin: str) -> NodeKind:
    kind = node_kind(path, follow_symlinks=False)
    if kind is NodeKind.NONE:
        raise NotFoundError(
            f"No such file or directory: {path!r} (resolving {origin!r})",
            path,
        )
    return kind


def _resolve_chain(path: str, counter: _HopCounter) -> str:
    """Follow ``path`` until it is no longer a link.

    Relative targets are taken relative to the directory holding the link.
    The joined path is not normalised: its parent may itself be reached
    through a link, so ``..`` is left for the OS to resolve physically.
    """
    while _require_exists(path, counter.origin) is NodeKind.SYMLINK:
        counter.step()
        target = os.readlink(path)
        path = os.path.join(os.path.dirname(path), target)
    return path


def _resolve_components(path: str, counter: _HopCounter,
                        include_last: bool) -> str:
    """Resolve every component of an absolute ``path`` from the root down.

    Works like ``realpath``: components still to be processed sit in a
    queue; when a component turns out to be a link, the link's target
    components are pushed to the front of the queue and resolution carries
    on from the root (absolute target) or from the link's parent.
    """
    drive, rest = os.path.splitdrive(path)
    anchor = drive + os.sep
    parts = [p for p in rest.split(os.sep) if p]

    last: Optional[str] = None
    if not include_last and parts:
        last = parts.pop()

    pending: Deque[str] = deque(parts)
    current = anchor

    while pending:
        part = pending.popleft()
        if part in ('', os.curdir):
            continue
        if part == os.pardir:
            # current is already link-free, so its parent is the real parent
            current = os.path.dirname(current) or anchor
            continue

        candidate = os.path.join(current, part)
        if _require_exists(candidate, counter.origin) is not NodeKind.SYMLINK:
            current = candidate
            continue

        counter.step()
        target = os.readlink(candidate)
        target_drive, target_rest = os.path.splitdrive(target)
        if os.path.isabs(target):
            current = (target_drive or drive) + os.sep
        pending.extendleft(reversed([p for p in target_rest.split(os.sep) if p]))

    if last is not None:
        current = os.path.join(current, last)
    return current


def resolve_link(path: PathLike,
                 follow_parents: bool = False,
                 include_last: bool = True,
                 max_hops: int = MAX_LINK_HOPS) -> str:
    """Resolve ``path`` through zero or more symbolic links.

    Args:
        path: Path to resolve
        follow_parents: Also resolve links among the intermediate
            directories, from the filesystem root down. The result is then
            absolute.
        include_last: With ``follow_parents``, whether the final component
            is resolved too. Ignored otherwise.
        max_hops: Maximum number of link hops before giving up

    Returns:
        A path naming the same object that is not itself a symbolic link.
        Without ``follow_parents`` the result keeps the relative/absolute
        form of the input and may contain ``..`` components.

    Raises:
        LinkCycleError: If more than ``max_hops`` links are traversed
        NotFoundError: If a traversed component does not exist (this
            includes the target of a dangling link)
    """
    text = os.fspath(path)
    counter = _HopCounter(text, max_hops)

    if not follow_parents:
        return _resolve_chain(text, counter)

    return _resolve_components(os.path.abspath(text), counter, include_last)
