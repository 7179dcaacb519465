"""Recursive remove (``rm -rf``) built on a depth-first post-order walk."""

import errno
import functools
import logging
import os
from typing import Optional

from .._common import PathLike, strip_trailing_separator
from ..config import OperationOptions, WalkConfig
from ..core.node import NodeKind, node_kind
from ..core.walker import traverse
from ..errors import NotEmptyError
from ._actions import log_action

logger = logging.getLogger(__name__)

# Links are never followed, not even at the root: removing through a link
# must only ever delete the link itself.
_REMOVE_WALK = WalkConfig.post_order(follow_links=False, resolve_root=False)


def _remove_node(path: str, base: str, options: OperationOptions) -> None:
    log_action(logger, options, "removing %s", path)
    if options.dry_run:
        return

    if node_kind(path, follow_symlinks=False) is NodeKind.DIR:
        try:
            os.rmdir(path)
        except OSError as e:
            if e.errno in (errno.ENOTEMPTY, errno.EEXIST):
                raise NotEmptyError(
                    f"Directory not empty after removing its children: {path!r}",
                    path,
                ) from e
            raise
    else:
        os.unlink(path)


def remove(target: PathLike,
           options: Optional[OperationOptions] = None,
           *,
           dry_run: Optional[bool] = None,
           verbose: Optional[bool] = None) -> None:
    """Recursively remove ``target``, like ``rm -rf``.

    A single file or link is simply unlinked. A directory is removed
    bottom-up: post-order visitation removes every child before its
    parent. Links are removed, never followed.

    Args:
        target: File, link or directory to remove
        options: Operation options
        dry_run: Shortcut for ``options.dry_run``
        verbose: Shortcut for ``options.verbose``

    Raises:
        NotFoundError: If ``target`` does not exist
        NotEmptyError: If a directory still has children when removed
        PermissionError: Passed through from the filesystem
    """
    options = OperationOptions.build(options, dry_run=dry_run, verbose=verbose)
    # "link/" would make lstat follow the link
    traverse(strip_trailing_separator(target),
             functools.partial(_remove_node, options=options), _REMOVE_WALK)
