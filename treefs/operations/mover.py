"""Move with a copy-and-remove fallback across filesystems."""

import errno
import logging
import os
from typing import Optional, Set

from .._common import PathLike, strip_trailing_separator
from ..config import CopyOptions, LinkPolicy, OperationOptions
from ..core.node import NodeKind, node_kind
from ..errors import NotFoundError
from ._actions import log_action
from .copier import copy_file, copy_tree
from .finder import find
from .remover import remove

logger = logging.getLogger(__name__)


def _present_entries(source: str, target: str) -> Set[str]:
    """Paths below ``source`` (relative) that already exist under ``target``."""
    present = set()
    for path in find(source):
        rel = os.path.relpath(path, source)
        if os.path.lexists(os.path.join(target, rel)):
            present.add(rel)
    return present


def _remove_created(source: str, target: str, present: Set[str]) -> None:
    """Undo a failed merge into ``target``, keeping what was there before."""
    for path in find(source):
        rel = os.path.relpath(path, source)
        created = os.path.join(target, rel)
        # children of an entry removed here are already gone
        if rel not in present and os.path.lexists(created):
            logger.warning("Removing partial copy %s", created)
            remove(created)


def _copy_then_remove(source: str, target: str, options: OperationOptions) -> None:
    """Replace a cross-device rename by copy + recursive remove.

    The source is only removed once the copy has fully succeeded. If the
    copy fails, whatever it managed to create is removed again and the
    error propagates. When the copy was merged into an existing directory
    only the entries that were not there beforehand are removed; files it
    overwrote keep their new content.
    """
    kind = node_kind(source, follow_symlinks=False)
    existed = os.path.lexists(target)
    present = None
    if existed and kind is NodeKind.DIR:
        present = _present_entries(source, target)
    copy_options = CopyOptions(link_policy=LinkPolicy.PRESERVE, verbose=options.verbose)

    try:
        if kind is NodeKind.SYMLINK:
            os.symlink(os.readlink(source), target)
        elif kind is NodeKind.DIR:
            if not existed:
                os.mkdir(target)
            copy_tree(source + os.sep, target, copy_options)
        else:
            copy_file(source, target, copy_options)
    except Exception:
        if not existed and os.path.lexists(target):
            logger.warning("Copying %s failed, removing partial copy %s", source, target)
            remove(target)
        elif present is not None:
            logger.warning("Copying %s into existing %s failed", source, target)
            _remove_created(source, target, present)
        raise

    remove(source, OperationOptions(verbose=options.verbose))


def move(src: PathLike,
         dst: PathLike,
         options: Optional[OperationOptions] = None,
         *,
         dry_run: Optional[bool] = None,
         verbose: Optional[bool] = None) -> str:
    """Move ``src`` to ``dst``, like ``mv``.

    An atomic ``rename`` is tried first. Only when it fails because source
    and destination are on different filesystems (``EXDEV``) does the move
    fall back to copying (links preserved as links) and then removing the
    source. Every other error from the rename propagates unchanged.

    If ``dst`` is an existing directory, ``src`` is moved into it.

    Returns:
        The new path of the moved node

    Raises:
        NotFoundError: If ``src`` does not exist
    """
    options = OperationOptions.build(options, dry_run=dry_run, verbose=verbose)
    source = strip_trailing_separator(src)
    if node_kind(source, follow_symlinks=False) is NodeKind.NONE:
        raise NotFoundError(f"No such file or directory: {source!r}", source)

    target = os.fspath(dst)
    if os.path.isdir(target):
        target = os.path.join(target, os.path.basename(source))

    log_action(logger, options, "moving %s -> %s", source, target)
    if options.dry_run:
        return target

    try:
        os.rename(source, target)
        return target
    except OSError as e:
        if e.errno != errno.EXDEV:
            raise

    logger.info("%s and %s are on different filesystems, copying instead", source, target)
    _copy_then_remove(source, target, options)
    return target
