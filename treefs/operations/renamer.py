"""Recursive rename by regular-expression substitution on base names."""

import functools
import logging
import os
import re
from typing import Callable, Optional, Union

from .._common import PathLike, strip_trailing_separator
from ..config import OperationOptions, WalkConfig
from ..core.walker import VisitResult, traverse
from ._actions import log_action

logger = logging.getLogger(__name__)

Replacement = Union[str, Callable[['re.Match'], str]]

# Post-order: a directory is renamed only after all its descendants, so
# paths computed for descendants stay valid while they are visited.
_RENAME_WALK = WalkConfig.post_order(follow_links=False)


def _rename_node(path: str, base: str,
                 regex: re.Pattern, replacement: Replacement,
                 options: OperationOptions) -> Optional[VisitResult]:
    dirname, basename = os.path.split(path)
    new_name = regex.sub(replacement, basename)
    if new_name == basename:
        return None

    if not new_name or new_name in (os.curdir, os.pardir):
        raise ValueError(f"Substitution turns {basename!r} into invalid name {new_name!r}")
    if os.sep in new_name or (os.altsep and os.altsep in new_name):
        raise ValueError(f"Substitution turns {basename!r} into a path: {new_name!r}")

    new_path = os.path.join(dirname, new_name)
    log_action(logger, options, "%s --> %s", path, new_path)
    if options.dry_run:
        return None

    os.rename(path, new_path)
    return VisitResult(continue_with=new_path)


def rename(root: PathLike,
           pattern: Union[str, re.Pattern],
           replacement: Replacement,
           options: Optional[OperationOptions] = None,
           *,
           dry_run: Optional[bool] = None,
           verbose: Optional[bool] = None) -> None:
    """Rename every node under ``root`` whose base name matches ``pattern``.

    Works like ``find ROOT -name ... -exec mv``: for each node (root
    included) every non-overlapping match of ``pattern`` in the base name
    is replaced with ``replacement`` (``re.sub`` semantics, so group
    references such as ``\\1`` work). The directory part of each path is
    never touched. Nodes whose name does not change are left alone.

    Args:
        root: Directory (or single node) to rename under
        pattern: Regular expression, as a string or compiled
        replacement: Replacement string or function, as for ``re.sub``
        options: Operation options
        dry_run: Shortcut for ``options.dry_run``
        verbose: Shortcut for ``options.verbose``

    Raises:
        NotFoundError: If ``root`` does not exist
        ValueError: If a substitution yields an empty name or a path
    """
    options = OperationOptions.build(options, dry_run=dry_run, verbose=verbose)
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern

    visit = functools.partial(_rename_node, regex=regex,
                              replacement=replacement, options=options)
    traverse(strip_trailing_separator(root), visit, _RENAME_WALK)
