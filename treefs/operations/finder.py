"""Search a tree for nodes whose base name matches a pattern."""

import logging
import os
import re
from typing import Callable, Iterator, Optional, Union

from .._common import PathLike, strip_trailing_separator
from ..config import WalkConfig
from ..core.walker import DepthFirstWalker

logger = logging.getLogger(__name__)

FoundCallback = Callable[[str, str], None]


def find(root: PathLike,
         pattern: Union[str, re.Pattern, None] = None,
         callback: Optional[FoundCallback] = None,
         *,
         verbose: bool = False,
         max_depth: Optional[int] = None) -> Iterator[str]:
    """Lazily find nodes under ``root`` whose base name matches ``pattern``.

    The walk is depth-first pre-order, so matches come out in the order
    of a natural ``find`` listing. The result is a one-shot generator:
    nothing is read until it is iterated, and iterating again requires a
    new call.

    Args:
        root: Where the search starts (the root itself is a candidate)
        pattern: Regular expression searched for in each base name
            (``re.search``); None matches every node
        callback: Called as ``callback(path, root)`` for each match, before
            the match is yielded. Bind extra context with a closure or
            ``functools.partial``.
        verbose: Log each match at INFO instead of DEBUG
        max_depth: Do not look deeper than this below ``root``

    Yields:
        Paths of matching nodes, joined onto ``root`` as given

    Example:
        >>> for path in find("src", r"\\.py$"):
        ...     print(path)
    """
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    level = logging.INFO if verbose else logging.DEBUG

    walker = DepthFirstWalker(WalkConfig.pre_order(max_depth=max_depth))
    for path, base in walker.iter_visits(root):
        name = os.path.basename(strip_trailing_separator(path))
        if regex is not None and not regex.search(name):
            continue
        logger.log(level, "%s", path)
        if callback is not None:
            callback(path, base)
        yield path
