"""Common helpers shared across TreeFS modules.

This internal package contains pure path-string helpers with no I/O
policy of their own. It should NOT be imported directly by users, and it
must NEVER import from ``core`` or ``operations`` to avoid circular
dependencies.
"""

import os
from typing import Union

PathLike = Union[str, 'os.PathLike[str]']

_SEPARATORS = tuple(s for s in (os.sep, os.altsep) if s)


def has_trailing_separator(path: PathLike) -> bool:
    """Check whether ``path`` ends with a path separator ("contents only")."""
    text = os.fspath(path)
    return len(text) > 1 and text.endswith(_SEPARATORS)


def strip_trailing_separator(path: PathLike) -> str:
    """Drop trailing separators, keeping a bare filesystem root intact."""
    text = os.fspath(path)
    stripped = text.rstrip("".join(_SEPARATORS))

    # "/" or "C:\\" must keep one separator to stay a root
    if not stripped or stripped == os.path.splitdrive(text)[0]:
        return text[:len(stripped) + 1]
    return stripped


__all__ = [
    'PathLike',
    'has_trailing_separator',
    'strip_trailing_separator',
]
