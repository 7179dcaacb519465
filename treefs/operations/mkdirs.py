"""Create a directory and any missing ancestors (``mkdir -p``)."""

import logging
import os
from typing import List, Optional

from .._common import PathLike
from ..config import OperationOptions
from ..errors import NotADirError
from ._actions import log_action

logger = logging.getLogger(__name__)


def mk_dirs(path: PathLike,
            options: Optional[OperationOptions] = None,
            *,
            dry_run: Optional[bool] = None,
            verbose: Optional[bool] = None) -> str:
    """Create ``path`` and every missing ancestor directory.

    Walks up from ``path`` until it finds something that exists; that
    ancestor must be a directory (or a link to one). Everything above it
    is left alone. The missing directories are then created top-down.
    Calling it again on the same path is a no-op.

    Returns:
        The absolute path of the directory

    Raises:
        NotADirError: If the deepest existing component is not a directory
    """
    options = OperationOptions.build(options, dry_run=dry_run, verbose=verbose)
    target = os.path.abspath(os.fspath(path))

    missing: List[str] = []
    current = target
    while not os.path.lexists(current):
        missing.append(current)
        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent

    if not os.path.isdir(current):
        raise NotADirError(f"Not a directory: {current!r}", current)

    for directory in reversed(missing):
        log_action(logger, options, "creating directory %s", directory)
        if not options.dry_run:
            os.mkdir(directory)
    return target
