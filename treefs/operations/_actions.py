"""Action logging shared by the mutating operations."""

import logging

from ..config import OperationOptions


def log_action(logger: logging.Logger, options: OperationOptions,
               message: str, *args) -> None:
    """Log one filesystem action.

    Verbose operations log at INFO, quiet ones at DEBUG; dry runs are
    marked so a preview can be told apart from the real thing.
    """
    level = logging.INFO if options.verbose else logging.DEBUG
    if options.dry_run:
        message = "[dry-run] " + message
    logger.log(level, message, *args)
