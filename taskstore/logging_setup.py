"""Logging configuration for the command line front end."""

import logging
import sys


def setup_logging(level: int = logging.WARNING) -> None:
    """Send taskstore logs to stderr at the given level.

    Call this once, before the first store is created. Calling it again
    replaces the handler instead of adding a second one.
    """
    root = logging.getLogger()
    root.setLevel(level)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)
