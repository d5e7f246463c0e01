"""Logging setup for reprise.

Importing the package never attaches handlers; call setup_logging()
from an entry point.
"""

import logging
import sys

log = logging.getLogger("reprise")
log.addHandler(logging.NullHandler())


def setup_logging(
    level: str = "WARNING", log_file: str | None = None, console: bool = False
) -> None:
    """Attach file and console handlers to the package logger.

    Handlers from an earlier call are closed and replaced.

    Args:
        level: Level name for the package logger.
        log_file: Append log records to this file when given.
        console: Also report errors on stderr. Leave off while the TUI
            owns the terminal.
    """
    log.setLevel(getattr(logging, level.upper(), logging.WARNING))

    for handler in [h for h in log.handlers if not isinstance(h, logging.NullHandler)]:
        log.removeHandler(handler)
        handler.close()

    if log_file:
        fh = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s"))
        log.addHandler(fh)

    if console:
        ch = logging.StreamHandler(sys.stderr)
        ch.setLevel(logging.ERROR)
        ch.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        log.addHandler(ch)
