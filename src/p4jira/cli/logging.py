"""
Logging setup for the p4jira CLI.
"""

import logging
import sys
from typing import Optional


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def level_for_verbosity(verbosity: int) -> int:
    """Verbosity 0-1 logs at INFO; 2 and above adds DEBUG tracing."""
    return logging.DEBUG if verbosity >= 2 else logging.INFO


def setup_logging(verbosity: int = 0, log_file: Optional[str] = None) -> logging.Handler:
    """
    Configure the root logger.

    Calling this again replaces the handler installed by the previous call.

    Args:
        verbosity: 0-3, see level_for_verbosity
        log_file: Append to this file instead of writing to stdout

    Returns:
        The installed handler
    """
    if log_file:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler._p4jira = True  # type: ignore[attr-defined]

    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, "_p4jira", False):
            root.removeHandler(existing)
            existing.close()
    root.addHandler(handler)
    root.setLevel(level_for_verbosity(verbosity))

    # urllib3 connection chatter is noise even at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return handler
