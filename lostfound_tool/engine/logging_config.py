"""
Logging configuration for the engine.

Verbosity follows the CLI convention: -v INFO, -vv DEBUG, -vvv TRACE
(DEBUG including boto3/botocore wire logging).

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_LIBRARY_LOGGERS = ("boto3", "botocore", "urllib3")


def _level_for(verbosity: int) -> int:
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def setup_logging(verbosity: int = 0) -> None:
    """
    Configure root logging for CLI and handler entry points.

    Args:
        verbosity: Count of -v flags (0=WARNING, 1=INFO, 2=DEBUG, 3+=TRACE)
    """
    level = _level_for(verbosity)
    root = logging.getLogger()
    root.setLevel(level)

    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    else:
        for handler in root.handlers:
            handler.setLevel(level)

    # AWS SDK noise only at TRACE
    library_level = logging.DEBUG if verbosity >= 3 else logging.WARNING
    for name in _LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)


def setup_logging_from_env() -> None:
    """Configure logging from LOG_LEVEL (used by Lambda handlers)."""
    name = os.getenv("LOG_LEVEL", "INFO").upper()
    verbosity = {"WARNING": 0, "INFO": 1, "DEBUG": 2, "TRACE": 3}.get(name, 1)
    setup_logging(verbosity)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
