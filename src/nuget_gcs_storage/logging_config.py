"""
Logging setup for processes hosting the package storage adapter.

Records below ERROR go to stdout and ERROR and above go to stderr, so each
record is written exactly once. The level comes from the ``level`` argument,
else from NUGET_STORAGE_LOG_LEVEL, else INFO.
"""

import logging
import os
import sys
from typing import Mapping, Optional, Union

from .constants import ENV_LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class MaxLevelFilter(logging.Filter):
    """Pass only records strictly below ``max_level``."""

    def __init__(self, max_level: int):
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.max_level


def resolve_level(level: Union[int, str, None] = None, environ: Optional[Mapping[str, str]] = None) -> int:
    """Turn a level name, number or unset value into a logging level."""
    if level is None:
        environ = os.environ if environ is None else environ
        level = environ.get(ENV_LOG_LEVEL) or logging.INFO

    if isinstance(level, int):
        return level

    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def setup_logging(level: Union[int, str, None] = None) -> None:
    """Install the stdout/stderr handler pair on the root logger."""
    level = resolve_level(level)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    stdout_handler.setLevel(level)
    stdout_handler.addFilter(MaxLevelFilter(logging.ERROR))

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    stderr_handler.setLevel(max(level, logging.ERROR))

    root_logger.addHandler(stdout_handler)
    root_logger.addHandler(stderr_handler)
    root_logger.setLevel(level)


__all__ = ["LOG_FORMAT", "MaxLevelFilter", "resolve_level", "setup_logging"]
