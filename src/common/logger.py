"""
Logging setup for the signage core.
Every module gets its logger through setup_logger(__name__).
"""

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LEVEL = "INFO"


def _resolve_level(level: Optional[str]) -> int:
    """Map a level name (argument, then SIGNAGE_LOG_LEVEL) to a logging level."""
    name = level or os.environ.get("SIGNAGE_LOG_LEVEL", DEFAULT_LEVEL)
    resolved = logging.getLevelName(str(name).upper())
    if not isinstance(resolved, int):
        return logging.INFO
    return resolved


def setup_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Get a configured logger.

    Args:
        name: Logger name, usually __name__
        level: Level name override (e.g. 'DEBUG')

    Returns:
        Logger with a single stream handler attached
    """
    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level(level))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
