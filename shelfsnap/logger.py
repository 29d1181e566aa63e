"""
Shared logger utility for the shelfsnap package.
Provides a consistent logger configuration for all modules.
"""

import logging
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: Optional[str] = None, level: Union[int, str, None] = None) -> logging.Logger:
    """
    Returns a logger with the specified name, configured with a standard format.
    The level is only changed when ``level`` is given, so library loggers
    inherit whatever the application configured.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
    if level is not None:
        logger.setLevel(level)
    return logger
