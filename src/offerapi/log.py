"""Logging setup for offerapi.

Usage in any module:
    from .log import get_logger
    logger = get_logger(__name__)
"""

import logging
import sys
from typing import Optional

_CONFIGURED = False

LOG_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: Optional[str] = None) -> None:
    """Attach a console handler to the ``offerapi`` logger.

    The handler is added once; later calls only adjust the level.
    """
    global _CONFIGURED
    root = logging.getLogger("offerapi")

    if level:
        root.setLevel(level.upper())

    if _CONFIGURED:
        return
    _CONFIGURED = True

    if not level:
        root.setLevel(logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Return a logger, configuring the package logger on first use."""
    setup_logging()
    return logging.getLogger(name)
