"""
Logging helpers.

Modules obtain their logger with ``get_logger(__name__)``. The library never
touches the root logger on import; applications (or notebooks) opt in with
``setup_logging()``.

Usage:
    from clusterlab.utils import setup_logging
    setup_logging("DEBUG")   # shows every merge / split step
"""

import logging
from typing import Optional, Union

PACKAGE_LOGGER_NAME = "clusterlab"
DEFAULT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a logger namespaced under the package logger."""
    if name != PACKAGE_LOGGER_NAME and not name.startswith(PACKAGE_LOGGER_NAME + "."):
        name = f"{PACKAGE_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def setup_logging(
    level: Optional[Union[int, str]] = None,
    fmt: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """
    Attach a stream handler to the package logger.

    Args:
        level: Logging level (name or number). Defaults to
            ``config.log_level`` (``CLUSTERLAB_LOG_LEVEL``).
        fmt: Format string for the handler.

    Returns:
        The configured package logger. Calling this again only updates the
        level and format; handlers are not duplicated.
    """
    if level is None:
        from ..config import config

        level = config.log_level
    if isinstance(level, str):
        level = level.upper()

    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    logger.setLevel(level)

    handler = next(
        (h for h in logger.handlers if getattr(h, "_clusterlab_handler", False)),
        None,
    )
    if handler is None:
        handler = logging.StreamHandler()
        handler._clusterlab_handler = True
        logger.addHandler(handler)
    handler.setFormatter(logging.Formatter(fmt))
    return logger
