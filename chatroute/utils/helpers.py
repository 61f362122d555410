"""Logging helpers."""

import sys

from loguru import logger


def configure_logging(level: str = "INFO") -> int:
    """
    Replace loguru's default sink with a stderr sink at ``level``.

    Returns:
        The id of the new sink, usable with ``logger.remove``.
    """
    logger.remove()
    return logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name} - {message}",
    )
