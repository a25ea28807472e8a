"""Logging setup.

All modules log through loguru's shared ``logger``; this module only
decides where records go and at which level.
"""

import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
)


def configure_logging(level: str = "WARNING") -> None:
    """Route log records to stderr at the given level.

    Replaces loguru's default handler so repeated calls do not duplicate
    output.
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)
