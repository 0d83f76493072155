"""
Shared logging utilities.
"""
import logging

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


def configure_logging(level="INFO"):
    """
    Configure the root logger once at startup.

    Args:
        level: Level name or number, e.g. "DEBUG" or logging.INFO
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)

