"""
Logging utilities
"""
import logging
import sys
from typing import Optional

from ris_search.config.settings import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# httpx/httpcore log every request at INFO; only surface them when debugging
_TRANSPORT_LOGGERS = ("httpx", "httpcore")


def _level() -> int:
    return getattr(logging, settings.log_level.upper(), logging.INFO)


def _stdout_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a configured logger instance

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name or settings.service_name)

    # Already configured
    if logger.handlers:
        return logger

    level = _level()
    logger.setLevel(level)
    logger.addHandler(_stdout_handler(level))
    logger.propagate = False

    if level > logging.DEBUG:
        for transport_logger in _TRANSPORT_LOGGERS:
            logging.getLogger(transport_logger).setLevel(logging.WARNING)

    return logger
