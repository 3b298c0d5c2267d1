"""JSON logging for the exporter process."""

import logging
import sys
from pythonjsonlogger.json import JsonFormatter


LOG_FORMAT = '%(asctime)s %(name)s %(levelname)s %(message)s'
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def resolve_level(level: str) -> int:
    """
    Map a level name to its logging constant.

    Raises:
        ValueError: If the name is not one of LOG_LEVELS
    """
    name = level.strip().upper()
    if name not in LOG_LEVELS:
        raise ValueError(f"Unknown log level {level!r}, expected one of {', '.join(LOG_LEVELS)}")
    return getattr(logging, name)


def setup_logger(name: str = "watch_exporter", level: str = "INFO") -> logging.Logger:
    """
    Send one JSON object per record to stdout.

    Walkers and collectors log through children of this logger, so they
    share its handler. Calling it again for the same name replaces the
    handler instead of adding a second one.

    Args:
        name: Logger name
        level: One of LOG_LEVELS, case-insensitive

    Returns:
        logging.Logger: Configured logger instance

    Raises:
        ValueError: If the level name is unknown
    """
    logger = logging.getLogger(name)
    logger.setLevel(resolve_level(level))
    logger.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter(LOG_FORMAT, timestamp=True))
    logger.addHandler(handler)
    logger.propagate = False

    return logger
