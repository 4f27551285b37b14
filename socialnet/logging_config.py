import logging
from typing import Optional

LOGGER_NAME = "socialnet"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _parse_level(value: Optional[str]) -> int:
    if not value:
        return logging.INFO
    level = getattr(logging, value.strip().upper(), None)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Attach a single stream handler to the ``socialnet`` logger.

    Safe to call more than once; later calls only adjust the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_parse_level(level))
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    return logger
