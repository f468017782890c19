"""Logging helpers for the marketplace service.

`get_logger` hands out loggers that share one console handler and one
rotating file handler under ``LOG_DIR``. Setting ``LOG_DIR`` to an empty
string keeps logging on the console only.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from core.config import LOG_BACKUP_COUNT, LOG_DIR, LOG_LEVEL, LOG_MAX_BYTES

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
LOG_FILE = os.path.join(LOG_DIR, "marketplace.log") if LOG_DIR else None

_handlers = []


def _shared_handlers():
    if not _handlers:
        formatter = logging.Formatter(LOG_FORMAT)
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        _handlers.append(console)
        if LOG_FILE:
            os.makedirs(LOG_DIR, exist_ok=True)
            rotating = RotatingFileHandler(LOG_FILE, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT)
            rotating.setFormatter(formatter)
            _handlers.append(rotating)
    return _handlers


def get_logger(name: str = __name__, level: int = None) -> logging.Logger:
    """Return the logger `name`, attaching the shared handlers on first use.

    The level defaults to ``LOG_LEVEL``.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(level if level is not None else logging.getLevelName(LOG_LEVEL.upper()))
        for handler in _shared_handlers():
            logger.addHandler(handler)
    return logger
