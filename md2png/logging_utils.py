from __future__ import annotations

import logging

from .config import LOG_LEVEL

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO), format=_FORMAT)
    return logger
