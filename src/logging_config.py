# Logger factory shared by the gateway modules.
# One stream handler per named logger; level comes from LOG_LEVEL.

from __future__ import annotations
import logging
import os

_DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(h)
        logger.setLevel(_DEFAULT_LEVEL)
    return logger


def set_level(level: str) -> None:
    """Apply a level to every logger created through get_logger."""
    for name, obj in logging.Logger.manager.loggerDict.items():
        if name.startswith("src.") and isinstance(obj, logging.Logger):
            obj.setLevel(level.upper())
