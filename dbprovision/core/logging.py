"""Logging setup. Everything goes to stderr so pytest output capture stays clean."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str | int = "WARNING") -> logging.Logger:
    logger = logging.getLogger("dbprovision")
    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)

    if not any(getattr(h, "_dbprovision", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._dbprovision = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger
