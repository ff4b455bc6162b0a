"""Logging setup. Modules just call logging.getLogger(__name__); this installs the single handler on the package logger."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
ROOT_LOGGER_NAME = "src"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Idempotent: calling it twice only updates the level."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    if not any(getattr(handler, "_reforged", False) for handler in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._reforged = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger
