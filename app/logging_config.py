"""Structured JSON logging setup."""
import logging
import sys

from pythonjsonlogger.json import JsonFormatter


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(funcName)s %(message)s"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure the root logger to emit JSON lines on stdout.

    Safe to call more than once; existing handlers are replaced.

    Args:
        level: Log level name (e.g. "INFO", "DEBUG")

    Returns:
        The configured root logger
    """
    logger = logging.getLogger()
    logger.setLevel(level.upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter(LOG_FORMAT))

    if logger.hasHandlers():
        logger.handlers.clear()
    logger.addHandler(handler)

    # Reduce noisy libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logger.info("JSON structured logging initialized")
    return logger
