import logging
import os
import sys

PACKAGE_LOGGER = "dynamodb_table_manager"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(debug: bool = False) -> logging.Logger:
    """Attach a stdout handler to the package logger once.

    Level is DEBUG when ``debug`` is set, otherwise ``LOG_LEVEL`` (default INFO).
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    level = "DEBUG" if debug else os.getenv("LOG_LEVEL", "INFO").upper()
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
        logger.addHandler(handler)
    return logger
