"""
src/logger.py
Shared application logger.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from src.constants import (
    LOG_NAME,
    DEBUG_LOG_FOLDER,
    DEBUG_LOG_FILE,
    DEBUG_LOG_MAX_BYTES,
    DEBUG_LOG_BACKUP_COUNT,
)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(module)s - %(message)s"


def create_logger() -> logging.Logger:
    """
    Return the application logger, attaching the console handler the first time it's requested.
    """
    logger = logging.getLogger(LOG_NAME)

    if not logger.handlers:
        logger.setLevel(logging.INFO)
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(console_handler)

    return logger


def set_debug_logging(enabled: bool) -> None:
    """
    Toggle debug output. When enabled, records are also written to a rotating file in the Debug folder.
    """
    logger = create_logger()
    file_handlers = [
        h for h in logger.handlers if isinstance(h, RotatingFileHandler)
    ]

    if not enabled:
        logger.setLevel(logging.INFO)
        for handler in file_handlers:
            logger.removeHandler(handler)
            handler.close()
        return

    logger.setLevel(logging.DEBUG)
    if file_handlers:
        return

    if not os.path.exists(DEBUG_LOG_FOLDER):
        os.makedirs(DEBUG_LOG_FOLDER)

    file_handler = RotatingFileHandler(
        DEBUG_LOG_FILE,
        maxBytes=DEBUG_LOG_MAX_BYTES,
        backupCount=DEBUG_LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(file_handler)
