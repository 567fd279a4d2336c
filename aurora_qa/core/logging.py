"""
Logging configuration for the application.
"""

import logging
import logging.handlers
import os
from aurora_qa.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = settings.LOG_LEVEL, log_file: str = settings.LOG_FILE):
    """Configure the root logger once: console always, rotating file when LOG_FILE is set."""

    logger = logging.getLogger()
    logger.setLevel(level)

    # Re-running setup (reloads, tests) must not stack handlers
    if getattr(logger, "_aurora_qa_configured", False):
        return logger

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=10485760,  # 10MB
            backupCount=5
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)

    logger._aurora_qa_configured = True
    return logger


# Initialize logger
logger = setup_logging()
