"""Logging setup for the queue backend."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from src.core.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILENAME = "queue_backend.log"


def setup_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """Configure the root logger from settings.

    Always logs to stdout. When ``log_dir`` is configured a rotating file
    handler is added as well.

    Args:
        settings: Settings to use (defaults to the global settings)

    Returns:
        The configured root logger
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = []

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if settings.log_dir:
        try:
            settings.log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                settings.log_dir / LOG_FILENAME,
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.warning(f"Failed to initialize file logging in {settings.log_dir}: {e}")

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    return root_logger
