"""
Logging setup for applications embedding deferred-index-sync.
"""

import logging
from typing import Optional

from .models.config import SyncSettings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure root logging with the package's format"""
    handlers = None
    if log_file:
        handlers = [logging.StreamHandler(), logging.FileHandler(log_file, encoding='utf-8')]

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers
    )


def configure_logging_from_settings(settings: SyncSettings, log_file: Optional[str] = None) -> None:
    """Configure root logging at the level loaded into ``settings.logging``"""
    configure_logging(settings.logging.level, log_file)
