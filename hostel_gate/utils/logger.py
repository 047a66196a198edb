# hostel_gate/utils/logger.py
"""
Logging setup shared by every module.

Gate activity (scans, entries, exits, partial writes, toasts) goes to the
console and, unless LOG_TO_FILE is off, to a rotating file whose location,
size and retention come from settings (LOG_DIR / LOG_FILE / LOG_MAX_BYTES /
LOG_BACKUP_COUNT).
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from hostel_gate.config import settings

_DEFAULT_LOG_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "logs")
_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_configured = False


def _file_handler(level: str, fmt: logging.Formatter) -> RotatingFileHandler:
    log_dir = settings.LOG_DIR or _DEFAULT_LOG_DIR
    os.makedirs(log_dir, exist_ok=True)
    handler = RotatingFileHandler(
        filename=os.path.join(log_dir, settings.LOG_FILE),
        maxBytes=settings.LOG_MAX_BYTES,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(fmt)
    return handler


def _configure_root_logger():
    global _configured
    if _configured:
        return
    _configured = True

    level = settings.LOG_LEVEL.upper()
    fmt = logging.Formatter(fmt=_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(console)
    if settings.LOG_TO_FILE:
        root.addHandler(_file_handler(level, fmt))


def get_logger(name: str) -> logging.Logger:
    """Named logger; the root handlers are installed on first call."""
    _configure_root_logger()
    return logging.getLogger(name)
