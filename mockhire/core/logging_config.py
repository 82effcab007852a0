"""
Logging setup for the MockHire API.

Configured once from the app lifespan. Service modules only ever call
``logging.getLogger(__name__)``; nothing below the API layer configures
handlers.
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILE_NAME = "mockhire.log"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

QUIET_LOGGERS = ("uvicorn", "uvicorn.access", "sqlalchemy.engine", "alembic", "passlib")

REDACTED = "***REDACTED***"
SENSITIVE_KEYS = ("password", "token", "secret", "authorization")


def setup_logging(log_level: str = "INFO", log_dir: Optional[str] = "logs") -> None:
    """
    Install console and rotating-file handlers on the root logger.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL (unknown values fall back to INFO)
        log_dir: Directory for mockhire.log; None logs to the console only
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(console)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path / LOG_FILE_NAME,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
        )
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _mask_database_url(value: str) -> str:
    # Keep driver, host and database name; drop the password
    try:
        return make_url(value).render_as_string(hide_password=True)
    except ArgumentError:
        return REDACTED


def sanitize_log_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Copy of ``data`` safe to log.

    Secrets are replaced outright; database URLs keep everything but the password.
    """
    sanitized = {}
    for key, value in data.items():
        lowered = key.lower()
        if any(sensitive in lowered for sensitive in SENSITIVE_KEYS):
            sanitized[key] = REDACTED
        elif lowered.endswith("_url") and isinstance(value, str) and "://" in value:
            sanitized[key] = _mask_database_url(value)
        else:
            sanitized[key] = value
    return sanitized
