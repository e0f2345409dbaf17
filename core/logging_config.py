"""
Logging setup for the page host.

Records go to ``logs/forum_page_host.log`` (rotated) and to stdout. Session
cookies, JWTs, Bearer headers and secret-looking key/value pairs are masked
before anything is written.
"""

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys


LOG_FILENAME = "forum_page_host.log"
MAX_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# (pattern, replacement), applied in order
SENSITIVE_PATTERNS = [
    # secret_key=..., forum_session=..., Cookie: ...
    (
        re.compile(
            r"(password|secret|secret_key|token|session_token|api_key|"
            r"authorization|cookie|forum_session|credential)\s*[:=]\s*['\"]?([^'\"\s&;]+)['\"]?",
            re.IGNORECASE
        ),
        r"\1=***"
    ),
    (
        re.compile(r"(Bearer\s+)([A-Za-z0-9\-_\.]+)", re.IGNORECASE),
        r"\1***"
    ),
    # session tokens logged on their own
    (
        re.compile(r"\b(eyJ[A-Za-z0-9\-_]+\.eyJ[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+)\b"),
        r"[JWT:***]"
    ),
    # /hello?session=...
    (
        re.compile(
            r"([?&])(token|key|secret|password|session)=([^&\s]+)",
            re.IGNORECASE
        ),
        r"\1\2=***"
    ),
]


class SensitiveDataFormatter(logging.Formatter):
    """Formatter that runs every SENSITIVE_PATTERNS substitution on the output."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for pattern, replacement in SENSITIVE_PATTERNS:
            message = pattern.sub(replacement, message)
        return message


def get_log_path() -> Path:
    """``<project>/logs/forum_page_host.log``; the directory is created on demand."""
    logs_dir = Path(__file__).resolve().parent.parent / "logs"
    logs_dir.mkdir(exist_ok=True)
    return logs_dir / LOG_FILENAME


def _resolve_level(log_level: int | str) -> int:
    """Accept ``logging.DEBUG`` or names such as ``"debug"`` from APP_LOG_LEVEL."""
    if isinstance(log_level, int):
        return log_level
    level = logging.getLevelName(log_level.upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(log_level: int | str = logging.INFO) -> None:
    """
    Send all records to the rotating log file and stdout, masked.

    Calling it again replaces the handlers instead of adding more.
    """
    level = _resolve_level(log_level)
    log_file_path = get_log_path()
    formatter = SensitiveDataFormatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            filename=str(log_file_path),
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        ),
        logging.StreamHandler(sys.stdout),
    ]

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    root_logger.info(f"Logging initialized. Log file: {log_file_path}")

    # Access and reload chatter.
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "watchfiles"):
        logging.getLogger(name).setLevel(logging.WARNING)
