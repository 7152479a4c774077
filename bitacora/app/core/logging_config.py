# bitacora/app/core/logging_config.py
"""Logging configuration for the API process."""
import json
import logging
import sys
from datetime import datetime, timezone


class JsonFormatter(logging.Formatter):
    """One JSON object per line, used in production."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in ("method", "url", "ip", "user_id"):
            if hasattr(record, key):
                log_data[key] = getattr(record, key)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, ensure_ascii=False)


class ReadableFormatter(logging.Formatter):
    """Text lines; records logged with request extras get ``| METHOD URL from IP``."""

    def __init__(self):
        super().__init__(
            "[%(asctime)s] %(levelname)-8s | %(name)-32s | %(message)s%(request_context)s", "%H:%M:%S"
        )

    def format(self, record: logging.LogRecord) -> str:
        method = getattr(record, "method", None)
        if method:
            ip = getattr(record, "ip", None) or "-"
            record.request_context = f" | {method} {getattr(record, 'url', '-')} from {ip}"
        else:
            record.request_context = ""
        return super().format(record)


def setup_logging(level: str = "INFO", structured: bool = False) -> None:
    """
    Configure the root logger once.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR)
        structured: Emit JSON lines instead of readable text
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if structured else ReadableFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    for noisy in ("sqlalchemy.engine", "aiosqlite", "passlib", "multipart"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
