"""Structured logging for the chat session service.

Every record is rendered as one JSON object. Fields bound with
``bind_log_context`` (conversation and request ids, set by the session
worker) are attached to all records emitted from the same task, merged with
any ``extra={"context": {...}}`` passed at the call site.
"""

import json
import logging
import logging.config
import os
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from pathlib import Path

from .config import DEFAULT_LOG_PATH

_log_context: ContextVar[dict | None] = ContextVar("chatsession_log_context", default=None)

# Third-party loggers that are chatty at INFO.
QUIET_LOGGERS = ("httpx", "httpcore", "anthropic", "aiosqlite")


def bind_log_context(**fields) -> Token:
    """Attach fields to every record logged from the current task."""
    current = _log_context.get() or {}
    return _log_context.set({**current, **fields})


def reset_log_context(token: Token) -> None:
    _log_context.reset(token)


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "where": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        context = dict(_log_context.get() or {})
        context.update(getattr(record, "context", None) or {})
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


def setup_logging(
    log_level: str | None = None,
    log_file: str | None = None,
) -> None:
    """
    Configure the root logger with JSON output to a rotating file and stdout.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
                   Defaults to LOG_LEVEL env var or INFO.
        log_file: Defaults to LOG_FILE env var or 04_logs/app.log.
    """
    level = (log_level or os.getenv("LOG_LEVEL") or "INFO").upper()
    log_path = Path(log_file or os.getenv("LOG_FILE") or DEFAULT_LOG_PATH)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {"()": JSONFormatter},
            },
            "handlers": {
                "file": {
                    "class": "logging.handlers.RotatingFileHandler",
                    "filename": str(log_path),
                    "maxBytes": 5 * 1024 * 1024,
                    "backupCount": 3,
                    "formatter": "json",
                    "encoding": "utf-8",
                },
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": {name: {"level": "WARNING"} for name in QUIET_LOGGERS},
            "root": {"level": level, "handlers": ["file", "console"]},
        }
    )


def get_logger(name: str) -> logging.Logger:
    """Module logger; pass ``__name__``."""
    return logging.getLogger(name)
