"""
UniDirectory logging
====================

A single ``unidirectory`` logger for the whole service. Every record is
stamped with the current request's log context: the request id, the
authenticated user id and whatever the handler bound while serving the
request (search filter, favorite and university ids).

Production writes one JSON object per line, other environments write one
readable line per record.

Usage:
    from unidirectory.core.logging_config import logger, bind_log_context

    bind_log_context(country=country, name_filter=name)
    logger.log_db_query("search", "universities", duration_ms, rows=len(items))
"""

import json
import logging
import sys
import traceback
import uuid
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from unidirectory.core.config import settings


# The middleware installs a fresh dict per request. Endpoints run in a copy
# of the middleware's context, so they must mutate this dict in place for
# their fields to show up on the request's completion line.
_log_context: ContextVar[Optional[Dict[str, Any]]] = ContextVar("log_context", default=None)

# Attributes every LogRecord already has; extra fields may not reuse them
RECORD_ATTRIBUTES = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "log_context"}


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def start_log_context(request_id: str) -> Token:
    """Begin a request's log context; pair with end_log_context"""
    return _log_context.set({"request_id": request_id})


def end_log_context(token: Token) -> None:
    _log_context.reset(token)


def bind_log_context(**fields: Any) -> None:
    """Attach fields to every record logged for the rest of the request. None values are skipped."""
    context = _log_context.get()
    if context is None:
        context = {}
        _log_context.set(context)
    context.update({key: value for key, value in fields.items() if value is not None})


def get_log_context() -> Dict[str, Any]:
    return dict(_log_context.get() or {})


def _namespaced(fields: Dict[str, Any]) -> Dict[str, Any]:
    # "name", "module", "filename"... would make logging raise KeyError
    return {
        (f"ctx_{key}" if key in RECORD_ATTRIBUTES else key): value
        for key, value in fields.items()
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per record: message, location, request context, extras"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        entry.update(getattr(record, "log_context", {}))
        entry.update({
            key: value for key, value in vars(record).items()
            if key not in RECORD_ATTRIBUTES and not key.startswith("_")
        })

        if record.exc_info and record.exc_info[0]:
            exc_type, exc_value, exc_tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(exc_type, exc_value, exc_tb),
            }

        return json.dumps(entry, default=str)


class ContextFormatter(logging.Formatter):
    """Readable line: request id in front, bound fields as key=value at the end"""

    def format(self, record: logging.LogRecord) -> str:
        context = dict(getattr(record, "log_context", {}))
        record.request_id = context.pop("request_id", "-")
        line = super().format(record)
        if context:
            line += " | " + " ".join(f"{key}={value}" for key, value in context.items())
        return line


class UniDirectoryLogger(logging.Logger):
    """Logger whose records carry the request log context, with one helper per event type"""

    def makeRecord(self, name, level, fn, lno, msg, args, exc_info,
                   func=None, extra=None, sinfo=None):
        record = super().makeRecord(name, level, fn, lno, msg, args, exc_info, func, extra, sinfo)
        record.log_context = get_log_context()
        return record

    def _event(self, level: int, message: str, event_type: str, fields: Dict[str, Any],
               exc_info: Any = None) -> None:
        self.log(level, message, exc_info=exc_info,
                 extra={"event_type": event_type, **_namespaced(fields)})

    def log_http(self, method: str, path: str, status_code: int, duration_ms: float) -> None:
        """Request completion line, one per non-quiet request"""
        if status_code >= 500:
            level = logging.ERROR
        elif status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        self._event(
            level, f"{method} {path} -> {status_code} ({duration_ms:.1f}ms)", "http_request",
            {"http_method": method, "http_path": path, "http_status": status_code,
             "duration_ms": round(duration_ms, 2)},
        )

    def log_db_query(self, operation: str, table: str, duration_ms: float,
                     rows: int = 0, **fields: Any) -> None:
        self._event(
            logging.DEBUG, f"DB {operation} on {table}: {rows} rows ({duration_ms:.1f}ms)", "db_query",
            {"db_operation": operation, "db_table": table, "duration_ms": round(duration_ms, 2),
             "rows": rows, **fields},
        )

    def log_auth_event(self, event: str, success: bool, user_email: Optional[str] = None,
                       reason: Optional[str] = None, **fields: Any) -> None:
        """Login and token checks. Failures are warnings."""
        message = f"Auth {event} {'succeeded' if success else 'failed'}"
        if user_email:
            message += f" for {user_email}"
        if reason:
            message += f": {reason}"
        self._event(
            logging.INFO if success else logging.WARNING, message, "auth",
            {"auth_event": event, "auth_success": success, "user_email": user_email,
             "failure_reason": reason, **fields},
        )

    def log_error_with_context(self, error: Exception, context: Optional[str] = None,
                               **fields: Any) -> None:
        """Log an exception with its traceback; field names are namespaced when they clash with LogRecord"""
        self._event(
            logging.ERROR, f"Error in {context}: {type(error).__name__}: {error}", "error",
            {"error_type": type(error).__name__, "error_context": context, **fields},
            exc_info=(type(error), error, error.__traceback__),
        )

    def log_slow(self, operation: str, duration_ms: float, threshold_ms: float) -> None:
        self._event(
            logging.WARNING, f"Slow: {operation} took {duration_ms:.1f}ms (threshold {threshold_ms}ms)",
            "performance",
            {"operation": operation, "duration_ms": round(duration_ms, 2), "threshold_ms": threshold_ms},
        )


def setup_logging() -> UniDirectoryLogger:
    """Configure the ``unidirectory`` logger from settings and return it"""
    logging.setLoggerClass(UniDirectoryLogger)
    logger = logging.getLogger("unidirectory")
    logger.__class__ = UniDirectoryLogger  # in case it existed before setLoggerClass
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    logger.handlers.clear()

    json_logging = settings.ENVIRONMENT == "production"
    formatter: logging.Formatter
    if json_logging:
        formatter = JSONFormatter()
    else:
        formatter = ContextFormatter("%(asctime)s %(levelname)-8s [%(request_id)s] %(message)s")

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if settings.LOG_FILE:
        log_file = Path(settings.LOG_FILE)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(log_file, maxBytes=10 * 1024 * 1024, backupCount=5)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    for noisy in ("uvicorn.access", "sqlalchemy.engine", "aiosqlite"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.debug(f"Logging ready (level={settings.LOG_LEVEL}, json={json_logging})")
    return logger


logger: UniDirectoryLogger = setup_logging()


__all__ = [
    "logger",
    "setup_logging",
    "new_request_id",
    "start_log_context",
    "end_log_context",
    "bind_log_context",
    "get_log_context",
    "UniDirectoryLogger",
    "JSONFormatter",
    "ContextFormatter",
]
