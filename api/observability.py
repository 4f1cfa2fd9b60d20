"""Request-scoped logging for the API: request ids and access-log fields."""

from __future__ import annotations

import contextvars
import logging
import sys
import time
from typing import Optional
from uuid import uuid4

from core.logging_config import _QUIET_LOGGERS, JSONFormatter

_request_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("request_id", default=None)
_logging_configured = False


def get_request_id() -> Optional[str]:
    return _request_id_var.get()


def set_request_id(value: Optional[str]) -> contextvars.Token:
    return _request_id_var.set(value)


def reset_request_id(token: contextvars.Token) -> None:
    _request_id_var.reset(token)


def new_request_id() -> str:
    return uuid4().hex


class RequestJSONFormatter(JSONFormatter):
    """Adds the active request id to the ``context`` of every line logged while serving it."""

    def format(self, record: logging.LogRecord) -> str:
        request_id = get_request_id()
        if request_id and not hasattr(record, "request_id"):
            record.request_id = request_id
        return super().format(record)


def configure_logging(level: str = "INFO") -> None:
    """Route root and uvicorn logs through one request-aware JSON handler. Runs once per process."""
    global _logging_configured
    if _logging_configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(RequestJSONFormatter())
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.propagate = True
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _logging_configured = True


def request_log_fields(
    *, method: str, path: str, status_code: int, duration_ms: float, client_ip: Optional[str]
) -> dict[str, object]:
    return {
        "method": method,
        "path": path,
        "status_code": int(status_code),
        "duration_ms": round(float(duration_ms), 2),
        "client_ip": client_ip or "",
    }


def monotonic_ms() -> float:
    return time.perf_counter() * 1000.0
