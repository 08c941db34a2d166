"""
Structured Logging: JSON log output with request correlation IDs.

Every log record emitted while a request is being handled carries the
request's `x-request-id`, so a single redemption or chat call can be traced
across modules.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# Context variable for request correlation
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

REQUEST_ID_HEADER = "x-request-id"

logger = logging.getLogger("spirit.http")


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        req_id = request_id_var.get("")
        if req_id:
            log_entry["request_id"] = req_id

        extra = getattr(record, "extra_data", None)
        if extra:
            log_entry["data"] = extra

        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
            }

        return json.dumps(log_entry, default=str)


class PlainFormatter(logging.Formatter):
    """Human-readable formatter for local development."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        req_id = request_id_var.get("")
        return f"[{req_id}] {line}" if req_id else line


_configured = False


def setup_logging(level: str = "INFO", json_output: bool = True) -> None:
    """Attach a stdout handler to the `spirit` logger tree (idempotent)."""
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    if json_output:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(
            PlainFormatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )

    root = logging.getLogger("spirit")
    root.addHandler(handler)
    root.setLevel(level.upper())
    root.propagate = False
    _configured = True


def generate_request_id() -> str:
    """Generate a unique request ID."""
    return str(uuid.uuid4())[:12]


def log_event(log: logging.Logger, level: int, msg: str, data: Optional[Any] = None) -> None:
    """Log with structured payload attached under `data`."""
    log.log(level, msg, extra={"extra_data": data} if data else None)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Assigns a correlation id to each request and logs its outcome."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        token = request_id_var.set(request_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("%s %s failed", request.method, request.url.path)
            raise
        finally:
            request_id_var.reset(token)

        elapsed_ms = round((time.perf_counter() - started) * 1000, 1)
        response.headers[REQUEST_ID_HEADER] = request_id
        log_event(
            logger,
            logging.INFO,
            f"{request.method} {request.url.path} -> {response.status_code}",
            {"request_id": request_id, "status": response.status_code, "duration_ms": elapsed_ms},
        )
        return response
