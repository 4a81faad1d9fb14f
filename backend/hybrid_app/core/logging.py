"""Logging setup for the API and the calculation worker.

Two context variables tag every record emitted while they are set: the
HTTP request ID (set by ``RequestLoggingMiddleware``) and the Celery task
ID (set by ``bind_task_id`` inside the worker).  ``JSONFormatter`` also
copies the calculation-run fields the engine attaches via ``extra=``.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
task_id_var: ContextVar[str] = ContextVar("task_id", default="")

ACCESS_FIELDS = ("method", "path", "status_code", "duration_ms", "client_ip")
RUN_FIELDS = (
    "stage",
    "progress_pct",
    "run_duration_ms",
    "pv_kwp",
    "battery_kwh",
    "diesel_kw",
    "error",
)

# Polled by load balancers; logged below INFO.
QUIET_PATHS = frozenset({"/health"})

access_logger = logging.getLogger("hybrid.access")


@contextmanager
def bind_task_id(task_id: str | None) -> Iterator[None]:
    """Tag records emitted inside the block with a Celery task ID."""
    token = task_id_var.set(task_id or "")
    try:
        yield
    finally:
        task_id_var.reset(token)


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with request/task IDs and run fields."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        rid = request_id_var.get()
        if rid:
            entry["request_id"] = rid
        tid = getattr(record, "task_id", None) or task_id_var.get()
        if tid:
            entry["task_id"] = tid

        for key in (*ACCESS_FIELDS, *RUN_FIELDS):
            val = getattr(record, key, None)
            if val is not None:
                entry[key] = val

        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Echo or assign X-Request-ID and write one access record per request."""

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        rid = request.headers.get("x-request-id") or uuid.uuid4().hex[:8]
        token = request_id_var.set(rid)
        try:
            return await self._timed(request, call_next, rid)
        finally:
            request_id_var.reset(token)

    async def _timed(self, request: Request, call_next, rid: str) -> Response:
        start = time.perf_counter()
        response: Response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000, 1)
        response.headers["X-Request-ID"] = rid

        path = request.url.path
        level = logging.DEBUG if path in QUIET_PATHS else logging.INFO
        access_logger.log(
            level,
            "%s %s %d %.1fms",
            request.method,
            path,
            response.status_code,
            duration_ms,
            extra={
                "method": request.method,
                "path": path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
                "client_ip": request.client.host if request.client else "unknown",
            },
        )
        return response


def setup_logging(json_format: bool = False, level: str = "INFO") -> None:
    """Install a single stderr handler on the root logger."""
    root = logging.getLogger()
    root.setLevel(level.upper())

    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    root.handlers.clear()
    root.addHandler(handler)

    logging.getLogger("matplotlib").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
