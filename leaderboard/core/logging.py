from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from time import perf_counter
from typing import Any, Dict, Iterator, Mapping, MutableMapping
from uuid import uuid4

from fastapi import Request, Response


CORRELATION_HEADER = "X-Correlation-ID"

_CORRELATION_ID: ContextVar[str | None] = ContextVar("correlation_id", default=None)


class JsonFormatter(logging.Formatter):
    """Serialize log records into single-line JSON for structured ingestion."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - override
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        correlation_id = _CORRELATION_ID.get()
        if correlation_id:
            payload["correlation_id"] = correlation_id
        structured = getattr(record, "structured_data", None)
        if isinstance(structured, Mapping):
            payload.update(structured)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack_info"] = record.stack_info
        return json.dumps(payload, ensure_ascii=True, default=str)


class StructuredAdapter(logging.LoggerAdapter):
    """Logger adapter that merges keyword extra fields into structured JSON."""

    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> tuple[str, MutableMapping[str, Any]]:
        extra_payload: Dict[str, Any] = dict(self.extra or {})
        existing_extra = kwargs.get("extra")
        if isinstance(existing_extra, dict):
            structured = existing_extra.get("structured_data")
            if isinstance(structured, Mapping):
                extra_payload.update(dict(structured))
        else:
            existing_extra = {}
        existing_extra["structured_data"] = extra_payload
        kwargs["extra"] = existing_extra
        return msg, kwargs


_STRUCTURED_ATTR = "_structured_configured"


def configure_logging(*, level: int = logging.INFO, environment: str = "dev") -> None:
    """Configure root logger with JSON formatter once (idempotent).

    Args:
        level: Base logging level (default: INFO).
        environment: Runtime environment ('dev', 'test', 'staging', 'prod').
                     'dev' and 'test' enable DEBUG so the per-request
                     REST events are visible; 'prod' never goes below INFO.
    """
    root = logging.getLogger()
    if bool(getattr(root, _STRUCTURED_ATTR, False)):
        return

    if environment in ("dev", "test"):
        effective_level = logging.DEBUG if level == logging.INFO else level
    elif environment == "prod":
        effective_level = max(level, logging.INFO)
    else:
        effective_level = level

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(effective_level)
    setattr(root, _STRUCTURED_ATTR, True)


def get_logger(name: str, **defaults: Any) -> StructuredAdapter:
    """Return a structured logger adapter injecting default structured fields."""

    logger = logging.getLogger(name)
    return StructuredAdapter(logger, defaults)


def get_correlation_id() -> str | None:
    """Return current correlation id if any."""

    return _CORRELATION_ID.get()


@contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    """Context manager to bind/unbind correlation id automatically."""

    cid = correlation_id or str(uuid4())
    token = _CORRELATION_ID.set(cid)
    try:
        yield cid
    finally:
        _CORRELATION_ID.reset(token)


_access_logger = logging.getLogger("leaderboard.http")


async def bind_correlation_id(request: Request, call_next) -> Response:
    """HTTP middleware binding one correlation id to the whole request.

    The id comes from the ``X-Correlation-ID`` request header or is generated,
    is kept on ``request.state`` for handlers that run outside this middleware
    (the 500 handler), and is echoed on the response.
    """
    with correlation_context(request.headers.get(CORRELATION_HEADER)) as cid:
        request.state.correlation_id = cid
        started = perf_counter()
        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = cid
        _access_logger.debug(
            "http_request_completed",
            extra={
                "structured_data": {
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "duration_ms": round((perf_counter() - started) * 1000.0, 3),
                }
            },
        )
        return response


def request_correlation_id(request: Request) -> str | None:
    """Correlation id of ``request``, falling back to the bound context."""

    return getattr(request.state, "correlation_id", None) or _CORRELATION_ID.get()


__all__ = [
    "CORRELATION_HEADER",
    "JsonFormatter",
    "configure_logging",
    "get_logger",
    "get_correlation_id",
    "correlation_context",
    "bind_correlation_id",
    "request_correlation_id",
]
