from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from leaderboard.core.errors import DomainError
from leaderboard.core.logging import CORRELATION_HEADER, get_correlation_id, get_logger, request_correlation_id

logger = get_logger("leaderboard.routers.exceptions", component="router")


def _with_correlation(payload: dict[str, Any]) -> dict[str, Any]:
    correlation_id = get_correlation_id()
    if correlation_id:
        payload["correlation_id"] = correlation_id
    return payload


def register_exception_handlers(app: FastAPI) -> None:
    """Register shared HTTP translators for errors escaping the handlers."""

    @app.exception_handler(DomainError)
    async def _handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
        if isinstance(exc.detail, dict):
            detail_payload: dict[str, Any] = {**exc.detail}
            detail_payload.setdefault("message", exc.message)
        elif exc.detail is not None:
            detail_payload = {"message": exc.message, "extra": exc.detail}
        else:
            detail_payload = {"message": exc.message}
        payload: dict[str, Any] = {
            "error": exc.error_code,
            "detail": detail_payload,
        }
        return JSONResponse(status_code=getattr(exc, "status_code", 400), content=_with_correlation(payload))

    @app.exception_handler(RequestValidationError)
    async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        field_errors = [
            {
                "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
                "message": error.get("msg", ""),
                "type": error.get("type", ""),
            }
            for error in exc.errors()
        ]
        payload = {
            "message": "error.validation",
            "status": 400,
            "fieldErrors": field_errors,
        }
        return JSONResponse(status_code=400, content=_with_correlation(payload))

    @app.exception_handler(Exception)
    async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        # runs outside the http middleware, so the id is read back from request.state
        correlation_id = request_correlation_id(request)
        logger.exception(
            "unhandled_request_error",
            extra={
                "structured_data": {
                    "path": request.url.path,
                    "method": request.method,
                    "correlation_id": correlation_id,
                }
            },
        )
        payload: dict[str, Any] = {"message": "error.http.500", "status": 500}
        headers: dict[str, str] = {}
        if correlation_id:
            payload["correlation_id"] = correlation_id
            headers[CORRELATION_HEADER] = correlation_id
        return JSONResponse(status_code=500, content=payload, headers=headers)
