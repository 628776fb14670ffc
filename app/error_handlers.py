"""Global exception handlers enforcing the JSON error body contract."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.errors import InternalError, ServiceError
from app.middleware.correlation_id import CORRELATION_ID_HEADER

INVALID_PAYLOAD_DETAIL = "Invalid request payload."

logger = structlog.get_logger(__name__)


def _correlation_id(request: Request) -> str:
    return getattr(
        request.state,
        "correlation_id",
        request.headers.get(CORRELATION_ID_HEADER, "unknown"),
    )


def _http_error_payload(status_code: int, detail: object) -> dict[str, str]:
    """Client errors use an ``error`` key, server errors a ``message`` key."""
    message = detail if isinstance(detail, str) else "Request failed."
    key = "message" if status_code >= 500 else "error"
    return {key: message}


def register_exception_handlers(app: FastAPI, environment: str) -> None:
    """Register global exception handlers enforcing the error body shape."""

    @app.exception_handler(ServiceError)
    async def handle_service_error(request: Request, exc: ServiceError) -> JSONResponse:
        """Render service errors that escaped a router."""
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_http_error_payload(exc.status_code, exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_exception(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed JSON or wrongly typed fields are client errors (400)."""
        detail = INVALID_PAYLOAD_DETAIL
        if environment == "development":
            errors = exc.errors()
            if errors:
                detail = f"Invalid request payload: {errors[0].get('msg', 'validation error')}."
        return JSONResponse(status_code=400, content={"error": detail})

    @app.exception_handler(Exception)
    async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
        """Log the failure and return a generic 500 body.

        This response is built outside the middleware stack, so the correlation
        header is set here.
        """
        correlation_id = _correlation_id(request)
        logger.error(
            "unhandled_exception",
            correlation_id=correlation_id,
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        error = InternalError()
        return JSONResponse(
            status_code=error.status_code,
            content=error.to_payload(),
            headers={CORRELATION_ID_HEADER: correlation_id},
        )
