"""Structured access logging middleware."""

from __future__ import annotations

from time import perf_counter

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.config import REDACTED

SENSITIVE_QUERY_MARKERS = ("password", "pepper", "key", "token", "code", "secret")

logger = structlog.get_logger(__name__)


def redact_query_params(request: Request) -> dict[str, str]:
    """Copy query parameters, masking any whose name looks secret-bearing."""
    return {
        name: REDACTED if any(marker in name.lower() for marker in SENSITIVE_QUERY_MARKERS) else value
        for name, value in request.query_params.items()
    }


def client_address(request: Request) -> str:
    forwarded_for = request.headers.get("x-forwarded-for", "").strip()
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Emit one ``request_completed`` event per request.

    Request bodies are never logged since they carry passwords.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        started = perf_counter()
        fields = {
            "method": request.method,
            "path": request.url.path,
            "query_params": redact_query_params(request),
            "client_ip": client_address(request),
        }
        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                "request_completed",
                status_code=500,
                duration_ms=round((perf_counter() - started) * 1000, 2),
                **fields,
            )
            raise

        log = logger.warning if response.status_code >= 400 else logger.info
        log(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((perf_counter() - started) * 1000, 2),
            **fields,
        )
        return response
