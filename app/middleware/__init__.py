"""Middleware package exports."""

from app.middleware.correlation_id import CorrelationIdMiddleware
from app.middleware.logging import LoggingMiddleware

__all__ = ["CorrelationIdMiddleware", "LoggingMiddleware"]
