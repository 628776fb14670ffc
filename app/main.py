"""FastAPI application factory."""

from fastapi import FastAPI

from app.config import configure_structlog, get_settings
from app.error_handlers import register_exception_handlers
from app.middleware import CorrelationIdMiddleware, LoggingMiddleware
from app.routers import auth, email, health, users


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_structlog(settings)

    app = FastAPI(title=settings.app.service)
    register_exception_handlers(app, environment=settings.app.environment)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(CorrelationIdMiddleware)

    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(email.router)
    app.include_router(health.router)
    return app


app = create_app()
