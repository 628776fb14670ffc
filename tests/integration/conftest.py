"""Postgres-backed fixtures using testcontainers.

Only tests that request ``app_factory`` or ``db_session`` start a container.
"""

from __future__ import annotations

import os
from collections.abc import AsyncIterator, Callable, Iterator
from typing import Any

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import delete
from testcontainers.postgres import PostgresContainer

from docker.errors import DockerException

INTEGRATION_PEPPER = "integration-pepper"


def _clear_dependency_caches() -> None:
    """Clear cached settings and settings-derived singletons."""
    from app.config import get_settings
    from app.core.email import get_email_sender
    from app.core.passwords import get_password_hasher
    from app.core.users import get_user_store
    from app.db.session import get_engine, get_session_factory
    from app.services.reset_code_service import get_reset_code_service
    from app.services.user_service import get_user_service

    get_settings.cache_clear()
    get_engine.cache_clear()
    get_session_factory.cache_clear()
    get_password_hasher.cache_clear()
    get_user_store.cache_clear()
    get_user_service.cache_clear()
    get_email_sender.cache_clear()
    get_reset_code_service.cache_clear()


async def _dispose_engine_if_built() -> None:
    """Dispose the loop-bound engine before the event loop changes."""
    from app.db.session import dispose_engine, get_engine

    if get_engine.cache_info().currsize:
        await dispose_engine()


def _postgres_async_url(postgres: PostgresContainer) -> str:
    """Return a postgresql+asyncpg URL across testcontainers versions."""
    try:
        postgres_url = postgres.get_connection_url(driver=None)
    except TypeError:
        postgres_url = postgres.get_connection_url()

    if postgres_url.startswith("postgresql+"):
        postgres_url = "postgresql://" + postgres_url.split("://", 1)[1]
    return postgres_url.replace("postgresql://", "postgresql+asyncpg://", 1)


@pytest.fixture(scope="session")
def integration_env() -> Iterator[dict[str, str]]:
    """Start Postgres, apply migrations, and point settings at it."""
    try:
        postgres = PostgresContainer("postgres:16")
        postgres.start()
    except DockerException as exc:
        if os.environ.get("CI", "").lower() in {"1", "true", "yes"}:
            pytest.fail(f"Docker daemon unavailable in CI for Postgres integration tests: {exc}")
        pytest.skip(f"Docker daemon unavailable for Postgres integration tests: {exc}")

    database_url = _postgres_async_url(postgres)
    env_values = {
        "APP__ENVIRONMENT": "development",
        "APP__LOG_LEVEL": "WARNING",
        "DATABASE__URL": database_url,
        "SECURITY__PEPPER": INTEGRATION_PEPPER,
        "SECURITY__BCRYPT_ROUNDS": "4",
    }
    monkeypatch = pytest.MonkeyPatch()
    for key, value in env_values.items():
        monkeypatch.setenv(key, value)
    _clear_dependency_caches()

    alembic_cfg = Config("alembic.ini")
    alembic_cfg.set_main_option("sqlalchemy.url", database_url)
    command.upgrade(alembic_cfg, "head")

    try:
        yield {"database_url": database_url}
    finally:
        _clear_dependency_caches()
        monkeypatch.undo()
        postgres.stop()


@pytest.fixture(scope="function")
async def clean_database(integration_env: dict[str, str]) -> AsyncIterator[None]:
    """Empty the users table and isolate the engine per test event loop."""
    del integration_env
    from app.db.session import get_session_factory
    from app.models.user import User

    await _dispose_engine_if_built()
    _clear_dependency_caches()
    async with get_session_factory()() as session:
        await session.execute(delete(User))
        await session.commit()
    try:
        yield
    finally:
        await _dispose_engine_if_built()
        _clear_dependency_caches()


@pytest.fixture(scope="function")
def app_factory(clean_database: None) -> Callable[[], Any]:
    """Build isolated FastAPI app instances bound to the container database."""
    del clean_database
    from app.main import create_app

    return create_app
