"""Shared FastAPI dependency helpers."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_session_factory


async def get_database_session() -> AsyncGenerator[AsyncSession, None]:
    """Open one session per request; uncommitted work is discarded on close."""
    async with get_session_factory()() as session:
        yield session
