"""User persistence with explicit lookup and insert outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User

UNIQUE_VIOLATION_SQLSTATE = "23505"


@dataclass(frozen=True)
class UserFound:
    user: User


@dataclass(frozen=True)
class UserMissing:
    email: str


@dataclass(frozen=True)
class UserCreated:
    user: User


@dataclass(frozen=True)
class DuplicateEmail:
    email: str


@dataclass(frozen=True)
class StoreFailure:
    """Unexpected database failure, kept for logging by the caller."""

    error: Exception


LookupResult = UserFound | UserMissing | StoreFailure
CreateResult = UserCreated | DuplicateEmail | StoreFailure


def is_email_unique_violation(exc: IntegrityError) -> bool:
    """Return True when an integrity error is the unique constraint on ``users.email``."""
    original = exc.orig
    sqlstate = getattr(original, "sqlstate", None) or getattr(original, "pgcode", None)
    if sqlstate is not None and sqlstate != UNIQUE_VIOLATION_SQLSTATE:
        return False
    message = str(original).lower()
    return "unique" in message and "email" in message


class UserStore:
    """Single-statement reads and writes against the users table."""

    async def find_by_email(self, db_session: AsyncSession, email: str) -> LookupResult:
        """Look up one user by exact email match."""
        statement = select(User).where(User.email == email)
        try:
            result = await db_session.execute(statement)
            user = result.scalar_one_or_none()
        except (SQLAlchemyError, OSError) as exc:
            return StoreFailure(error=exc)
        if user is None:
            return UserMissing(email=email)
        return UserFound(user=user)

    async def create(self, db_session: AsyncSession, email: str, password_hash: str) -> CreateResult:
        """Insert a user, reporting an email uniqueness violation as ``DuplicateEmail``."""
        user = User(email=email, password_hash=password_hash)
        db_session.add(user)
        try:
            await db_session.flush()
            await db_session.commit()
        except IntegrityError as exc:
            await db_session.rollback()
            if is_email_unique_violation(exc):
                return DuplicateEmail(email=email)
            return StoreFailure(error=exc)
        except (SQLAlchemyError, OSError) as exc:
            await db_session.rollback()
            return StoreFailure(error=exc)
        return UserCreated(user=user)


@lru_cache
def get_user_store() -> UserStore:
    return UserStore()
