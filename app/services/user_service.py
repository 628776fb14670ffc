"""Password login and account creation services."""

from __future__ import annotations

from functools import lru_cache

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.passwords import PasswordHasher, get_password_hasher
from app.core.users import (
    DuplicateEmail,
    StoreFailure,
    UserMissing,
    UserStore,
    get_user_store,
)
from app.errors import (
    AuthenticationError,
    ConfigurationError,
    ConflictError,
    InternalError,
    ValidationError,
)
from app.models.user import User

LOGIN_FAILED_DETAIL = "Errored logging in"
CREATE_FAILED_DETAIL = "An error occurred while creating the user"
UNSUPPORTED_PASSWORD_DETAIL = "Password contains unsupported characters"

logger = structlog.get_logger(__name__)


def _require_credentials(email: str | None, password: str | None) -> tuple[str, str]:
    """Reject absent or empty values and passwords bcrypt cannot hash."""
    if not email or not password:
        raise ValidationError()
    if "\x00" in password:
        raise ValidationError(UNSUPPORTED_PASSWORD_DETAIL)
    return email, password


class UserService:
    """Service responsible for credential verification and account creation.

    Input presence is validated before the pepper check in both operations, and
    neither operation touches the store when the pepper is missing.
    """

    def __init__(self, store: UserStore, password_hasher: PasswordHasher) -> None:
        self._store = store
        self._password_hasher = password_hasher

    async def authenticate_user(
        self,
        db_session: AsyncSession,
        email: str | None,
        password: str | None,
    ) -> User:
        """Return the user matching the credentials or raise a ``ServiceError``."""
        email, password = _require_credentials(email, password)
        self._require_pepper()

        lookup = await self._store.find_by_email(db_session=db_session, email=email)
        if isinstance(lookup, StoreFailure):
            logger.error("login_error", error=str(lookup.error), exc_info=lookup.error)
            raise InternalError(LOGIN_FAILED_DETAIL)
        if isinstance(lookup, UserMissing):
            self._password_hasher.dummy_verify()
            logger.info("login_failed", reason="unknown_email")
            raise AuthenticationError()

        user = lookup.user
        try:
            is_valid = self._password_hasher.verify_password(
                password=password, password_hash=user.password_hash
            )
        except (ValueError, TypeError) as exc:
            logger.error("login_error", user_id=str(user.id), error=str(exc), exc_info=exc)
            raise InternalError(LOGIN_FAILED_DETAIL) from exc
        if not is_valid:
            logger.info("login_failed", reason="password_mismatch", user_id=str(user.id))
            raise AuthenticationError()

        logger.info("login_succeeded", user_id=str(user.id))
        return user

    async def create_user(
        self,
        db_session: AsyncSession,
        email: str | None,
        password: str | None,
    ) -> User:
        """Hash the peppered password and insert a new user."""
        email, password = _require_credentials(email, password)
        self._require_pepper()

        password_hash = self._password_hasher.hash_password(password)
        result = await self._store.create(
            db_session=db_session, email=email, password_hash=password_hash
        )
        if isinstance(result, DuplicateEmail):
            logger.info("user_create_conflict")
            raise ConflictError()
        if isinstance(result, StoreFailure):
            logger.error("user_create_error", error=str(result.error), exc_info=result.error)
            raise InternalError(CREATE_FAILED_DETAIL)

        logger.info("user_created", user_id=str(result.user.id))
        return result.user

    def _require_pepper(self) -> None:
        if not self._password_hasher.configured:
            logger.error("pepper_not_configured")
            raise ConfigurationError()


@lru_cache
def get_user_service() -> UserService:
    """Provide the user service dependency with the configured pepper injected."""
    return UserService(store=get_user_store(), password_hasher=get_password_hasher())
