"""Peppered bcrypt password hashing."""

from __future__ import annotations

from functools import lru_cache

from passlib.context import CryptContext

from app.config import get_settings
from app.errors import ConfigurationError


class PasswordHasher:
    """Hash and verify passwords with a server-side pepper appended before bcrypt."""

    def __init__(self, pepper: str | None, rounds: int = 10) -> None:
        self._pepper = pepper or None
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    @property
    def configured(self) -> bool:
        """Return True when a pepper is available."""
        return self._pepper is not None

    def hash_password(self, password: str) -> str:
        """Generate a bcrypt hash of ``password + pepper``."""
        return str(self._context.hash(self._peppered(password)))

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Verify ``password + pepper`` against a stored bcrypt hash.

        Raises ``ValueError`` when the stored hash is not a recognizable bcrypt digest.
        """
        return bool(self._context.verify(self._peppered(password), password_hash))

    def dummy_verify(self) -> None:
        """Spend comparable effort when there is no stored hash to compare."""
        self._context.dummy_verify()

    def _peppered(self, password: str) -> str:
        if self._pepper is None:
            raise ConfigurationError()
        return password + self._pepper


@lru_cache
def get_password_hasher() -> PasswordHasher:
    """Build the password hasher from configured security settings."""
    security = get_settings().security
    pepper = security.pepper.get_secret_value() if security.pepper is not None else None
    return PasswordHasher(pepper=pepper, rounds=security.bcrypt_rounds)
