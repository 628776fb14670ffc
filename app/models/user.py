"""User ORM model."""

from __future__ import annotations

from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import String
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, TimestampMixin

SECRET_COLUMNS = frozenset({"password_hash"})


class User(Base, TimestampMixin):
    """Password account keyed by a unique email address."""

    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(PGUUID(as_uuid=True), primary_key=True, default=uuid4)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    def public_fields(self) -> dict[str, Any]:
        """Return every mapped column value except the stored password hash."""
        return {
            column.key: getattr(self, column.key)
            for column in self.__table__.columns
            if column.key not in SECRET_COLUMNS
        }
