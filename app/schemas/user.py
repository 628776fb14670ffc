"""Login and account-creation request/response schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class CredentialsRequest(BaseModel):
    """Email/password payload; presence is checked by the service, not the schema."""

    email: str | None = None
    password: str | None = None


class UserPublic(BaseModel):
    """Stored user record without the password hash."""

    model_config = ConfigDict(extra="allow")

    id: UUID
    email: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class LoginResponse(BaseModel):
    message: str = "Login successful"
    user: UserPublic


class UserCreatedResponse(BaseModel):
    message: str = "User created successfully"
