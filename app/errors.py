"""Client-facing error taxonomy shared by services and routers."""

from __future__ import annotations


class ServiceError(Exception):
    """Base error carrying the HTTP status and response body key."""

    status_code = 500
    body_key = "error"
    default_detail = "Request failed."

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def to_payload(self) -> dict[str, str]:
        """Render the error as a JSON response body."""
        return {self.body_key: self.detail}


class ValidationError(ServiceError):
    """Required request fields are missing."""

    status_code = 400
    default_detail = "Email and password are required"


class ConfigurationError(ServiceError):
    """A server-side secret is not configured."""

    status_code = 500
    default_detail = "Server configuration error"


class AuthenticationError(ServiceError):
    """Unknown email or wrong password; both share one message."""

    status_code = 401
    default_detail = "Invalid email or password"


class ConflictError(ServiceError):
    status_code = 409
    body_key = "message"
    default_detail = "User with this email already exists"


class InternalError(ServiceError):
    status_code = 500
    body_key = "message"
    default_detail = "Internal server error."
