"""Transactional email delivery through the Resend HTTP API."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Protocol

import httpx

from app.config import get_settings


@dataclass(frozen=True)
class EmailSent:
    message_id: str | None = None


@dataclass(frozen=True)
class EmailFailed:
    """Provider rejection or transport failure."""

    reason: str
    status_code: int | None = None


EmailSendResult = EmailSent | EmailFailed


class EmailSender(Protocol):
    """Contract for HTML email delivery adapters."""

    async def send_html(self, to: list[str], subject: str, html: str) -> EmailSendResult:
        """Deliver one HTML email and report the outcome."""


def _provider_error_message(response: httpx.Response) -> str:
    """Extract the provider's error message, falling back to the HTTP reason."""
    try:
        payload = response.json()
    except ValueError:
        return response.reason_phrase or f"HTTP {response.status_code}"
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.reason_phrase or f"HTTP {response.status_code}"


@dataclass(frozen=True)
class ResendEmailSender:
    """httpx client for ``POST /emails`` on the Resend API."""

    api_key: str
    from_address: str
    api_url: str = "https://api.resend.com/emails"
    timeout_seconds: float = 10.0
    transport: httpx.AsyncBaseTransport | None = None

    async def send_html(self, to: list[str], subject: str, html: str) -> EmailSendResult:
        """Send an HTML email; transport and provider errors become ``EmailFailed``."""
        payload = {"from": self.from_address, "to": to, "subject": subject, "html": html}
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self.transport
            ) as client:
                response = await client.post(
                    self.api_url,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
        except httpx.HTTPError as exc:
            return EmailFailed(reason=f"{exc.__class__.__name__}: {exc}")

        if response.is_error:
            return EmailFailed(
                reason=_provider_error_message(response), status_code=response.status_code
            )
        try:
            body = response.json()
        except ValueError:
            return EmailSent()
        message_id = body.get("id") if isinstance(body, dict) else None
        return EmailSent(message_id=str(message_id) if message_id else None)


@lru_cache
def get_email_sender() -> ResendEmailSender | None:
    """Build the Resend sender, or None when the API key or sender address is unset."""
    email = get_settings().email
    if email.resend_api_key is None or not email.from_address:
        return None
    api_key = email.resend_api_key.get_secret_value()
    if not api_key:
        return None
    return ResendEmailSender(
        api_key=api_key,
        from_address=email.from_address,
        api_url=email.api_url,
        timeout_seconds=email.timeout_seconds,
    )
