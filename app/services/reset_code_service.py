"""Password-reset code generation and email dispatch."""

from __future__ import annotations

import secrets
from functools import lru_cache

import structlog

from app.config import get_settings
from app.core.email import EmailFailed, EmailSender, get_email_sender
from app.errors import ConfigurationError

RESET_CODE_MIN = 100000
RESET_CODE_MAX = 999999
RESET_CODE_SUBJECT = "Reset Password Code"

logger = structlog.get_logger(__name__)


def generate_reset_code() -> int:
    """Return a uniformly random six-digit code in ``[100000, 999999]``."""
    return RESET_CODE_MIN + secrets.randbelow(RESET_CODE_MAX - RESET_CODE_MIN + 1)


def render_reset_code_html(code: int) -> str:
    return f"<p>Reset Password Code: <b>{code}</b></p>"


class ResetCodeService:
    """Generate a reset code and email it to the configured recipient.

    The code is not stored or tied to a requesting account, so nothing can
    verify it later.
    """

    def __init__(self, email_sender: EmailSender | None, recipient: str) -> None:
        self._email_sender = email_sender
        self._recipient = recipient

    async def send_reset_code(self) -> bool:
        """Send one freshly generated code; return whether the provider accepted it."""
        if self._email_sender is None or not self._recipient:
            logger.error("email_not_configured")
            raise ConfigurationError()

        code = generate_reset_code()
        result = await self._email_sender.send_html(
            to=[self._recipient],
            subject=RESET_CODE_SUBJECT,
            html=render_reset_code_html(code),
        )
        if isinstance(result, EmailFailed):
            logger.warning(
                "reset_code_send_failed",
                reason=result.reason,
                provider_status=result.status_code,
            )
            return False

        logger.info("reset_code_sent", message_id=result.message_id)
        return True


@lru_cache
def get_reset_code_service() -> ResetCodeService:
    """Provide the reset-code service dependency."""
    return ResetCodeService(
        email_sender=get_email_sender(),
        recipient=get_settings().email.reset_code_recipient,
    )
