"""Integration tests for the reset-code email route."""

from __future__ import annotations

import json

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.core.email import ResendEmailSender
from app.error_handlers import register_exception_handlers
from app.routers import email
from app.services.reset_code_service import ResetCodeService, get_reset_code_service


def _build_app(provider_status: int | None, captured: list[httpx.Request]) -> FastAPI:
    """Build app whose email sender talks to a mocked Resend endpoint."""
    app = FastAPI()
    register_exception_handlers(app, environment="production")
    app.include_router(email.router)

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(provider_status or 200, json={"id": "email_1", "message": "boom"})

    sender = (
        ResendEmailSender(
            api_key="re_test_key",
            from_address="Support <support@example.com>",
            transport=httpx.MockTransport(handler),
        )
        if provider_status is not None
        else None
    )
    service = ResetCodeService(email_sender=sender, recipient="ops@example.com")
    app.dependency_overrides[get_reset_code_service] = lambda: service
    return app


@pytest.mark.asyncio
async def test_send_reset_code_success() -> None:
    """A provider 200 yields a success payload and an email with a six-digit code."""
    captured: list[httpx.Request] = []
    app = _build_app(provider_status=200, captured=captured)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        response = await client.post(
            "/api/email/send-reset-pass-code", json={"email": "ignored@example.com"}
        )

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Email sent successfully"}
    sent = json.loads(captured[0].content)
    assert sent["to"] == ["ops@example.com"]
    assert sent["subject"] == "Reset Password Code"
    code = int(sent["html"].split("<b>")[1].split("</b>")[0])
    assert 100000 <= code <= 999999


@pytest.mark.asyncio
async def test_send_reset_code_provider_failure_keeps_200() -> None:
    """Provider errors report success false while keeping status 200."""
    captured: list[httpx.Request] = []
    app = _build_app(provider_status=500, captured=captured)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        response = await client.post("/api/email/send-reset-pass-code")

    assert response.status_code == 200
    assert response.json() == {"success": False, "message": "Error sending email"}
    assert len(captured) == 1


@pytest.mark.asyncio
async def test_send_reset_code_without_api_key_returns_500() -> None:
    """An unconfigured provider is a server configuration error."""
    app = _build_app(provider_status=None, captured=[])

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        response = await client.post("/api/email/send-reset-pass-code")

    assert response.status_code == 500
    assert response.json() == {"error": "Server configuration error"}
