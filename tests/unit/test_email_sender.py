"""Unit tests for the Resend HTTP email sender."""

from __future__ import annotations

import json

import httpx
import pytest

from app.core.email import EmailFailed, EmailSent, ResendEmailSender


def _sender(handler) -> ResendEmailSender:
    return ResendEmailSender(
        api_key="re_test_key",
        from_address="Support <support@example.com>",
        api_url="https://api.resend.test/emails",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_send_html_posts_resend_payload() -> None:
    """The request carries bearer auth and the Resend JSON body."""
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"id": "email_123"})

    result = await _sender(handler).send_html(
        to=["user@example.com"], subject="Hello", html="<p>Hi</p>"
    )

    assert result == EmailSent(message_id="email_123")
    request = captured[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.resend.test/emails"
    assert request.headers["authorization"] == "Bearer re_test_key"
    assert json.loads(request.content) == {
        "from": "Support <support@example.com>",
        "to": ["user@example.com"],
        "subject": "Hello",
        "html": "<p>Hi</p>",
    }


@pytest.mark.asyncio
async def test_send_html_returns_failure_on_provider_error() -> None:
    """Non-2xx provider responses become EmailFailed with the provider message."""

    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(422, json={"name": "validation_error", "message": "Invalid `to`"})

    result = await _sender(handler).send_html(to=["bad"], subject="s", html="h")

    assert result == EmailFailed(reason="Invalid `to`", status_code=422)


@pytest.mark.asyncio
async def test_send_html_returns_failure_on_transport_error() -> None:
    """Network failures are reported, not raised."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = await _sender(handler).send_html(to=["user@example.com"], subject="s", html="h")

    assert isinstance(result, EmailFailed)
    assert result.status_code is None
    assert "ConnectError" in result.reason


@pytest.mark.asyncio
async def test_send_html_tolerates_non_json_success_body() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="ok")

    result = await _sender(handler).send_html(to=["user@example.com"], subject="s", html="h")

    assert result == EmailSent(message_id=None)
