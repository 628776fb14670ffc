"""Transactional email routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.errors import ServiceError
from app.schemas.email import ResetCodeResponse
from app.services.reset_code_service import ResetCodeService, get_reset_code_service

router = APIRouter(prefix="/api/email", tags=["email"])


@router.post("/send-reset-pass-code", response_model=ResetCodeResponse)
async def send_reset_pass_code(
    reset_code_service: Annotated[ResetCodeService, Depends(get_reset_code_service)],
) -> ResetCodeResponse | JSONResponse:
    """Email a new six-digit reset code; the request body is ignored.

    Provider failures keep the 200 status and report ``success: false``.
    """
    try:
        sent = await reset_code_service.send_reset_code()
    except ServiceError as exc:
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())
    if not sent:
        return ResetCodeResponse(success=False, message="Error sending email")
    return ResetCodeResponse(success=True, message="Email sent successfully")
