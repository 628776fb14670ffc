"""Authentication routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.dependencies import get_database_session
from app.errors import ServiceError
from app.schemas.user import CredentialsRequest, LoginResponse, UserPublic
from app.services.user_service import UserService, get_user_service

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _error_response(exc: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: CredentialsRequest,
    db_session: Annotated[AsyncSession, Depends(get_database_session)],
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> LoginResponse | JSONResponse:
    """Verify email/password credentials and return the user without its hash.

    No session token is issued.
    """
    try:
        user = await user_service.authenticate_user(
            db_session=db_session,
            email=payload.email,
            password=payload.password,
        )
    except ServiceError as exc:
        return _error_response(exc)
    return LoginResponse(user=UserPublic.model_validate(user.public_fields()))
