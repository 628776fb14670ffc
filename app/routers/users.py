"""User account routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.dependencies import get_database_session
from app.errors import ServiceError
from app.schemas.user import CredentialsRequest, UserCreatedResponse
from app.services.user_service import UserService, get_user_service

router = APIRouter(prefix="/api/user", tags=["users"])


def _error_response(exc: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@router.post("/post", status_code=201, response_model=UserCreatedResponse)
async def create_user(
    payload: CredentialsRequest,
    db_session: Annotated[AsyncSession, Depends(get_database_session)],
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> UserCreatedResponse | JSONResponse:
    """Create a password account; duplicate emails yield 409."""
    try:
        await user_service.create_user(
            db_session=db_session,
            email=payload.email,
            password=payload.password,
        )
    except ServiceError as exc:
        return _error_response(exc)
    return UserCreatedResponse()
