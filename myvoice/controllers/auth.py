"""Owner authentication endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from myvoice.config.settings import settings
from myvoice.controllers.dependencies import OwnerDep
from myvoice.telemetry import OWNER_LOGIN_COUNTER
from myvoice.utils import create_owner_token, is_authorized
from myvoice.views import (
    ErrorResponse,
    OwnerLoginRequest,
    OwnerSessionResponse,
    TokenResponse,
)

router = APIRouter(prefix="/api/owner", tags=["owner"])


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={401: {"model": ErrorResponse}},
)
async def login(payload: OwnerLoginRequest) -> TokenResponse:
    """Exchange the owner password for a signed session token."""

    if not is_authorized(payload.password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid password")

    OWNER_LOGIN_COUNTER.inc()
    return TokenResponse(
        access_token=create_owner_token(),
        expires_in=settings.security.token_expires_minutes * 60,
    )


@router.get("/session", response_model=OwnerSessionResponse, dependencies=[OwnerDep])
async def session() -> OwnerSessionResponse:
    """Confirm that the presented credential still grants owner access."""

    return OwnerSessionResponse()
