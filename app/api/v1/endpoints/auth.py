from datetime import timedelta
from typing import Any

from fastapi import APIRouter, HTTPException, status

from app.core import security
from app.core.logging import get_logger
from app.config import settings
from app.schemas.auth import LoginRequest, RefreshRequest, Token, AccessToken
from app.schemas.responses import SuccessResponse

router = APIRouter()
logger = get_logger(__name__)


@router.post("/login", response_model=SuccessResponse[Token])
async def login(login_data: LoginRequest) -> Any:
    """
    Administrator login.
    Returns JWT access and refresh tokens.
    """
    if not security.authenticate_admin(login_data.email, login_data.password):
        logger.warning("Failed login attempt", extra={"email": login_data.email})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )

    token_data = {"sub": settings.ADMIN_EMAIL}
    access_token = security.create_access_token(
        data=token_data,
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    refresh_token = security.create_refresh_token(data=token_data)

    return SuccessResponse(
        data=Token(
            access_token=access_token,
            refresh_token=refresh_token,
            token_type="bearer",
            email=settings.ADMIN_EMAIL,
        ),
        message="Login successful"
    )


@router.post("/refresh", response_model=SuccessResponse[AccessToken])
async def refresh_access_token(refresh_in: RefreshRequest) -> Any:
    """
    Exchange a refresh token for a new access token.
    """
    payload = security.decode_token(refresh_in.refresh_token)
    if (
        not payload
        or payload.get("type") != "refresh"
        or (payload.get("sub") or "").lower() != settings.ADMIN_EMAIL.lower()
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
        )

    access_token = security.create_access_token(data={"sub": settings.ADMIN_EMAIL})
    return SuccessResponse(data=AccessToken(access_token=access_token))
