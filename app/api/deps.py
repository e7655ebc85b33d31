"""API Dependencies"""

from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.config import settings
from app.core.security import decode_token
from app.database import get_db  # noqa: F401 (re-exported for endpoints)

# Security scheme for bearer token
security = HTTPBearer()


def _credentials_error(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_admin(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> str:
    """
    Resolve the administrator from a JWT access token.

    Args:
        credentials: HTTP authorization credentials

    Returns:
        The admin's email, used as ``performed_by`` in the audit trail

    Raises:
        HTTPException: If the token is invalid, expired or not an access token
    """
    payload = decode_token(credentials.credentials)
    if not payload:
        raise _credentials_error()

    if payload.get("type") != "access":
        raise _credentials_error("Invalid token type")

    subject: Optional[str] = payload.get("sub")
    if not subject or subject.lower() != settings.ADMIN_EMAIL.lower():
        raise _credentials_error()

    return subject
