# importhub/core/auth.py
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from importhub.config import Settings
from importhub.core.errors import AuthorizationError
from importhub.database import get_session
from importhub.repositories import directory
from importhub.schemas.principal import Principal, Role

TOKEN_TTL = timedelta(hours=24)


def _extract_bearer_token(request: Request) -> Optional[str]:
    """
    Returns the token from an `Authorization: Bearer <token>` header, or None.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    parts = auth_header.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def create_access_token(user_id: int, settings: Settings, username: Optional[str] = None,
                        role: Optional[str] = None, ttl: timedelta = TOKEN_TTL) -> str:
    """Same claims the users service puts in its login tokens."""
    now = datetime.now(timezone.utc)
    payload = {"userId": user_id, "iat": now, "exp": now + ttl}
    if username:
        payload["username"] = username
    if role:
        payload["role"] = role
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def _decode_token(token: str, settings: Settings) -> dict:
    """
    Verifies signature and expiry. Any failure is a 403, matching the users service.
    """
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError:
        raise AuthorizationError("Invalid token")


def _role_of(raw: Optional[str]) -> Role:
    # unknown labels never grant admin capabilities
    try:
        return Role(raw)
    except ValueError:
        return Role.USER


# --------- FastAPI Dependencies --------- #

async def get_principal(request: Request, session: AsyncSession = Depends(get_session)) -> Principal:
    """
    Token required: verifies it, loads the user row and returns the Principal.
    Role comes from the database, not from the token claims.
    """
    token = _extract_bearer_token(request)
    if not token:
        raise AuthorizationError("Access token required", status_code=status.HTTP_401_UNAUTHORIZED)

    decoded = _decode_token(token, request.app.state.settings)
    user_id = decoded.get("userId")
    if not isinstance(user_id, int):
        raise AuthorizationError("Invalid token")

    user = await directory.get_user(session, user_id)
    if user is None:
        raise AuthorizationError("Invalid token")

    return Principal(id=user.id, role=_role_of(user.role), username=user.username, email=user.email)
