"""JWT helpers for bearer authentication."""
from __future__ import annotations

from datetime import timedelta
from typing import Any

from jose import jwt

from pulse_stage.core.settings import settings
from pulse_stage.db.time import utcnow


def create_access_token(user_id: int, expires_delta: timedelta | None = None) -> str:
    """Issue a signed access token whose subject is the user identifier."""
    expire = utcnow() + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    payload: dict[str, Any] = {"sub": str(user_id), "exp": expire}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and verify an access token.

    Raises:
        jose.JWTError: If the token is malformed, expired or badly signed.
    """
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
