# ledger_api/core/security.py
from datetime import timedelta
from typing import Optional

import jwt
from fastapi_users.jwt import decode_jwt, generate_jwt

from .auth import TOKEN_AUDIENCE
from .config import settings

def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Issue a token in the same shape the login routes hand out, so it can be
    used as the session cookie or a bearer token.
    """
    if expires_delta:
        lifetime = int(expires_delta.total_seconds())
    else:
        lifetime = settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
    payload = {"sub": subject, "aud": TOKEN_AUDIENCE}
    return generate_jwt(payload, settings.SECRET_KEY, lifetime, algorithm=settings.ALGORITHM)

def decode_access_token(token: str) -> Optional[str]:
    """Return the token subject, or None when the token is invalid or expired."""
    try:
        payload = decode_jwt(token, settings.SECRET_KEY, TOKEN_AUDIENCE, algorithms=[settings.ALGORITHM])
    except jwt.PyJWTError:
        return None
    return payload.get("sub")
