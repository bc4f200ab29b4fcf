# app/core/security.py
from __future__ import annotations

"""
VidShare · Caller identity (JWT)
================================
Accounts and sign-in live upstream; this service only verifies the access
token it is handed and extracts the caller's user id (`sub`).

- Bearer token from `Authorization`, else the `accessToken` cookie
- Signature and `exp` checked by python-jose
- `get_current_user_id` → required identity (401 when missing/invalid)
- `get_optional_user_id` → `None` for anonymous callers on public routes
- `create_access_token` for local tooling and tests
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union
from uuid import UUID

from fastapi import Request
from jose import ExpiredSignatureError, JWTError, jwt

from app.core.config import settings
from app.core.exceptions import UnauthorizedError

__all__ = [
    "create_access_token",
    "decode_access_token",
    "get_bearer_token",
    "get_current_user_id",
    "get_optional_user_id",
]


def _secret() -> str:
    return settings.JWT_SECRET_KEY.get_secret_value()


# ─────────────────────────────────────────────────────────────
# 🔑 Token creation / decoding
# ─────────────────────────────────────────────────────────────
def create_access_token(
    user_id: Union[str, UUID],
    *,
    expires_delta: Optional[timedelta] = None,
    extra_claims: Optional[Dict[str, Any]] = None,
) -> str:
    """Issue a signed access token whose `sub` is the user id."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    claims: Dict[str, Any] = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
        "token_type": "access",
    }
    if extra_claims:
        claims.update({k: v for k, v in extra_claims.items() if k not in {"sub", "exp"}})
    return jwt.encode(claims, _secret(), algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Verify signature and expiry; return the claims.

    Raises
    ------
    UnauthorizedError
        Expired, tampered, or non-access tokens.
    """
    try:
        payload = jwt.decode(token, _secret(), algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise UnauthorizedError("Access token expired")
    except JWTError:
        raise UnauthorizedError("Invalid access token")

    if payload.get("token_type", "access") != "access":
        raise UnauthorizedError("Invalid token type")
    return payload


def get_bearer_token(request: Request) -> Optional[str]:
    """Case-insensitive `Bearer` extraction; falls back to the access cookie."""
    auth = request.headers.get("Authorization") or ""
    scheme, _, value = auth.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    cookie = request.cookies.get(settings.ACCESS_TOKEN_COOKIE_NAME)
    return cookie or None


def _user_id_from_token(token: str) -> UUID:
    sub = decode_access_token(token).get("sub")
    try:
        return UUID(str(sub))
    except (TypeError, ValueError):
        raise UnauthorizedError("Invalid token subject")


# ─────────────────────────────────────────────────────────────
# 🧩 FastAPI dependencies
# ─────────────────────────────────────────────────────────────
async def get_current_user_id(request: Request) -> UUID:
    token = get_bearer_token(request)
    if not token:
        raise UnauthorizedError("Unauthorized request")
    return _user_id_from_token(token)


async def get_optional_user_id(request: Request) -> Optional[UUID]:
    """Anonymous callers get `None`; a present but bad token is still rejected."""
    token = get_bearer_token(request)
    if not token:
        return None
    return _user_id_from_token(token)
