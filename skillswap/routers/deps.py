"""Request-scoped authentication dependencies.

The bearer token identifies the caller; ban and admin flags are re-read
from ``users`` on every request so a ban takes effect immediately.
"""

from __future__ import annotations

from typing import Any

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from skillswap.core.errors import AccountBanned, AdminRequired, AuthenticationError
from skillswap.core.security import decode_access_token
from skillswap.services.users import get_user_row

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict[str, Any]:
    """Resolve the caller's ``users`` row from the bearer token."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token required")
    payload = decode_access_token(credentials.credentials)
    user = get_user_row(payload["sub"])
    if user is None:
        raise AuthenticationError("User no longer exists")
    return user


def get_active_user(user: dict[str, Any] = Depends(get_current_user)) -> dict[str, Any]:
    """Caller that is not banned."""
    if user.get("is_banned"):
        raise AccountBanned()
    return user


def require_admin(user: dict[str, Any] = Depends(get_active_user)) -> dict[str, Any]:
    """Caller that is an active admin."""
    if not user.get("is_admin"):
        raise AdminRequired()
    return user
