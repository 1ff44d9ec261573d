"""Identity store: registration, login and profile management.

All authority-determining flags (``is_banned``, ``is_admin``) are read from
the ``users`` table on every call; the token only asserts who the caller is.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from postgrest.exceptions import APIError

from skillswap.core.errors import (
    AccountBanned,
    AuthenticationError,
    EmailAlreadyRegistered,
    ValidationError,
    UserNotFound,
    is_unique_violation,
)
from skillswap.core.security import create_access_token, hash_password, verify_password
from skillswap.db.supabase import fetch_by_id, first_row, get_supabase
from skillswap.models.user import PasswordChange, ProfileUpdate, User, UserLogin, UserRegister

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def get_user_row(user_id: str) -> dict[str, Any] | None:
    """Return the raw ``users`` row (including ``password_hash``) or None."""
    return fetch_by_id("users", user_id)


def require_user(user_id: str) -> dict[str, Any]:
    """Return the ``users`` row or raise ``UserNotFound``."""
    row = get_user_row(user_id)
    if row is None:
        raise UserNotFound()
    return row


def get_users_by_ids(user_ids: set[str]) -> dict[str, dict[str, Any]]:
    """Fetch several users at once, keyed by id."""
    if not user_ids:
        return {}
    result = (
        get_supabase()
        .table("users")
        .select("*")
        .in_("id", sorted(user_ids))
        .execute()
    )
    return {str(row["id"]): row for row in result.data or []}


def _find_by_email(email: str) -> dict[str, Any] | None:
    result = (
        get_supabase()
        .table("users")
        .select("*")
        .eq("email", _normalize_email(email))
        .limit(1)
        .execute()
    )
    return first_row(result)


# ---------------------------------------------------------------------------
# Registration / login
# ---------------------------------------------------------------------------

def register_user(payload: UserRegister) -> tuple[User, str]:
    """Create a user and return it with a fresh access token.

    Raises ``EmailAlreadyRegistered`` when the email is taken.
    """
    email = _normalize_email(payload.email)
    if _find_by_email(email) is not None:
        raise EmailAlreadyRegistered()

    row = {
        "email": email,
        "password_hash": hash_password(payload.password),
        "name": payload.name.strip(),
        "location": payload.location.strip(),
        "availability": payload.availability.strip(),
        "is_public": True,
        "is_admin": False,
        "is_banned": False,
    }
    try:
        result = get_supabase().table("users").insert(row).execute()
    except APIError as exc:
        if is_unique_violation(exc):
            raise EmailAlreadyRegistered() from exc
        raise

    created = first_row(result)
    if created is None:
        raise RuntimeError("Insert into users returned no data")

    logger.info("user_registered", extra={"user_id": str(created["id"])})
    return User(**created), create_access_token(created)


def authenticate(payload: UserLogin) -> tuple[User, str]:
    """Verify credentials and return the user with an access token.

    Unknown email and wrong password are indistinguishable to the caller.
    """
    row = _find_by_email(payload.email)
    if row is None or not verify_password(payload.password, row.get("password_hash", "")):
        raise AuthenticationError()
    if row.get("is_banned"):
        raise AccountBanned()

    logger.info("user_logged_in", extra={"user_id": str(row["id"])})
    return User(**row), create_access_token(row)


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------

def update_profile(user_id: str, payload: ProfileUpdate) -> User:
    """Apply a partial profile update.

    Raises ``ValidationError`` when no field is supplied.
    """
    changes = payload.model_dump(exclude_none=True)
    if not changes:
        raise ValidationError("No fields to update")

    require_user(user_id)
    changes["updated_at"] = datetime.now(timezone.utc).isoformat()
    result = (
        get_supabase()
        .table("users")
        .update(changes)
        .eq("id", str(user_id))
        .execute()
    )
    updated = first_row(result)
    if updated is None:
        raise UserNotFound()

    logger.info(
        "profile_updated",
        extra={"user_id": str(user_id), "fields": sorted(changes)},
    )
    return User(**updated)


def change_password(user_id: str, payload: PasswordChange) -> None:
    """Replace the password after checking the current one."""
    row = require_user(user_id)
    if not verify_password(payload.current_password, row.get("password_hash", "")):
        raise ValidationError("Current password is incorrect")

    (
        get_supabase()
        .table("users")
        .update({
            "password_hash": hash_password(payload.new_password),
            "updated_at": datetime.now(timezone.utc).isoformat(),
        })
        .eq("id", str(user_id))
        .execute()
    )
    logger.info("password_changed", extra={"user_id": str(user_id)})
