"""Admin operations: user moderation, platform statistics and broadcast
messages.

Statistics are read-only aggregates; the average rating is 0 when no
rating exists yet.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from skillswap.core.errors import NotFound, SelfBanForbidden, UserNotFound, ValidationError
from skillswap.db.supabase import (
    fetch_by_id,
    first_row,
    get_supabase,
    ilike_pattern,
    page_bounds,
    page_count,
)
from skillswap.models.admin import (
    AdminMessage,
    AdminMessageCreate,
    AdminMessageListResponse,
    AdminMessageUpdate,
    AdminUserListResponse,
    PlatformStats,
    SwapStatusCounts,
)
from skillswap.models.common import Pagination
from skillswap.models.enums import SwapStatus, UserStatusFilter
from skillswap.models.user import User
from skillswap.services.ratings import get_rating_summary

logger = logging.getLogger(__name__)

MESSAGE_NOT_FOUND = "Message not found"


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

def list_users(
    search: str | None = None,
    status: UserStatusFilter | None = None,
    page: int = 1,
    limit: int = 20,
) -> AdminUserListResponse:
    """All users (public or not), newest first."""
    start, end = page_bounds(page, limit)
    page_size = end - start + 1

    query = get_supabase().table("users").select("*", count="exact")
    if search and search.strip():
        pattern = ilike_pattern(search)
        query = query.or_(
            f"name.ilike.{pattern},email.ilike.{pattern},location.ilike.{pattern}"
        )
    if status == UserStatusFilter.banned:
        query = query.eq("is_banned", True)
    elif status == UserStatusFilter.active:
        query = query.eq("is_banned", False)

    result = query.order("created_at", desc=True).range(start, end).execute()
    rows = result.data or []
    total = result.count if result.count is not None else len(rows)

    return AdminUserListResponse(
        users=[User(**row) for row in rows],
        pagination=Pagination(
            page=max(page, 1),
            limit=page_size,
            total=total,
            pages=page_count(total, page_size),
        ),
    )


def set_ban(admin_id: str, user_id: str, is_banned: bool) -> User:
    """Ban or unban *user_id*. Admins cannot ban themselves."""
    if str(admin_id) == str(user_id):
        raise SelfBanForbidden()

    result = (
        get_supabase()
        .table("users")
        .update({
            "is_banned": is_banned,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        })
        .eq("id", str(user_id))
        .execute()
    )
    updated = first_row(result)
    if updated is None:
        raise UserNotFound()

    logger.info(
        "user_banned" if is_banned else "user_unbanned",
        extra={"admin_id": str(admin_id), "user_id": str(user_id)},
    )
    return User(**updated)


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------

def _count(table: str, **filters: object) -> int:
    query = get_supabase().table(table).select("id", count="exact")
    for column, value in filters.items():
        query = query.eq(column, value)
    result = query.limit(1).execute()
    if result.count is not None:
        return int(result.count)
    return len(result.data or [])


def get_platform_stats() -> PlatformStats:
    """Aggregate counts over users, skills, swaps and ratings."""
    by_status = SwapStatusCounts(**{
        status.value: _count("swap_requests", status=status.value) for status in SwapStatus
    })

    ratings = get_rating_summary()

    return PlatformStats(
        total_users=_count("users"),
        banned_users=_count("users", is_banned=True),
        total_skills=_count("skills"),
        total_swaps=_count("swap_requests"),
        swaps_by_status=by_status,
        total_ratings=ratings.count,
        average_rating=ratings.average,
    )


# ---------------------------------------------------------------------------
# Broadcast messages
# ---------------------------------------------------------------------------

def create_message(payload: AdminMessageCreate) -> AdminMessage:
    row = {
        "title": payload.title.strip(),
        "message": payload.message.strip(),
        "type": payload.type.value,
        "is_active": True,
    }
    result = get_supabase().table("admin_messages").insert(row).execute()
    created = first_row(result)
    if created is None:
        raise RuntimeError("Insert into admin_messages returned no data")
    logger.info("admin_message_created", extra={"message_id": str(created["id"])})
    return AdminMessage(**created)


def list_messages(
    active: bool | None = None,
    page: int = 1,
    limit: int = 20,
) -> AdminMessageListResponse:
    start, end = page_bounds(page, limit)
    page_size = end - start + 1

    query = get_supabase().table("admin_messages").select("*", count="exact")
    if active is not None:
        query = query.eq("is_active", active)
    result = query.order("created_at", desc=True).range(start, end).execute()
    rows = result.data or []
    total = result.count if result.count is not None else len(rows)

    return AdminMessageListResponse(
        messages=[AdminMessage(**row) for row in rows],
        pagination=Pagination(
            page=max(page, 1),
            limit=page_size,
            total=total,
            pages=page_count(total, page_size),
        ),
    )


def list_active_messages() -> list[AdminMessage]:
    """Messages every client should display, newest first."""
    result = (
        get_supabase()
        .table("admin_messages")
        .select("*")
        .eq("is_active", True)
        .order("created_at", desc=True)
        .execute()
    )
    return [AdminMessage(**row) for row in result.data or []]


def update_message(message_id: str, payload: AdminMessageUpdate) -> AdminMessage:
    changes = payload.model_dump(exclude_none=True, mode="json")
    if not changes:
        raise ValidationError("No fields to update")
    if fetch_by_id("admin_messages", message_id) is None:
        raise NotFound(MESSAGE_NOT_FOUND)

    changes["updated_at"] = datetime.now(timezone.utc).isoformat()
    result = (
        get_supabase()
        .table("admin_messages")
        .update(changes)
        .eq("id", str(message_id))
        .execute()
    )
    updated = first_row(result)
    if updated is None:
        raise NotFound(MESSAGE_NOT_FOUND)
    logger.info("admin_message_updated", extra={"message_id": str(message_id)})
    return AdminMessage(**updated)


def delete_message(message_id: str) -> None:
    result = (
        get_supabase()
        .table("admin_messages")
        .delete()
        .eq("id", str(message_id))
        .execute()
    )
    if not result.data:
        raise NotFound(MESSAGE_NOT_FOUND)
    logger.info("admin_message_deleted", extra={"message_id": str(message_id)})
