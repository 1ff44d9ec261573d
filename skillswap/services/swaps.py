"""Swap-request lifecycle.

A request starts ``pending`` and moves exactly once to ``accepted``,
``rejected`` (both by the recipient) or ``cancelled`` (by the requester).
Terminal requests are never written again.

Transitions are a single conditional update matching ``status = pending``,
so when two callers race on the same request only one update returns a
row; the other gets ``InvalidTransition``.  Cancelling keeps the record
(soft cancel) so the history stays auditable.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from postgrest.exceptions import APIError

from skillswap.core.errors import (
    DuplicatePendingRequest,
    Forbidden,
    InvalidTransition,
    NotFound,
    OfferedSkillNotOwned,
    RecipientBanned,
    RecipientNotFound,
    RequestedSkillNotOffered,
    SelfSwap,
    is_unique_violation,
)
from skillswap.db.supabase import fetch_by_id, first_row, get_supabase, page_bounds, page_count
from skillswap.models.common import Pagination
from skillswap.models.enums import SwapDirection, SwapStatus
from skillswap.models.swap import (
    SwapRequest,
    SwapRequestCreate,
    SwapRequestListResponse,
    SwapRequestView,
)
from skillswap.services.associations import has_offered_skill
from skillswap.services.skills import get_skills_by_ids
from skillswap.services.users import get_user_row, get_users_by_ids

logger = logging.getLogger(__name__)

SWAP_NOT_FOUND = "Swap request not found"


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------

def _pending_exists(requester_id: str, recipient_id: str) -> bool:
    result = (
        get_supabase()
        .table("swap_requests")
        .select("id")
        .eq("requester_id", requester_id)
        .eq("recipient_id", recipient_id)
        .eq("status", SwapStatus.pending.value)
        .limit(1)
        .execute()
    )
    return bool(result.data)


def create_swap_request(requester_id: str, payload: SwapRequestCreate) -> SwapRequest:
    """Create a pending request from *requester_id*.

    Checks run in a fixed order and the first failing one is reported:
    self swap, unknown recipient, banned recipient, requester does not
    offer the proposed skill, recipient does not offer the requested
    skill, pending request already open to this recipient.
    """
    requester_id = str(requester_id)
    recipient_id = str(payload.recipient_id)
    offered_skill_id = str(payload.offered_skill_id)
    requested_skill_id = str(payload.requested_skill_id)

    if requester_id == recipient_id:
        raise SelfSwap()

    recipient = get_user_row(recipient_id)
    if recipient is None:
        raise RecipientNotFound()
    if recipient.get("is_banned"):
        raise RecipientBanned()

    if not has_offered_skill(requester_id, offered_skill_id):
        raise OfferedSkillNotOwned()
    if not has_offered_skill(recipient_id, requested_skill_id):
        raise RequestedSkillNotOffered()

    if _pending_exists(requester_id, recipient_id):
        raise DuplicatePendingRequest()

    message = payload.message.strip() if payload.message else None
    row = {
        "requester_id": requester_id,
        "recipient_id": recipient_id,
        "offered_skill_id": offered_skill_id,
        "requested_skill_id": requested_skill_id,
        "message": message or None,
        "status": SwapStatus.pending.value,
    }
    try:
        result = get_supabase().table("swap_requests").insert(row).execute()
    except APIError as exc:
        # Partial unique index on (requester_id, recipient_id) WHERE pending
        if is_unique_violation(exc):
            raise DuplicatePendingRequest() from exc
        raise

    created = first_row(result)
    if created is None:
        raise RuntimeError("Insert into swap_requests returned no data")

    logger.info(
        "swap_request_created",
        extra={
            "swap_id": str(created["id"]),
            "requester_id": requester_id,
            "recipient_id": recipient_id,
        },
    )
    return SwapRequest(**created)


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def get_swap_row(swap_id: str) -> dict[str, Any]:
    row = fetch_by_id("swap_requests", swap_id)
    if row is None:
        raise NotFound(SWAP_NOT_FOUND)
    return row


def _transition(
    swap_id: str,
    actor_id: str,
    actor_field: str,
    target: SwapStatus,
    forbidden_detail: str,
) -> SwapRequest:
    swap = get_swap_row(swap_id)
    if str(swap[actor_field]) != str(actor_id):
        raise Forbidden(forbidden_detail)
    if swap["status"] != SwapStatus.pending.value:
        raise InvalidTransition(
            f"Cannot move a {swap['status']} request to {target.value}"
        )

    result = (
        get_supabase()
        .table("swap_requests")
        .update({
            "status": target.value,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        })
        .eq("id", str(swap_id))
        .eq("status", SwapStatus.pending.value)
        .execute()
    )
    updated = first_row(result)
    if updated is None:
        # Another request changed the status between our read and write
        raise InvalidTransition("Swap request is no longer pending")

    logger.info(
        "swap_request_transitioned",
        extra={"swap_id": str(swap_id), "actor_id": str(actor_id), "status": target.value},
    )
    return SwapRequest(**updated)


def accept_swap_request(swap_id: str, user_id: str) -> SwapRequest:
    """Recipient accepts a pending request."""
    return _transition(
        swap_id, user_id, "recipient_id", SwapStatus.accepted,
        "You can only accept requests sent to you",
    )


def reject_swap_request(swap_id: str, user_id: str) -> SwapRequest:
    """Recipient rejects a pending request."""
    return _transition(
        swap_id, user_id, "recipient_id", SwapStatus.rejected,
        "You can only reject requests sent to you",
    )


def cancel_swap_request(swap_id: str, user_id: str) -> SwapRequest:
    """Requester withdraws a pending request (kept as ``cancelled``)."""
    return _transition(
        swap_id, user_id, "requester_id", SwapStatus.cancelled,
        "You can only cancel requests you sent",
    )


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def get_swap_request(swap_id: str, user_id: str) -> SwapRequestView:
    """Return one request, visible to its two participants only."""
    row = get_swap_row(swap_id)
    if str(user_id) not in (str(row["requester_id"]), str(row["recipient_id"])):
        raise Forbidden("You can only view your own swap requests")
    return join_swap_rows([row])[0]


def join_swap_rows(rows: list[dict[str, Any]]) -> list[SwapRequestView]:
    """Attach participant names and skill names to raw request rows."""
    user_ids: set[str] = set()
    skill_ids: set[str] = set()
    for row in rows:
        user_ids.update((str(row["requester_id"]), str(row["recipient_id"])))
        skill_ids.update((str(row["offered_skill_id"]), str(row["requested_skill_id"])))

    users = get_users_by_ids(user_ids)
    skills = get_skills_by_ids(skill_ids)

    def _name(lookup: dict[str, dict[str, Any]], key: Any) -> str:
        return (lookup.get(str(key)) or {}).get("name", "")

    return [
        SwapRequestView(
            **row,
            requester_name=_name(users, row["requester_id"]),
            recipient_name=_name(users, row["recipient_id"]),
            offered_skill_name=_name(skills, row["offered_skill_id"]),
            requested_skill_name=_name(skills, row["requested_skill_id"]),
        )
        for row in rows
    ]


def list_user_requests(
    user_id: str,
    status: SwapStatus | None = None,
    direction: SwapDirection = SwapDirection.all,
    page: int = 1,
    limit: int = 10,
) -> SwapRequestListResponse:
    """Requests sent and/or received by *user_id*, newest first."""
    user_id = str(user_id)
    query = get_supabase().table("swap_requests").select("*", count="exact")
    if direction == SwapDirection.sent:
        query = query.eq("requester_id", user_id)
    elif direction == SwapDirection.received:
        query = query.eq("recipient_id", user_id)
    else:
        query = query.or_(f"requester_id.eq.{user_id},recipient_id.eq.{user_id}")
    if status is not None:
        query = query.eq("status", status.value)

    return _paged_listing(query, page, limit)


def list_all_requests(
    status: SwapStatus | None = None,
    page: int = 1,
    limit: int = 20,
) -> SwapRequestListResponse:
    """Every request on the platform, newest first (admin view)."""
    query = get_supabase().table("swap_requests").select("*", count="exact")
    if status is not None:
        query = query.eq("status", status.value)
    return _paged_listing(query, page, limit)


def _paged_listing(query: Any, page: int, limit: int) -> SwapRequestListResponse:
    start, end = page_bounds(page, limit)
    page_size = end - start + 1
    result = query.order("created_at", desc=True).range(start, end).execute()
    rows = result.data or []
    total = result.count if result.count is not None else len(rows)

    return SwapRequestListResponse(
        requests=join_swap_rows(rows),
        pagination=Pagination(
            page=max(page, 1),
            limit=page_size,
            total=total,
            pages=page_count(total, page_size),
        ),
    )
