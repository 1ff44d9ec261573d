"""Rating ledger: one rating per (swap, rater) on accepted swaps."""

from __future__ import annotations

import logging

from postgrest.exceptions import APIError

from skillswap.core.constants import MAX_RATING, MIN_RATING
from skillswap.core.errors import (
    DuplicateRating,
    Forbidden,
    InvalidState,
    ValidationError,
    is_unique_violation,
)
from skillswap.db.supabase import first_row, get_supabase
from skillswap.models.enums import SwapStatus
from skillswap.models.rating import Rating, RatingCreate
from skillswap.models.user import RatingSummary
from skillswap.services.swaps import get_swap_row

logger = logging.getLogger(__name__)


def submit_rating(swap_id: str, rater_id: str, payload: RatingCreate) -> Rating:
    """Record *rater_id*'s rating of the other participant of *swap_id*.

    Raises ``ValidationError`` for a score outside 1..5, ``NotFound`` for
    an unknown swap, ``Forbidden`` for non-participants, ``InvalidState``
    unless the swap is accepted and ``DuplicateRating`` on a second rating
    by the same rater.
    """
    score = payload.rating
    if isinstance(score, bool) or not isinstance(score, int) or not MIN_RATING <= score <= MAX_RATING:
        raise ValidationError(f"Rating must be an integer between {MIN_RATING} and {MAX_RATING}")

    rater_id = str(rater_id)
    swap = get_swap_row(swap_id)

    requester_id = str(swap["requester_id"])
    recipient_id = str(swap["recipient_id"])
    if rater_id == requester_id:
        rated_user_id = recipient_id
    elif rater_id == recipient_id:
        rated_user_id = requester_id
    else:
        raise Forbidden("You can only rate users involved in this swap")

    if swap["status"] != SwapStatus.accepted.value:
        raise InvalidState()

    client = get_supabase()
    existing = (
        client.table("ratings")
        .select("id")
        .eq("swap_id", str(swap_id))
        .eq("rater_id", rater_id)
        .limit(1)
        .execute()
    )
    if existing.data:
        raise DuplicateRating()

    feedback = payload.feedback.strip() if payload.feedback else None
    row = {
        "swap_id": str(swap_id),
        "rater_id": rater_id,
        "rated_user_id": rated_user_id,
        "rating": score,
        "feedback": feedback or None,
    }
    try:
        result = client.table("ratings").insert(row).execute()
    except APIError as exc:
        if is_unique_violation(exc):
            raise DuplicateRating() from exc
        raise

    created = first_row(result)
    if created is None:
        raise RuntimeError("Insert into ratings returned no data")

    logger.info(
        "rating_submitted",
        extra={"swap_id": str(swap_id), "rater_id": rater_id, "rated_user_id": rated_user_id},
    )
    return Rating(**created)


def get_rating_summary(user_id: str | None = None) -> RatingSummary:
    """Count and average of the ratings *user_id* has received.

    Without a user the summary covers every rating on the platform.  The
    aggregate runs in the database (``get_rating_stats``), so it is not
    subject to the PostgREST row cap.
    """
    rpc_result = get_supabase().rpc(
        "get_rating_stats",
        {"p_user_id": str(user_id) if user_id is not None else None},
    ).execute()

    rows = rpc_result.data or []
    if not rows:
        return RatingSummary()
    row = rows[0]
    return RatingSummary(
        count=int(row.get("rating_count") or 0),
        average=round(float(row.get("rating_average") or 0.0), 2),
    )
