"""Swap request and rating endpoints.

Every route requires an active (not banned) caller.
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from skillswap.core.config import settings
from skillswap.models.enums import SwapDirection, SwapStatus
from skillswap.models.rating import RatingCreate, RatingCreated
from skillswap.models.swap import (
    SwapCreated,
    SwapRequestCreate,
    SwapRequestListResponse,
    SwapRequestView,
    SwapTransitionResponse,
)
from skillswap.routers.deps import get_active_user
from skillswap.services import ratings, swaps

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=SwapCreated, status_code=201)
async def create_swap_request(
    payload: SwapRequestCreate,
    current: dict[str, Any] = Depends(get_active_user),
) -> SwapCreated:
    swap = swaps.create_swap_request(str(current["id"]), payload)
    return SwapCreated(message="Swap request created successfully", swap_id=swap.id)


@router.get("/my-requests", response_model=SwapRequestListResponse)
async def my_requests(
    status: SwapStatus | None = Query(default=None),
    direction: SwapDirection = Query(default=SwapDirection.all),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    current: dict[str, Any] = Depends(get_active_user),
) -> SwapRequestListResponse:
    """Requests the caller sent and/or received, newest first."""
    return swaps.list_user_requests(
        str(current["id"]), status=status, direction=direction, page=page, limit=limit,
    )


@router.get("/{swap_id}", response_model=SwapRequestView)
async def get_swap_request(
    swap_id: UUID,
    current: dict[str, Any] = Depends(get_active_user),
) -> SwapRequestView:
    return swaps.get_swap_request(str(swap_id), str(current["id"]))


@router.put("/{swap_id}/accept", response_model=SwapTransitionResponse)
async def accept_swap_request(
    swap_id: UUID,
    current: dict[str, Any] = Depends(get_active_user),
) -> SwapTransitionResponse:
    swap = swaps.accept_swap_request(str(swap_id), str(current["id"]))
    return SwapTransitionResponse(message="Swap request accepted successfully", swap=swap)


@router.put("/{swap_id}/reject", response_model=SwapTransitionResponse)
async def reject_swap_request(
    swap_id: UUID,
    current: dict[str, Any] = Depends(get_active_user),
) -> SwapTransitionResponse:
    swap = swaps.reject_swap_request(str(swap_id), str(current["id"]))
    return SwapTransitionResponse(message="Swap request rejected successfully", swap=swap)


@router.delete("/{swap_id}", response_model=SwapTransitionResponse)
async def cancel_swap_request(
    swap_id: UUID,
    current: dict[str, Any] = Depends(get_active_user),
) -> SwapTransitionResponse:
    swap = swaps.cancel_swap_request(str(swap_id), str(current["id"]))
    return SwapTransitionResponse(message="Swap request cancelled successfully", swap=swap)


@router.post("/{swap_id}/rate", response_model=RatingCreated, status_code=201)
async def rate_swap(
    swap_id: UUID,
    payload: RatingCreate,
    current: dict[str, Any] = Depends(get_active_user),
) -> RatingCreated:
    rating = ratings.submit_rating(str(swap_id), str(current["id"]), payload)
    return RatingCreated(message="Rating submitted successfully", rating=rating)
