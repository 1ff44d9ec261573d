"""Pydantic models for the ``swap_requests`` table."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from skillswap.core.constants import MAX_SWAP_MESSAGE_LENGTH
from skillswap.models.common import Pagination
from skillswap.models.enums import SwapStatus


class SwapRequestCreate(BaseModel):
    """Payload for ``POST /swaps``. The requester is the caller."""
    recipient_id: UUID
    offered_skill_id: UUID
    requested_skill_id: UUID
    message: str | None = Field(default=None, max_length=MAX_SWAP_MESSAGE_LENGTH)


class SwapRequest(BaseModel):
    """Full swap request record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    requester_id: UUID
    recipient_id: UUID
    offered_skill_id: UUID
    requested_skill_id: UUID
    message: str | None = None
    status: SwapStatus = SwapStatus.pending
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SwapRequestView(SwapRequest):
    """Swap request joined with participant and skill display names."""
    requester_name: str = ""
    recipient_name: str = ""
    offered_skill_name: str = ""
    requested_skill_name: str = ""


class SwapRequestListResponse(BaseModel):
    """Paged listing of swap requests."""
    requests: list[SwapRequestView] = []
    pagination: Pagination = Pagination()


class SwapCreated(BaseModel):
    message: str
    swap_id: UUID


class SwapTransitionResponse(BaseModel):
    message: str
    swap: SwapRequest
