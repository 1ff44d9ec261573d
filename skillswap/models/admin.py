"""Request and response models for admin endpoints.

``admin_messages`` rows are mapped directly; statistics are API-layer
aggregates, not table mappings.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from skillswap.core.constants import MAX_MESSAGE_BODY_LENGTH, MAX_MESSAGE_TITLE_LENGTH
from skillswap.models.common import Pagination
from skillswap.models.enums import MessageSeverity
from skillswap.models.swap import SwapRequestView
from skillswap.models.user import User


# --- Users ---

class BanUpdate(BaseModel):
    is_banned: bool


class AdminUserListResponse(BaseModel):
    users: list[User] = []
    pagination: Pagination = Pagination()


# --- Swaps ---

class AdminSwapListResponse(BaseModel):
    swaps: list[SwapRequestView] = []
    pagination: Pagination = Pagination()


# --- Statistics ---

class SwapStatusCounts(BaseModel):
    """Swap request counts per status."""
    pending: int = 0
    accepted: int = 0
    rejected: int = 0
    cancelled: int = 0


class PlatformStats(BaseModel):
    """Full response for ``GET /admin/stats``."""
    total_users: int = 0
    banned_users: int = 0
    total_skills: int = 0
    total_swaps: int = 0
    swaps_by_status: SwapStatusCounts = SwapStatusCounts()
    total_ratings: int = 0
    average_rating: float = 0.0


# --- Messages ---

class AdminMessageCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=MAX_MESSAGE_TITLE_LENGTH)
    message: str = Field(..., min_length=1, max_length=MAX_MESSAGE_BODY_LENGTH)
    type: MessageSeverity = MessageSeverity.info


class AdminMessageUpdate(BaseModel):
    """Partial update; at least one field must be present."""
    title: str | None = Field(default=None, min_length=1, max_length=MAX_MESSAGE_TITLE_LENGTH)
    message: str | None = Field(default=None, min_length=1, max_length=MAX_MESSAGE_BODY_LENGTH)
    type: MessageSeverity | None = None
    is_active: bool | None = None


class AdminMessage(BaseModel):
    """Full ``admin_messages`` record."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    message: str
    type: MessageSeverity = MessageSeverity.info
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AdminMessageListResponse(BaseModel):
    messages: list[AdminMessage] = []
    pagination: Pagination = Pagination()


class ActiveMessagesResponse(BaseModel):
    messages: list[AdminMessage] = []
