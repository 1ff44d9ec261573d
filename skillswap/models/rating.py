"""Pydantic models for the ``ratings`` table."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from skillswap.core.constants import MAX_FEEDBACK_LENGTH, MAX_RATING, MIN_RATING


class RatingCreate(BaseModel):
    """Payload for ``POST /swaps/{swap_id}/rate``."""
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    feedback: str | None = Field(default=None, max_length=MAX_FEEDBACK_LENGTH)


class Rating(BaseModel):
    """Full rating record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    swap_id: UUID
    rater_id: UUID
    rated_user_id: UUID
    rating: int
    feedback: str | None = None
    created_at: datetime | None = None


class RatingCreated(BaseModel):
    message: str
    rating: Rating
