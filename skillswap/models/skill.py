"""Pydantic models for the ``skills`` catalog."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SkillCreate(BaseModel):
    """Payload for adding a catalog entry (admin only)."""
    name: str = Field(..., min_length=1, max_length=100)
    category: str = Field(default="", max_length=100)
    description: str | None = Field(default=None, max_length=1000)


class Skill(BaseModel):
    """Full skill record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    category: str | None = ""
    description: str | None = None
    created_at: datetime | None = None


class SkillListResponse(BaseModel):
    skills: list[Skill] = []


class CategoryListResponse(BaseModel):
    categories: list[str] = []
