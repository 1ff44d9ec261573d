"""Pydantic models for the ``user_skills`` relation.

Offered and wanted skills are the same record distinguished by ``role``;
``level`` holds a ``ProficiencyLevel`` for offered skills and a
``PriorityLevel`` for wanted ones.  The request models pin the level enum
per role so an invalid combination never reaches the database.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from skillswap.models.enums import PriorityLevel, ProficiencyLevel, SkillRole


class OfferedSkillCreate(BaseModel):
    """Payload for ``POST /users/me/skills/offered``."""
    skill_id: UUID
    description: str = Field(default="", max_length=1000)
    proficiency_level: ProficiencyLevel = ProficiencyLevel.intermediate


class WantedSkillCreate(BaseModel):
    """Payload for ``POST /users/me/skills/wanted``."""
    skill_id: UUID
    description: str = Field(default="", max_length=1000)
    priority_level: PriorityLevel = PriorityLevel.medium


class UserSkill(BaseModel):
    """Raw ``user_skills`` row."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    skill_id: UUID
    role: SkillRole
    level: str
    description: str | None = ""
    created_at: datetime | None = None


class OfferedSkillView(BaseModel):
    """An offered association joined with its catalog entry."""
    id: UUID
    skill_id: UUID
    name: str
    category: str | None = ""
    description: str | None = ""
    proficiency_level: ProficiencyLevel


class WantedSkillView(BaseModel):
    """A wanted association joined with its catalog entry."""
    id: UUID
    skill_id: UUID
    name: str
    category: str | None = ""
    description: str | None = ""
    priority_level: PriorityLevel


class UserSkillsResponse(BaseModel):
    """Full response for ``GET /users/me/skills``."""
    offered_skills: list[OfferedSkillView] = []
    wanted_skills: list[WantedSkillView] = []


class AssociationCreated(BaseModel):
    message: str
    id: UUID
