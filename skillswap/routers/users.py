"""User discovery and own-skill management endpoints.

The ``/me`` routes are declared before ``/{user_id}`` so they are matched
first.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from skillswap.core.config import settings
from skillswap.models.association import (
    AssociationCreated,
    OfferedSkillCreate,
    UserSkillsResponse,
    WantedSkillCreate,
)
from skillswap.models.common import MessageResponse
from skillswap.models.enums import SkillRole
from skillswap.models.user import BrowseResponse, PublicProfile
from skillswap.routers.deps import get_active_user, get_current_user
from skillswap.services import associations, browse

router = APIRouter()


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------

@router.get("/browse", response_model=BrowseResponse)
async def browse_users(
    search: str | None = Query(default=None, description="Matches name or location"),
    location: str | None = Query(default=None, description="Matches location"),
    skill: str | None = Query(default=None, description="Matches an offered or wanted skill name"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> BrowseResponse:
    """Public profiles only, with their offered and wanted skills."""
    return browse.browse_users(
        search=search, location=location, skill=skill, page=page, limit=limit,
    )


# ---------------------------------------------------------------------------
# Own skills
# ---------------------------------------------------------------------------

@router.get("/me/skills", response_model=UserSkillsResponse)
async def my_skills(current: dict[str, Any] = Depends(get_current_user)) -> UserSkillsResponse:
    offered, wanted = associations.list_user_skills(str(current["id"]))
    return UserSkillsResponse(offered_skills=offered, wanted_skills=wanted)


@router.post("/me/skills/offered", response_model=AssociationCreated, status_code=201)
async def add_offered_skill(
    payload: OfferedSkillCreate,
    current: dict[str, Any] = Depends(get_active_user),
) -> AssociationCreated:
    created = associations.add_association(
        str(current["id"]),
        SkillRole.offered,
        str(payload.skill_id),
        payload.proficiency_level,
        payload.description,
    )
    return AssociationCreated(message="Offered skill added successfully", id=created.id)


@router.post("/me/skills/wanted", response_model=AssociationCreated, status_code=201)
async def add_wanted_skill(
    payload: WantedSkillCreate,
    current: dict[str, Any] = Depends(get_active_user),
) -> AssociationCreated:
    created = associations.add_association(
        str(current["id"]),
        SkillRole.wanted,
        str(payload.skill_id),
        payload.priority_level,
        payload.description,
    )
    return AssociationCreated(message="Wanted skill added successfully", id=created.id)


@router.delete("/me/skills/offered/{association_id}", response_model=MessageResponse)
async def remove_offered_skill(
    association_id: UUID,
    current: dict[str, Any] = Depends(get_active_user),
) -> MessageResponse:
    associations.remove_association(str(current["id"]), SkillRole.offered, str(association_id))
    return MessageResponse(message="Offered skill removed successfully")


@router.delete("/me/skills/wanted/{association_id}", response_model=MessageResponse)
async def remove_wanted_skill(
    association_id: UUID,
    current: dict[str, Any] = Depends(get_active_user),
) -> MessageResponse:
    associations.remove_association(str(current["id"]), SkillRole.wanted, str(association_id))
    return MessageResponse(message="Wanted skill removed successfully")


# ---------------------------------------------------------------------------
# Public profile
# ---------------------------------------------------------------------------

@router.get("/{user_id}", response_model=PublicProfile)
async def public_profile(user_id: UUID) -> PublicProfile:
    return browse.get_public_profile(str(user_id))
