"""Skill catalog endpoints (public, read-only)."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query

from skillswap.models.skill import CategoryListResponse, Skill, SkillListResponse
from skillswap.services import skills as skills_service

router = APIRouter()


@router.get("", response_model=SkillListResponse)
async def list_skills(
    category: str | None = Query(default=None, description="Exact category"),
    search: str | None = Query(default=None, description="Substring of the skill name"),
) -> SkillListResponse:
    return SkillListResponse(skills=skills_service.list_skills(category=category, search=search))


@router.get("/categories", response_model=CategoryListResponse)
async def list_categories() -> CategoryListResponse:
    return CategoryListResponse(categories=skills_service.list_categories())


@router.get("/{skill_id}", response_model=Skill)
async def get_skill(skill_id: UUID) -> Skill:
    return skills_service.get_skill(str(skill_id))
