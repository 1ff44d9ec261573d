"""Skill catalog service."""

from __future__ import annotations

import logging
from typing import Any

from postgrest.exceptions import APIError

from skillswap.core.errors import DuplicateSkill, SkillNotFound, is_unique_violation
from skillswap.db.supabase import (
    fetch_all,
    fetch_by_id,
    first_row,
    get_supabase,
    ilike_escape,
    ilike_pattern,
)
from skillswap.models.skill import Skill, SkillCreate

logger = logging.getLogger(__name__)


def list_skills(category: str | None = None, search: str | None = None) -> list[Skill]:
    """Return catalog entries ordered by name, optionally filtered."""
    def build() -> Any:
        query = get_supabase().table("skills").select("*")
        if category:
            query = query.eq("category", category)
        if search:
            query = query.ilike("name", ilike_pattern(search))
        return query.order("name").order("id")

    return [Skill(**row) for row in fetch_all(build)]


def list_categories() -> list[str]:
    """Return the distinct, sorted, non-empty categories."""
    rows = fetch_all(lambda: get_supabase().table("skills").select("category").order("id"))
    return sorted({row["category"] for row in rows if row.get("category")})


def get_skill_row(skill_id: str) -> dict[str, Any] | None:
    return fetch_by_id("skills", skill_id)


def get_skill(skill_id: str) -> Skill:
    row = get_skill_row(skill_id)
    if row is None:
        raise SkillNotFound()
    return Skill(**row)


def get_skills_by_ids(skill_ids: set[str]) -> dict[str, dict[str, Any]]:
    """Fetch several catalog rows at once, keyed by id."""
    if not skill_ids:
        return {}
    result = (
        get_supabase()
        .table("skills")
        .select("*")
        .in_("id", sorted(skill_ids))
        .execute()
    )
    return {str(row["id"]): row for row in result.data or []}


def create_skill(payload: SkillCreate) -> Skill:
    """Add a catalog entry. Names are unique, ignoring case."""
    name = payload.name.strip()
    existing = (
        get_supabase()
        .table("skills")
        .select("id")
        .ilike("name", ilike_escape(name))
        .limit(1)
        .execute()
    )
    if existing.data:
        raise DuplicateSkill()

    row = {
        "name": name,
        "category": payload.category.strip(),
        "description": payload.description,
    }
    try:
        result = get_supabase().table("skills").insert(row).execute()
    except APIError as exc:
        if is_unique_violation(exc):
            raise DuplicateSkill() from exc
        raise

    created = first_row(result)
    if created is None:
        raise RuntimeError("Insert into skills returned no data")
    logger.info("skill_created", extra={"skill_id": str(created["id"]), "skill_name": name})
    return Skill(**created)
