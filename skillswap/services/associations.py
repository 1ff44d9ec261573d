"""User-skill associations (offered and wanted skills).

Both relations live in ``user_skills`` and are handled by the same code,
parameterized by ``SkillRole``.  The (user, skill, role) triple is unique.
"""

from __future__ import annotations

import logging
from typing import Any

from postgrest.exceptions import APIError

from skillswap.core.errors import DuplicateAssociation, NotFound, SkillNotFound, is_unique_violation
from skillswap.db.supabase import fetch_all, first_row, get_supabase
from skillswap.models.association import OfferedSkillView, UserSkill, WantedSkillView
from skillswap.models.enums import PriorityLevel, ProficiencyLevel, SkillRole
from skillswap.services.skills import get_skill_row, get_skills_by_ids

logger = logging.getLogger(__name__)


def _find_association(user_id: str, skill_id: str, role: SkillRole) -> dict[str, Any] | None:
    result = (
        get_supabase()
        .table("user_skills")
        .select("*")
        .eq("user_id", str(user_id))
        .eq("skill_id", str(skill_id))
        .eq("role", role.value)
        .limit(1)
        .execute()
    )
    return first_row(result)


def has_offered_skill(user_id: str, skill_id: str) -> bool:
    """True when *user_id* lists *skill_id* as an offered skill."""
    return _find_association(user_id, skill_id, SkillRole.offered) is not None


def add_association(
    user_id: str,
    role: SkillRole,
    skill_id: str,
    level: ProficiencyLevel | PriorityLevel,
    description: str = "",
) -> UserSkill:
    """Link a catalog skill to a user in the given role.

    Raises ``SkillNotFound`` for an unknown skill and
    ``DuplicateAssociation`` when the pair is already listed in that role.
    """
    if get_skill_row(skill_id) is None:
        raise SkillNotFound()
    if _find_association(user_id, skill_id, role) is not None:
        raise DuplicateAssociation(f"You already have this skill listed as {role.value}")

    row = {
        "user_id": str(user_id),
        "skill_id": str(skill_id),
        "role": role.value,
        "level": level.value,
        "description": description.strip(),
    }
    try:
        result = get_supabase().table("user_skills").insert(row).execute()
    except APIError as exc:
        if is_unique_violation(exc):
            raise DuplicateAssociation(f"You already have this skill listed as {role.value}") from exc
        raise

    created = first_row(result)
    if created is None:
        raise RuntimeError("Insert into user_skills returned no data")

    logger.info(
        "association_added",
        extra={"user_id": str(user_id), "skill_id": str(skill_id), "role": role.value},
    )
    return UserSkill(**created)


def remove_association(user_id: str, role: SkillRole, association_id: str) -> None:
    """Delete one of the caller's associations.

    Raises ``NotFound`` unless an association with that id, role and owner
    exists.
    """
    result = (
        get_supabase()
        .table("user_skills")
        .delete()
        .eq("id", str(association_id))
        .eq("user_id", str(user_id))
        .eq("role", role.value)
        .execute()
    )
    if not result.data:
        raise NotFound(f"{role.value.capitalize()} skill not found")

    logger.info(
        "association_removed",
        extra={"user_id": str(user_id), "association_id": str(association_id), "role": role.value},
    )


def get_skill_views(
    user_ids: list[str],
) -> dict[str, tuple[list[OfferedSkillView], list[WantedSkillView]]]:
    """Return offered and wanted skills, joined with the catalog, per user."""
    views: dict[str, tuple[list[OfferedSkillView], list[WantedSkillView]]] = {
        str(uid): ([], []) for uid in user_ids
    }
    if not user_ids:
        return views

    result = (
        get_supabase()
        .table("user_skills")
        .select("*")
        .in_("user_id", [str(uid) for uid in user_ids])
        .order("created_at")
        .execute()
    )
    rows = result.data or []
    skills = get_skills_by_ids({str(row["skill_id"]) for row in rows})

    for row in rows:
        skill = skills.get(str(row["skill_id"]))
        if skill is None:
            continue
        offered, wanted = views[str(row["user_id"])]
        common = {
            "id": row["id"],
            "skill_id": row["skill_id"],
            "name": skill["name"],
            "category": skill.get("category", ""),
            "description": row.get("description", ""),
        }
        if row["role"] == SkillRole.offered.value:
            offered.append(OfferedSkillView(**common, proficiency_level=row["level"]))
        else:
            wanted.append(WantedSkillView(**common, priority_level=row["level"]))
    return views


def list_user_skills(user_id: str) -> tuple[list[OfferedSkillView], list[WantedSkillView]]:
    """Return ``(offered, wanted)`` for a single user."""
    return get_skill_views([str(user_id)])[str(user_id)]


def find_users_with_skill_name(skill_pattern: str) -> set[str]:
    """Ids of users offering or wanting any skill whose name matches the
    ``ilike`` *skill_pattern*."""
    client = get_supabase()
    skills = fetch_all(
        lambda: client.table("skills").select("id").ilike("name", skill_pattern).order("id")
    )
    skill_ids = [str(row["id"]) for row in skills]
    if not skill_ids:
        return set()

    links = fetch_all(
        lambda: client.table("user_skills").select("user_id").in_("skill_id", skill_ids).order("id")
    )
    return {str(row["user_id"]) for row in links}
