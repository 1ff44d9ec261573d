"""Discovery over public profiles.

Only ``is_public`` users are ever returned.  Free-text search matches name
or location, the location filter matches location, and the skill filter
matches the name of any offered or wanted skill; all case-insensitive
substring matches.  Results are ordered by join date.
"""

from __future__ import annotations

import logging

from skillswap.core.errors import UserNotFound
from skillswap.db.supabase import get_supabase, ilike_pattern, page_bounds, page_count
from skillswap.models.common import Pagination
from skillswap.models.user import BrowseResponse, PublicProfile, PublicUser
from skillswap.services.associations import find_users_with_skill_name, get_skill_views
from skillswap.services.ratings import get_rating_summary
from skillswap.services.users import get_user_row

logger = logging.getLogger(__name__)


def browse_users(
    search: str | None = None,
    location: str | None = None,
    skill: str | None = None,
    page: int = 1,
    limit: int = 10,
) -> BrowseResponse:
    """Return one page of public profiles matching every given filter."""
    start, end = page_bounds(page, limit)
    page_size = end - start + 1

    query = (
        get_supabase()
        .table("users")
        .select("id, name, location, availability, profile_photo, is_public, created_at", count="exact")
        .eq("is_public", True)
    )

    if search and search.strip():
        pattern = ilike_pattern(search)
        query = query.or_(f"name.ilike.{pattern},location.ilike.{pattern}")
    if location and location.strip():
        query = query.ilike("location", ilike_pattern(location))
    if skill and skill.strip():
        user_ids = find_users_with_skill_name(ilike_pattern(skill))
        if not user_ids:
            return BrowseResponse(pagination=Pagination(page=max(page, 1), limit=page_size))
        query = query.in_("id", sorted(user_ids))

    result = query.order("created_at").range(start, end).execute()
    rows = result.data or []
    total = result.count if result.count is not None else len(rows)

    skills = get_skill_views([str(row["id"]) for row in rows])
    users = []
    for row in rows:
        offered, wanted = skills[str(row["id"])]
        users.append(PublicUser(**row, offered_skills=offered, wanted_skills=wanted))

    logger.debug(
        "browse_users",
        extra={"returned": len(users), "total": total, "page": page},
    )
    return BrowseResponse(
        users=users,
        pagination=Pagination(
            page=max(page, 1),
            limit=page_size,
            total=total,
            pages=page_count(total, page_size),
        ),
    )


def get_public_profile(user_id: str) -> PublicProfile:
    """Public profile of one user; hidden profiles look like missing ones."""
    row = get_user_row(user_id)
    if row is None or not row.get("is_public"):
        raise UserNotFound()

    offered, wanted = get_skill_views([str(row["id"])])[str(row["id"])]
    return PublicProfile(
        **row,
        offered_skills=offered,
        wanted_skills=wanted,
        rating=get_rating_summary(str(row["id"])),
    )
