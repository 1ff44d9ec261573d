"""Startup seeding of the admin account and the default skill catalog.

Runs from the application lifespan when ``settings.SEED_DEFAULT_DATA`` is
on.  Both steps are idempotent: existing rows are left untouched.
"""

from __future__ import annotations

import logging

from skillswap.core.config import settings
from skillswap.core.constants import DEFAULT_SKILLS
from skillswap.core.security import hash_password
from skillswap.db.supabase import get_supabase

logger = logging.getLogger(__name__)


def ensure_admin_user() -> bool:
    """Create the configured admin account if missing. Returns True if created."""
    if not settings.ADMIN_PASSWORD:
        logger.warning("ADMIN_PASSWORD is empty; skipping admin seed")
        return False

    client = get_supabase()
    email = settings.ADMIN_EMAIL.strip().lower()
    existing = client.table("users").select("id").eq("email", email).limit(1).execute()
    if existing.data:
        return False

    client.table("users").insert({
        "email": email,
        "password_hash": hash_password(settings.ADMIN_PASSWORD),
        "name": settings.ADMIN_NAME,
        "is_public": False,
        "is_admin": True,
        "is_banned": False,
    }).execute()
    logger.info("admin_user_seeded", extra={"email": email})
    return True


def ensure_default_skills() -> int:
    """Insert the default catalog when the ``skills`` table is empty."""
    client = get_supabase()
    result = client.table("skills").select("id", count="exact").limit(1).execute()
    if result.count or result.data:
        return 0

    client.table("skills").insert([dict(skill) for skill in DEFAULT_SKILLS]).execute()
    logger.info("default_skills_seeded", extra={"count": len(DEFAULT_SKILLS)})
    return len(DEFAULT_SKILLS)


def seed_default_data() -> None:
    """Seed admin and catalog; failures are logged, not fatal to startup."""
    try:
        ensure_admin_user()
        ensure_default_skills()
    except Exception:
        logger.error("Default data seeding failed", exc_info=True)
