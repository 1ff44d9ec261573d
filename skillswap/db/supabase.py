"""Supabase client singleton and small PostgREST query helpers.

Provides ``get_supabase()`` which returns a lazily-initialized, process-wide
Supabase client using credentials from ``settings``, plus helpers shared by
the services for pagination and single-row lookups.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Any

from supabase import Client, create_client

from skillswap.core.config import settings
from skillswap.core.constants import POSTGREST_MAX_ROWS

_client: Client | None = None


def get_supabase() -> Client:
    """Return the singleton Supabase client, creating it on first call."""
    global _client
    if _client is None:
        _client = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    return _client


def ping() -> bool:
    """Run a trivial query; raises if the database is unreachable."""
    result = get_supabase().table("skills").select("id").limit(1).execute()
    return result is not None


def first_row(result: Any) -> dict[str, Any] | None:
    """Return the first row of an ``execute()`` result, or None."""
    rows = result.data or []
    return rows[0] if rows else None


def fetch_by_id(table: str, row_id: str, columns: str = "*") -> dict[str, Any] | None:
    """Fetch a single row by primary key."""
    result = (
        get_supabase()
        .table(table)
        .select(columns)
        .eq("id", str(row_id))
        .limit(1)
        .execute()
    )
    return first_row(result)


def page_bounds(page: int, limit: int) -> tuple[int, int]:
    """Translate 1-based *page* / *limit* into an inclusive PostgREST range."""
    limit = max(1, min(limit, settings.MAX_PAGE_SIZE))
    start = (max(page, 1) - 1) * limit
    return start, start + limit - 1


def page_count(total: int, limit: int) -> int:
    """Number of pages needed for *total* rows."""
    return math.ceil(total / limit) if limit > 0 else 0


def fetch_all(
    build_query: Callable[[], Any],
    chunk_size: int = POSTGREST_MAX_ROWS,
) -> list[dict[str, Any]]:
    """Collect every row of a query, paging with ``.range()``.

    PostgREST truncates a response at ``db-max-rows`` without reporting
    it, so reads that must see all rows go through here.  *build_query*
    returns a fresh query with a deterministic order on each call.
    """
    rows: list[dict[str, Any]] = []
    start = 0
    while True:
        chunk = build_query().range(start, start + chunk_size - 1).execute().data or []
        rows.extend(chunk)
        if len(chunk) < chunk_size:
            return rows
        start += chunk_size


def ilike_escape(term: str) -> str:
    """Escape ``LIKE`` wildcards so *term* matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def ilike_pattern(term: str) -> str:
    """Build a literal substring ``ilike`` pattern.

    Characters PostgREST reserves in filter expressions are dropped and
    ``LIKE`` wildcards in the term are escaped.
    """
    cleaned = "".join(ch for ch in term if ch not in ",()*")
    return f"%{ilike_escape(cleaned.strip())}%"
