"""Shared test fixtures.

Installs an in-memory stand-in for the Supabase client as the process-wide
singleton, so services and routers run unmodified against it.  The fake
implements the subset of the PostgREST query builder the services use and
enforces the unique constraints declared in ``sql/schema.sql``.
"""

from __future__ import annotations

import os

os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-key")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret-for-the-skillswap-suite")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import copy
import re
from collections import defaultdict
from collections.abc import Callable, Generator
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError


# ---------------------------------------------------------------------------
# In-memory PostgREST fake
# ---------------------------------------------------------------------------

_BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)

_DEFAULTS: dict[str, dict[str, Any]] = {
    "users": {
        "location": "", "availability": "", "profile_photo": None,
        "is_public": True, "is_admin": False, "is_banned": False,
    },
    "skills": {"category": "", "description": None},
    "user_skills": {"description": ""},
    "swap_requests": {"message": None, "status": "pending"},
    "ratings": {"feedback": None},
    "admin_messages": {"type": "info", "is_active": True},
}

_HAS_UPDATED_AT = {"users", "swap_requests", "admin_messages"}

# (columns, row predicate) per table; mirrors the schema's unique constraints
_UNIQUE: dict[str, list[tuple[tuple[str, ...], Callable[[dict[str, Any]], bool]]]] = {
    "users": [(("email",), lambda r: True)],
    "skills": [(("lower(name)",), lambda r: True)],
    "user_skills": [(("user_id", "skill_id", "role"), lambda r: True)],
    "ratings": [(("swap_id", "rater_id"), lambda r: True)],
    "swap_requests": [
        (("requester_id", "recipient_id"), lambda r: r.get("status") == "pending"),
    ],
}


def _norm(value: Any) -> Any:
    if value is None or isinstance(value, bool):
        return value
    return str(value)


def _key_part(row: dict[str, Any], column: str) -> Any:
    if column.startswith("lower(") and column.endswith(")"):
        return str(row.get(column[6:-1]) or "").lower()
    return _norm(row.get(column))


def _ilike_regex(pattern: str) -> re.Pattern[str]:
    parts = []
    escaped = False
    for ch in pattern:
        if escaped:
            parts.append(re.escape(ch))
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == "%":
            parts.append(".*")
        elif ch == "_":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


def _parse_literal(raw: str) -> Any:
    return {"true": True, "false": False, "null": None}.get(raw, raw)


class FakeResult:
    def __init__(self, data: list[dict[str, Any]], count: int | None = None) -> None:
        self.data = data
        self.count = count


class FakeQuery:
    """Chainable query builder over one in-memory table."""

    def __init__(self, db: "FakeSupabase", table: str) -> None:
        self._db = db
        self._table = table
        self._op = "select"
        self._columns = "*"
        self._count: str | None = None
        self._payload: Any = None
        self._filters: list[Callable[[dict[str, Any]], bool]] = []
        self._orders: list[tuple[str, bool]] = []
        self._range: tuple[int, int] | None = None
        self._limit: int | None = None

    # -- operations --------------------------------------------------------

    def select(self, *columns: str, count: str | None = None) -> "FakeQuery":
        self._op = "select"
        self._columns = ",".join(columns) if columns else "*"
        self._count = count
        return self

    def insert(self, payload: Any, **_: Any) -> "FakeQuery":
        self._op = "insert"
        self._payload = payload
        return self

    def update(self, payload: dict[str, Any], **_: Any) -> "FakeQuery":
        self._op = "update"
        self._payload = payload
        return self

    def delete(self, **_: Any) -> "FakeQuery":
        self._op = "delete"
        return self

    # -- filters -----------------------------------------------------------

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda r: _norm(r.get(column)) == _norm(value))
        return self

    def neq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda r: _norm(r.get(column)) != _norm(value))
        return self

    def ilike(self, column: str, pattern: str) -> "FakeQuery":
        regex = _ilike_regex(pattern)
        self._filters.append(lambda r: regex.fullmatch(str(r.get(column) or "")) is not None)
        return self

    def in_(self, column: str, values: list[Any]) -> "FakeQuery":
        allowed = {_norm(v) for v in values}
        self._filters.append(lambda r: _norm(r.get(column)) in allowed)
        return self

    def gte(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda r: str(r.get(column)) >= str(value))
        return self

    def lt(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda r: str(r.get(column)) < str(value))
        return self

    def or_(self, filters: str) -> "FakeQuery":
        clauses = []
        for clause in filters.split(","):
            column, op, raw = clause.split(".", 2)
            if op == "eq":
                value = _parse_literal(raw)
                clauses.append(lambda r, c=column, v=value: _norm(r.get(c)) == _norm(v))
            elif op == "ilike":
                regex = _ilike_regex(raw)
                clauses.append(
                    lambda r, c=column, rx=regex: rx.fullmatch(str(r.get(c) or "")) is not None
                )
            else:
                raise NotImplementedError(f"or_ operator {op!r}")
        self._filters.append(lambda r: any(clause(r) for clause in clauses))
        return self

    # -- modifiers ---------------------------------------------------------

    def order(self, column: str, desc: bool = False, **_: Any) -> "FakeQuery":
        self._orders.append((column, desc))
        return self

    def range(self, start: int, end: int) -> "FakeQuery":
        self._range = (start, end)
        return self

    def limit(self, size: int) -> "FakeQuery":
        self._limit = size
        return self

    # -- execution ---------------------------------------------------------

    def _matching(self) -> list[dict[str, Any]]:
        return [r for r in self._db.tables[self._table] if all(f(r) for f in self._filters)]

    def _project(self, row: dict[str, Any]) -> dict[str, Any]:
        if self._columns.strip() == "*":
            return copy.deepcopy(row)
        columns = [c.strip() for c in self._columns.split(",") if c.strip()]
        return {c: copy.deepcopy(row.get(c)) for c in columns}

    def execute(self) -> FakeResult:
        if self._op == "insert":
            return FakeResult(self._db.insert_rows(self._table, self._payload))

        if self._op == "update":
            rows = self._matching()
            candidate = [{**r, **self._payload} for r in rows]
            self._db.check_unique(self._table, candidate, exclude=rows)
            for row in rows:
                row.update(copy.deepcopy(self._payload))
            return FakeResult([copy.deepcopy(r) for r in rows])

        if self._op == "delete":
            rows = self._matching()
            self._db.tables[self._table] = [
                r for r in self._db.tables[self._table] if all(r is not d for d in rows)
            ]
            return FakeResult([copy.deepcopy(r) for r in rows])

        rows = self._matching()
        for column, desc in reversed(self._orders):
            rows.sort(key=lambda r, c=column: (r.get(c) is None, str(r.get(c) or "")), reverse=desc)
        total = len(rows) if self._count else None
        if self._range is not None:
            start, end = self._range
            rows = rows[start:end + 1]
        if self._limit is not None:
            rows = rows[:self._limit]
        rows = rows[:self._db.max_rows]
        return FakeResult([self._project(r) for r in rows], count=total)


class FakeRpc:
    """Result set of a database function, with PostgREST's row cap."""

    def __init__(self, db: "FakeSupabase", rows: list[dict[str, Any]]) -> None:
        self._db = db
        self._rows = rows
        self._range: tuple[int, int] | None = None

    def range(self, start: int, end: int) -> "FakeRpc":
        self._range = (start, end)
        return self

    def execute(self) -> FakeResult:
        rows = self._rows
        if self._range is not None:
            start, end = self._range
            rows = rows[start:end + 1]
        return FakeResult(copy.deepcopy(rows[:self._db.max_rows]))


def _in_window(value: str, params: dict[str, Any]) -> bool:
    start, end = params.get("p_start_date"), params.get("p_end_date")
    return (start is None or value >= start) and (end is None or value < end)


def _average(scores: list[int]) -> float:
    return round(sum(scores) / len(scores), 2) if scores else 0


class FakeSupabase:
    """Minimal in-memory Supabase client.

    Like Supabase's PostgREST, every response carries at most ``max_rows``
    rows; aggregates behind ``rpc`` see the whole table.
    """

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self.max_rows = 1000
        self._tick = 0

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    # -- database functions (see sql/schema.sql) ---------------------------

    def rpc(self, name: str, params: dict[str, Any] | None = None) -> FakeRpc:
        handler = getattr(self, f"_fn_{name}", None)
        if handler is None:
            raise NotImplementedError(f"rpc {name!r}")
        return FakeRpc(self, handler(params or {}))

    def _fn_get_rating_stats(self, params: dict[str, Any]) -> list[dict[str, Any]]:
        user_id = params.get("p_user_id")
        scores = [
            int(r["rating"]) for r in self.tables["ratings"]
            if user_id is None or str(r["rated_user_id"]) == str(user_id)
        ]
        return [{"rating_count": len(scores), "rating_average": _average(scores)}]

    def _fn_get_user_activity(self, params: dict[str, Any]) -> list[dict[str, Any]]:
        users = [u for u in self.tables["users"] if _in_window(u["created_at"], params)]
        users.sort(key=lambda u: (u["created_at"], u["id"]), reverse=True)
        rows = []
        for user in users:
            uid = str(user["id"])
            swaps = [
                s for s in self.tables["swap_requests"]
                if uid in (str(s["requester_id"]), str(s["recipient_id"]))
            ]
            scores = [int(r["rating"]) for r in self.tables["ratings"] if str(r["rated_user_id"]) == uid]
            rows.append({
                "user_id": uid,
                "name": user["name"],
                "email": user["email"],
                "location": user.get("location"),
                "created_at": user["created_at"],
                "total_swaps": len(swaps),
                "accepted_swaps": sum(1 for s in swaps if s["status"] == "accepted"),
                "total_ratings": len(scores),
                "average_rating": _average(scores),
            })
        return rows

    def _fn_get_swap_stats_by_day(self, params: dict[str, Any]) -> list[dict[str, Any]]:
        per_day: dict[str, dict[str, int]] = defaultdict(lambda: defaultdict(int))
        for swap in self.tables["swap_requests"]:
            if not _in_window(swap["created_at"], params):
                continue
            counts = per_day[swap["created_at"][:10]]
            counts["total"] += 1
            counts[swap["status"]] += 1
        return [
            {
                "day": day,
                "total": counts["total"],
                "accepted": counts["accepted"],
                "rejected": counts["rejected"],
                "pending": counts["pending"],
                "cancelled": counts["cancelled"],
            }
            for day, counts in sorted(per_day.items(), reverse=True)
        ]

    def _now(self) -> str:
        self._tick += 1
        return (_BASE_TIME + timedelta(seconds=self._tick)).isoformat()

    def check_unique(
        self,
        table: str,
        candidates: list[dict[str, Any]],
        exclude: list[dict[str, Any]] | None = None,
    ) -> None:
        exclude = exclude or []
        existing = [r for r in self.tables[table] if all(r is not e for e in exclude)]
        for columns, applies in _UNIQUE.get(table, []):
            seen = {
                tuple(_key_part(r, c) for c in columns)
                for r in existing
                if applies(r)
            }
            for row in candidates:
                if not applies(row):
                    continue
                key = tuple(_key_part(row, c) for c in columns)
                if key in seen:
                    raise APIError({
                        "message": f"duplicate key value violates unique constraint on {table}",
                        "code": "23505",
                        "hint": "",
                        "details": f"Key {columns}={key} already exists.",
                    })
                seen.add(key)

    def insert_rows(self, table: str, payload: Any) -> list[dict[str, Any]]:
        items = payload if isinstance(payload, list) else [payload]
        rows = []
        for item in items:
            now = self._now()
            row = {"id": str(uuid4()), **_DEFAULTS.get(table, {}), "created_at": now}
            if table in _HAS_UPDATED_AT:
                row["updated_at"] = now
            row.update(copy.deepcopy(item))
            rows.append(row)
        self.check_unique(table, rows)
        self.tables[table].extend(rows)
        return [copy.deepcopy(r) for r in rows]

    def row(self, table: str, row_id: Any) -> dict[str, Any] | None:
        for r in self.tables[table]:
            if str(r["id"]) == str(row_id):
                return r
        return None


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def fake_db() -> Generator[FakeSupabase, None, None]:
    """Install a fresh in-memory database as the Supabase singleton."""
    import skillswap.db.supabase as supa_mod

    fake = FakeSupabase()
    supa_mod._client = fake  # type: ignore[assignment]
    yield fake
    supa_mod._client = None


@pytest.fixture()
def test_client(fake_db: FakeSupabase) -> Generator[TestClient, None, None]:
    """Provide a FastAPI TestClient backed by the in-memory database."""
    from skillswap.main import app

    with TestClient(app) as client:
        yield client


@pytest.fixture()
def make_user(fake_db: FakeSupabase) -> Callable[..., dict[str, Any]]:
    """Insert a user row directly (password ``secret123``)."""
    from skillswap.core.security import hash_password

    password_hash = hash_password("secret123")

    def _make(name: str, **overrides: Any) -> dict[str, Any]:
        row = {
            "email": f"{name.lower().replace(' ', '.')}@example.com",
            "password_hash": password_hash,
            "name": name,
            **overrides,
        }
        return fake_db.insert_rows("users", row)[0]

    return _make


@pytest.fixture()
def make_skill(fake_db: FakeSupabase) -> Callable[..., dict[str, Any]]:
    def _make(name: str, category: str = "Programming") -> dict[str, Any]:
        return fake_db.insert_rows("skills", {"name": name, "category": category})[0]

    return _make


@pytest.fixture()
def offer(fake_db: FakeSupabase) -> Callable[..., dict[str, Any]]:
    """Link a skill to a user as offered (or wanted)."""

    def _offer(user: dict[str, Any], skill: dict[str, Any], role: str = "offered") -> dict[str, Any]:
        level = "intermediate" if role == "offered" else "medium"
        return fake_db.insert_rows("user_skills", {
            "user_id": user["id"],
            "skill_id": skill["id"],
            "role": role,
            "level": level,
        })[0]

    return _offer


@pytest.fixture()
def auth_headers() -> Callable[[dict[str, Any]], dict[str, str]]:
    from skillswap.core.security import create_access_token

    def _headers(user: dict[str, Any]) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    return _headers
