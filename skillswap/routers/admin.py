"""Admin endpoints: moderation, statistics, messages, catalog and reports.

Every route is guarded by ``require_admin``.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from starlette.responses import Response

from skillswap.models.admin import (
    AdminMessage,
    AdminMessageCreate,
    AdminMessageListResponse,
    AdminMessageUpdate,
    AdminSwapListResponse,
    AdminUserListResponse,
    BanUpdate,
    PlatformStats,
)
from skillswap.models.common import MessageResponse
from skillswap.models.enums import SwapStatus, UserStatusFilter
from skillswap.models.skill import Skill, SkillCreate
from skillswap.models.user import User
from skillswap.routers.deps import require_admin
from skillswap.services import admin as admin_service
from skillswap.services import reports, skills, swaps

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

@router.get("/users", response_model=AdminUserListResponse)
async def list_users(
    search: str | None = Query(default=None, description="Matches name, email or location"),
    status: UserStatusFilter | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
) -> AdminUserListResponse:
    return admin_service.list_users(search=search, status=status, page=page, limit=limit)


@router.put("/users/{user_id}/ban", response_model=User)
async def ban_user(
    user_id: UUID,
    payload: BanUpdate,
    admin: dict[str, Any] = Depends(require_admin),
) -> User:
    return admin_service.set_ban(str(admin["id"]), str(user_id), payload.is_banned)


# ---------------------------------------------------------------------------
# Statistics and swaps
# ---------------------------------------------------------------------------

@router.get("/stats", response_model=PlatformStats)
async def platform_stats() -> PlatformStats:
    return admin_service.get_platform_stats()


@router.get("/swaps", response_model=AdminSwapListResponse)
async def list_swaps(
    status: SwapStatus | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
) -> AdminSwapListResponse:
    listing = swaps.list_all_requests(status=status, page=page, limit=limit)
    return AdminSwapListResponse(swaps=listing.requests, pagination=listing.pagination)


# ---------------------------------------------------------------------------
# Skill catalog
# ---------------------------------------------------------------------------

@router.post("/skills", response_model=Skill, status_code=201)
async def create_skill(payload: SkillCreate) -> Skill:
    return skills.create_skill(payload)


# ---------------------------------------------------------------------------
# Broadcast messages
# ---------------------------------------------------------------------------

@router.post("/messages", response_model=AdminMessage, status_code=201)
async def create_message(payload: AdminMessageCreate) -> AdminMessage:
    return admin_service.create_message(payload)


@router.get("/messages", response_model=AdminMessageListResponse)
async def list_messages(
    active: bool | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
) -> AdminMessageListResponse:
    return admin_service.list_messages(active=active, page=page, limit=limit)


@router.put("/messages/{message_id}", response_model=AdminMessage)
async def update_message(message_id: UUID, payload: AdminMessageUpdate) -> AdminMessage:
    return admin_service.update_message(str(message_id), payload)


@router.delete("/messages/{message_id}", response_model=MessageResponse)
async def delete_message(message_id: UUID) -> MessageResponse:
    admin_service.delete_message(str(message_id))
    return MessageResponse(message="Message deleted successfully")


# ---------------------------------------------------------------------------
# CSV reports
# ---------------------------------------------------------------------------

@router.get("/reports/user-activity")
async def user_activity_report(
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
) -> Response:
    content = reports.user_activity_report(start_date=start_date, end_date=end_date)
    return _csv_response(content, "user-activity-report.csv")


@router.get("/reports/swap-stats")
async def swap_stats_report(
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
) -> Response:
    content = reports.swap_stats_report(start_date=start_date, end_date=end_date)
    return _csv_response(content, "swap-stats-report.csv")
