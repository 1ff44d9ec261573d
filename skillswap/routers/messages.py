"""Public read of active admin broadcast messages."""

from fastapi import APIRouter

from skillswap.models.admin import ActiveMessagesResponse
from skillswap.services import admin as admin_service

router = APIRouter()


@router.get("/active", response_model=ActiveMessagesResponse)
async def active_messages() -> ActiveMessagesResponse:
    return ActiveMessagesResponse(messages=admin_service.list_active_messages())
