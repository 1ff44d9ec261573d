"""Registration, login and own-profile endpoints."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends

from skillswap.models.common import MessageResponse
from skillswap.models.user import (
    AuthResponse,
    PasswordChange,
    ProfileUpdate,
    User,
    UserLogin,
    UserRegister,
)
from skillswap.routers.deps import get_current_user
from skillswap.services import users as users_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(payload: UserRegister) -> AuthResponse:
    user, token = users_service.register_user(payload)
    return AuthResponse(message="User registered successfully", token=token, user=user)


@router.post("/login", response_model=AuthResponse)
async def login(payload: UserLogin) -> AuthResponse:
    user, token = users_service.authenticate(payload)
    return AuthResponse(message="Login successful", token=token, user=user)


@router.get("/profile", response_model=User)
async def get_profile(current: dict[str, Any] = Depends(get_current_user)) -> User:
    return User(**current)


@router.put("/profile", response_model=User)
async def update_profile(
    payload: ProfileUpdate,
    current: dict[str, Any] = Depends(get_current_user),
) -> User:
    return users_service.update_profile(str(current["id"]), payload)


@router.put("/change-password", response_model=MessageResponse)
async def change_password(
    payload: PasswordChange,
    current: dict[str, Any] = Depends(get_current_user),
) -> MessageResponse:
    users_service.change_password(str(current["id"]), payload)
    return MessageResponse(message="Password changed successfully")
