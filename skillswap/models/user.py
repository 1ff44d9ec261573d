"""Pydantic models for the ``users`` table and auth payloads.

The stored ``password_hash`` never appears in a response model.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from skillswap.core.constants import MIN_PASSWORD_LENGTH
from skillswap.models.association import OfferedSkillView, WantedSkillView
from skillswap.models.common import Pagination


class UserRegister(BaseModel):
    """Payload for ``POST /auth/register``."""
    email: EmailStr
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    name: str = Field(..., min_length=1, max_length=100)
    location: str = Field(default="", max_length=200)
    availability: str = Field(default="", max_length=200)


class UserLogin(BaseModel):
    """Payload for ``POST /auth/login``."""
    email: EmailStr
    password: str


class ProfileUpdate(BaseModel):
    """Partial profile update; omitted fields are left unchanged."""
    name: str | None = Field(default=None, min_length=1, max_length=100)
    location: str | None = Field(default=None, max_length=200)
    availability: str | None = Field(default=None, max_length=200)
    is_public: bool | None = None
    profile_photo: str | None = Field(default=None, max_length=500)


class PasswordChange(BaseModel):
    """Payload for ``PUT /auth/change-password``."""
    current_password: str
    new_password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)


class User(BaseModel):
    """User record as seen by its owner (and admins)."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str
    location: str | None = ""
    availability: str | None = ""
    profile_photo: str | None = None
    is_public: bool = True
    is_admin: bool = False
    is_banned: bool = False
    created_at: datetime | None = None


class AuthResponse(BaseModel):
    """Token plus the authenticated user's profile."""
    message: str
    token: str
    user: User


class RatingSummary(BaseModel):
    """Aggregate of ratings received by a user."""
    count: int = 0
    average: float = 0.0


class PublicUser(BaseModel):
    """Public profile card used by browse and profile pages."""
    id: UUID
    name: str
    location: str | None = ""
    availability: str | None = ""
    profile_photo: str | None = None
    offered_skills: list[OfferedSkillView] = []
    wanted_skills: list[WantedSkillView] = []


class PublicProfile(PublicUser):
    """Public profile with the received-rating summary."""
    rating: RatingSummary = RatingSummary()


class BrowseResponse(BaseModel):
    """Full response for ``GET /users/browse``."""
    users: list[PublicUser] = []
    pagination: Pagination = Pagination()
