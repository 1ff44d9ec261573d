"""Domain error taxonomy.

Every failure a service can report is a ``SkillSwapError`` subclass that
carries the HTTP status and the taxonomy ``kind`` rendered to clients.
Services raise these before writing anything, so a rejected call never
leaves a partial side effect behind.
"""

from __future__ import annotations

from postgrest.exceptions import APIError

from skillswap.core.constants import UNIQUE_VIOLATION


class SkillSwapError(Exception):
    """Base class for all errors reported to API callers."""

    status_code: int = 500
    kind: str = "ServerError"
    default_detail: str = "Server error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    @property
    def code(self) -> str:
        return type(self).__name__

    def to_dict(self) -> dict[str, str]:
        return {"error": self.kind, "code": self.code, "detail": self.detail}


# ---------------------------------------------------------------------------
# ValidationError (400)
# ---------------------------------------------------------------------------

class ValidationError(SkillSwapError):
    status_code = 400
    kind = "ValidationError"
    default_detail = "Invalid input"


class SelfSwap(ValidationError):
    default_detail = "Cannot create swap request with yourself"


class OfferedSkillNotOwned(ValidationError):
    default_detail = "You do not offer the skill you are proposing"


class RequestedSkillNotOffered(ValidationError):
    default_detail = "Recipient does not offer the requested skill"


# ---------------------------------------------------------------------------
# Unauthenticated (401)
# ---------------------------------------------------------------------------

class AuthenticationError(SkillSwapError):
    status_code = 401
    kind = "Unauthenticated"
    default_detail = "Invalid credentials"


# ---------------------------------------------------------------------------
# Forbidden (403)
# ---------------------------------------------------------------------------

class Forbidden(SkillSwapError):
    status_code = 403
    kind = "Forbidden"
    default_detail = "You are not allowed to perform this action"


class SelfBanForbidden(Forbidden):
    default_detail = "Cannot ban yourself"


class AdminRequired(Forbidden):
    default_detail = "Admin access required"


# ---------------------------------------------------------------------------
# BannedActor (403)
# ---------------------------------------------------------------------------

class BannedActor(SkillSwapError):
    status_code = 403
    kind = "BannedActor"
    default_detail = "User is banned"


class RecipientBanned(BannedActor):
    default_detail = "Cannot create swap request with banned user"


class AccountBanned(BannedActor):
    default_detail = "Your account has been banned"


# ---------------------------------------------------------------------------
# NotFound (404)
# ---------------------------------------------------------------------------

class NotFound(SkillSwapError):
    status_code = 404
    kind = "NotFound"
    default_detail = "Not found"


class UserNotFound(NotFound):
    default_detail = "User not found"


class RecipientNotFound(NotFound):
    default_detail = "Recipient not found"


class SkillNotFound(NotFound):
    default_detail = "Skill not found"


# ---------------------------------------------------------------------------
# Conflict (409)
# ---------------------------------------------------------------------------

class Conflict(SkillSwapError):
    status_code = 409
    kind = "Conflict"
    default_detail = "Conflict"


class DuplicateAssociation(Conflict):
    default_detail = "Skill is already listed"


class DuplicatePendingRequest(Conflict):
    default_detail = "You already have a pending swap request with this user"


class DuplicateRating(Conflict):
    default_detail = "You have already rated this swap"


class EmailAlreadyRegistered(Conflict):
    default_detail = "User already exists"


class DuplicateSkill(Conflict):
    default_detail = "Skill already exists"


# ---------------------------------------------------------------------------
# InvalidTransition (409)
# ---------------------------------------------------------------------------

class InvalidTransition(SkillSwapError):
    status_code = 409
    kind = "InvalidTransition"
    default_detail = "Only pending requests can change status"


class InvalidState(InvalidTransition):
    default_detail = "Can only rate accepted swaps"


# ---------------------------------------------------------------------------
# ServerError (500)
# ---------------------------------------------------------------------------

class StorageError(SkillSwapError):
    default_detail = "Database error"


def is_unique_violation(exc: APIError) -> bool:
    """Return True when a PostgREST error is a unique-constraint violation."""
    return getattr(exc, "code", None) == UNIQUE_VIOLATION
