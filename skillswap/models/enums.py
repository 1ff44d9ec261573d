"""Enum types mirroring the CHECK constraints in ``sql/schema.sql``."""

from enum import Enum


class SwapStatus(str, Enum):
    """Lifecycle status of a swap request. Only ``pending`` is non-terminal."""
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"
    cancelled = "cancelled"


class SkillRole(str, Enum):
    """Which side of the exchange a user-skill association describes."""
    offered = "offered"
    wanted = "wanted"


class ProficiencyLevel(str, Enum):
    """Level attached to an offered skill."""
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"


class PriorityLevel(str, Enum):
    """Level attached to a wanted skill."""
    low = "low"
    medium = "medium"
    high = "high"


class MessageSeverity(str, Enum):
    """Severity tag of an admin broadcast message."""
    info = "info"
    warning = "warning"
    success = "success"
    error = "error"


class SwapDirection(str, Enum):
    """Filter for listing a user's swap requests."""
    all = "all"
    sent = "sent"
    received = "received"


class UserStatusFilter(str, Enum):
    """Admin user-list filter on the ban flag."""
    active = "active"
    banned = "banned"
