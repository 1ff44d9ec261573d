"""Application constants.

Contains the default skill catalog and shared limits.
"""

# ---------------------------------------------------------------------------
# Default skill catalog (seeded when the ``skills`` table is empty)
# ---------------------------------------------------------------------------
DEFAULT_SKILLS: list[dict[str, str]] = [
    {"name": "JavaScript", "category": "Programming"},
    {"name": "Python", "category": "Programming"},
    {"name": "React", "category": "Frontend"},
    {"name": "Node.js", "category": "Backend"},
    {"name": "Photoshop", "category": "Design"},
    {"name": "Excel", "category": "Office"},
    {"name": "Word", "category": "Office"},
    {"name": "PowerPoint", "category": "Office"},
    {"name": "ML", "category": "AI"},
    {"name": "Angular", "category": "Frontend"},
    {"name": "NextJs", "category": "Frontend"},
    {"name": "Vue.js", "category": "Frontend"},
    {"name": "Django", "category": "Backend"},
    {"name": "Flask", "category": "Backend"},
    {"name": "SQL", "category": "Database"},
    {"name": "MongoDB", "category": "Database"},
    {"name": "Git", "category": "DevOps"},
    {"name": "Docker", "category": "DevOps"},
    {"name": "Figma", "category": "Design"},
    {"name": "Canva", "category": "Design"},
]

# ---------------------------------------------------------------------------
# Field limits
# ---------------------------------------------------------------------------
MIN_PASSWORD_LENGTH: int = 6
MAX_SWAP_MESSAGE_LENGTH: int = 1000
MAX_FEEDBACK_LENGTH: int = 1000
MAX_MESSAGE_TITLE_LENGTH: int = 100
MAX_MESSAGE_BODY_LENGTH: int = 1000

MIN_RATING: int = 1
MAX_RATING: int = 5

# PostgreSQL SQLSTATE for unique_violation
UNIQUE_VIOLATION: str = "23505"

# Supabase's default PostgREST ``db-max-rows``; unranged reads stop here
POSTGREST_MAX_ROWS: int = 1000
