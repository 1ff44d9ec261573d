"""Shared response fragments."""

from pydantic import BaseModel


class Pagination(BaseModel):
    """Pagination metadata returned with every paged listing."""
    page: int = 1
    limit: int = 10
    total: int = 0
    pages: int = 0


class MessageResponse(BaseModel):
    """Plain acknowledgement body."""
    message: str
