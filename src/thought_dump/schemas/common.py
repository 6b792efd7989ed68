"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

SortOrder = Literal["newest", "trending", "oldest"]


class PageMeta(BaseModel):
    """Offset pagination metadata returned alongside list payloads."""

    total: int = Field(..., description="Number of matching records.")
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    has_more: bool


class ErrorResponse(BaseModel):
    """Error body returned for every failed request."""

    message: str
    code: str
