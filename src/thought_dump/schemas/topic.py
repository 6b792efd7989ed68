"""Topic-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class TopicCreate(BaseModel):
    """Schema for creating a new topic."""

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)


class TopicResponse(BaseModel):
    """Schema for topic information returned by the API."""

    id: int
    name: str
    slug: str
    description: str | None
    post_count: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TopicListResponse(BaseModel):
    topics: list[TopicResponse]
