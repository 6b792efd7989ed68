"""Comment-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .common import PageMeta


class CommentCreate(BaseModel):
    """Schema for creating a comment on a post."""

    content: str = Field(..., min_length=1, max_length=2000)
    author_nickname: str | None = Field(None, max_length=50)
    parent_id: int | None = Field(None, description="Parent comment ID for replies")


class CommentResponse(BaseModel):
    """Schema for comment information returned by the API."""

    id: int
    post_id: int
    parent_id: int | None
    content: str
    author_nickname: str
    upvotes: int
    downvotes: int
    score: float
    is_moderated: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CommentPage(PageMeta):
    comments: list[CommentResponse]
