"""Post-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .common import PageMeta
from .topic import TopicResponse


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    content: str = Field(..., min_length=1, max_length=5000, description="Post text")
    topic_id: int = Field(..., description="Topic the post is filed under")
    author_nickname: str | None = Field(None, max_length=50, description="Optional nickname")


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    content: str
    topic_id: int
    topic: TopicResponse | None = None
    author_nickname: str
    upvotes: int
    downvotes: int
    score: float
    comment_count: int
    is_moderated: bool
    moderated_at: datetime | None = None
    moderated_by: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PostPage(PageMeta):
    posts: list[PostResponse]


class TopicPostPage(PostPage):
    topic: TopicResponse
