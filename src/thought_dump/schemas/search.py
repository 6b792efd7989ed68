"""Search-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel

from .post import PostResponse
from .topic import TopicResponse

SearchType = Literal["all", "posts", "topics"]
SearchSort = Literal["relevance", "trending", "newest", "oldest"]


class PostSearchHit(PostResponse):
    relevance_score: float


class TopicSearchHit(TopicResponse):
    relevance_score: float


class SearchResponse(BaseModel):
    """Combined post and topic matches for a query."""

    posts: list[PostSearchHit]
    topics: list[TopicSearchHit]
    total: int
    page: int
    limit: int
    has_more: bool
    query: str | None = None


class Suggestion(BaseModel):
    text: str
    type: Literal["topic"] = "topic"
    slug: str
    count: int


class SuggestionResponse(BaseModel):
    suggestions: list[Suggestion]
