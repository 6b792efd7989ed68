"""Search endpoints for the Thought Dump API."""

from fastapi import APIRouter, Query

from thought_dump.core.settings import settings
from thought_dump.schemas.post import PostResponse
from thought_dump.schemas.search import (
    PostSearchHit,
    SearchResponse,
    SearchSort,
    SearchType,
    Suggestion,
    SuggestionResponse,
    TopicSearchHit,
)
from thought_dump.schemas.topic import TopicResponse
from thought_dump.services.search import search, suggest_topics

from ..dependencies import PageDep, SessionDep

router = APIRouter(prefix="/search", tags=["search"])


@router.get("/", response_model=SearchResponse)
async def search_content(
    db: SessionDep,
    page: PageDep,
    q: str = Query("", description="Search text"),
    type: SearchType = Query("all"),
    sort_by: SearchSort = Query("relevance"),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
) -> SearchResponse:
    """Search posts and topics; a blank query returns an empty result."""
    term = q.strip()
    result = search(db, term, search_type=type, sort_by=sort_by, page=page, limit=limit)
    posts = [
        PostSearchHit(
            **PostResponse.model_validate(post).model_dump(),
            relevance_score=relevance,
        )
        for post, relevance in result.posts
    ]
    topics = [
        TopicSearchHit(
            **TopicResponse.model_validate(topic).model_dump(),
            relevance_score=relevance,
        )
        for topic, relevance in result.topics
    ]
    return SearchResponse(
        posts=posts,
        topics=topics,
        total=result.total,
        page=page,
        limit=limit,
        has_more=result.total >= limit,
        query=term or None,
    )


@router.get("/suggestions", response_model=SuggestionResponse)
async def search_suggestions(
    db: SessionDep,
    q: str = Query(""),
    limit: int = Query(5, ge=1, le=10),
) -> SuggestionResponse:
    """Suggest topics whose names contain the query."""
    topics = suggest_topics(db, q, limit)
    return SuggestionResponse(
        suggestions=[
            Suggestion(text=topic.name, slug=topic.slug, count=topic.post_count)
            for topic in topics
        ]
    )
