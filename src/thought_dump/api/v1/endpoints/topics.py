"""Topic-related endpoints for the Thought Dump API."""

from fastapi import APIRouter, Query, status

from thought_dump.core.settings import settings
from thought_dump.models import Topic
from thought_dump.repositories.post_repo import PostRepository
from thought_dump.schemas.common import SortOrder
from thought_dump.schemas.post import PostResponse, TopicPostPage
from thought_dump.schemas.topic import TopicCreate, TopicListResponse, TopicResponse
from thought_dump.services.topics import create_topic, get_topic_by_slug, list_active_topics

from ..dependencies import PageDep, SessionDep

router = APIRouter(prefix="/topics", tags=["topics"])


@router.get("/", response_model=TopicListResponse)
async def list_topics(db: SessionDep) -> TopicListResponse:
    """List active topics, busiest first."""
    topics = list_active_topics(db)
    return TopicListResponse(topics=[TopicResponse.model_validate(t) for t in topics])


@router.get("/{slug}", response_model=TopicResponse)
async def get_topic(slug: str, db: SessionDep) -> Topic:
    """Get a topic by its slug."""
    return get_topic_by_slug(db, slug)


@router.get("/{slug}/posts", response_model=TopicPostPage)
async def list_topic_posts(
    slug: str,
    db: SessionDep,
    page: PageDep,
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    sort_by: SortOrder = Query("newest"),
) -> TopicPostPage:
    """List visible posts filed under a topic."""
    topic = get_topic_by_slug(db, slug)
    result = PostRepository(db).list_page(
        page=page, limit=limit, sort_by=sort_by, topic_id=topic.id
    )
    return TopicPostPage(
        topic=TopicResponse.model_validate(topic),
        posts=[PostResponse.model_validate(post) for post in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        has_more=result.has_more,
    )


@router.post("/", response_model=TopicResponse, status_code=status.HTTP_201_CREATED)
async def create_new_topic(topic_data: TopicCreate, db: SessionDep) -> Topic:
    """Create a topic; its slug is derived from the name."""
    topic = create_topic(db, topic_data.name, topic_data.description)
    db.commit()
    db.refresh(topic)
    return topic
