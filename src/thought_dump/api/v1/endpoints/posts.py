"""Post-related endpoints for the Thought Dump API."""

from fastapi import APIRouter, Query, status

from thought_dump.core.errors import NotFoundError
from thought_dump.core.settings import settings
from thought_dump.models import Comment, Post
from thought_dump.repositories.post_repo import CommentRepository, PostRepository
from thought_dump.repositories.vote_repo import SubjectKind
from thought_dump.schemas.comment import CommentCreate, CommentPage, CommentResponse
from thought_dump.schemas.common import SortOrder
from thought_dump.schemas.post import PostCreate, PostPage, PostResponse
from thought_dump.schemas.vote import VoteCreate, VoteResult
from thought_dump.services.topics import get_topic
from thought_dump.services.voting import VoteService

from ..dependencies import PageDep, SessionDep, VoterIdDep

router = APIRouter(prefix="/posts", tags=["posts"])


def _get_post_or_404(repo: PostRepository, post_id: int) -> Post:
    post = repo.get_by_id(post_id)
    if post is None:
        raise NotFoundError("Post not found", code="POST_NOT_FOUND")
    return post


@router.get("/", response_model=PostPage)
async def list_posts(
    db: SessionDep,
    page: PageDep,
    limit: int = Query(
        settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        description="Maximum number of posts to return",
    ),
    sort_by: SortOrder = Query("newest", description="newest, trending or oldest"),
    topic_id: int | None = Query(None, description="Filter by topic"),
    search: str | None = Query(None, description="Substring match on content, nickname or topic"),
) -> PostPage:
    """List visible posts with pagination, sorting and optional filters."""
    result = PostRepository(db).list_page(
        page=page,
        limit=limit,
        sort_by=sort_by,
        topic_id=topic_id,
        search=search.strip() if search else None,
    )
    return PostPage(
        posts=[PostResponse.model_validate(post) for post in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        has_more=result.has_more,
    )


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(post_data: PostCreate, db: SessionDep) -> Post:
    """Create a post under an existing topic.

    Raises:
        NotFoundError: If the topic does not exist.
    """
    topic = get_topic(db, post_data.topic_id)
    post = PostRepository(db).create(
        content=post_data.content,
        topic=topic,
        author_nickname=post_data.author_nickname,
    )
    db.commit()
    db.refresh(post)
    return post


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: int, db: SessionDep) -> Post:
    """Get a specific post by ID."""
    return _get_post_or_404(PostRepository(db), post_id)


@router.post("/{post_id}/vote", response_model=VoteResult)
async def vote_on_post(
    post_id: int,
    vote_data: VoteCreate,
    voter_id: VoterIdDep,
    db: SessionDep,
) -> VoteResult:
    """Cast, flip or withdraw the requester's vote on a post."""
    outcome = VoteService(db).cast_vote(SubjectKind.POST, post_id, voter_id, vote_data.type)
    db.commit()
    return VoteResult(upvotes=outcome.upvotes, downvotes=outcome.downvotes, score=outcome.score)


@router.get("/{post_id}/comments", response_model=CommentPage)
async def list_post_comments(
    post_id: int,
    db: SessionDep,
    page: PageDep,
    limit: int = Query(50, ge=1, le=100),
    sort_by: SortOrder = Query("newest"),
) -> CommentPage:
    """List visible comments on a post."""
    _get_post_or_404(PostRepository(db), post_id)
    result = CommentRepository(db).list_page(
        post_id=post_id, page=page, limit=limit, sort_by=sort_by
    )
    return CommentPage(
        comments=[CommentResponse.model_validate(comment) for comment in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        has_more=result.has_more,
    )


@router.post(
    "/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(post_id: int, comment_data: CommentCreate, db: SessionDep) -> Comment:
    """Comment on a post, optionally replying to one of its comments.

    Raises:
        NotFoundError: If the post, or the parent comment on this post, does not exist.
    """
    post = _get_post_or_404(PostRepository(db), post_id)
    comments = CommentRepository(db)

    if comment_data.parent_id is not None:
        parent = comments.get_by_id(comment_data.parent_id)
        if parent is None or parent.post_id != post_id:
            raise NotFoundError("Parent comment not found", code="COMMENT_NOT_FOUND")

    comment = comments.create(
        post=post,
        content=comment_data.content,
        author_nickname=comment_data.author_nickname,
        parent_id=comment_data.parent_id,
    )
    db.commit()
    db.refresh(comment)
    return comment
