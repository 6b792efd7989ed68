"""Admin endpoints: session login, moderation, statistics and audits."""

from fastapi import APIRouter, Query

from thought_dump.core.errors import UnauthorizedError
from thought_dump.core.security import create_admin_token, verify_admin_key
from thought_dump.core.settings import settings
from thought_dump.models import Post, Topic
from thought_dump.repositories.post_repo import PostRepository
from thought_dump.schemas.admin import (
    AdminLogin,
    AdminSession,
    AuditResponse,
    CountMismatchResponse,
    ModerationAction,
    PlatformStats,
)
from thought_dump.schemas.post import PostPage, PostResponse
from thought_dump.schemas.topic import TopicResponse
from thought_dump.services.audit import audit_all
from thought_dump.services.moderation import ModerationService

from ..dependencies import AdminDep, PageDep, SessionDep

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/session", response_model=AdminSession)
async def create_session(login: AdminLogin) -> AdminSession:
    """Exchange the admin key for a short-lived session token."""
    if not verify_admin_key(login.admin_key):
        raise UnauthorizedError("Unauthorized")
    return AdminSession(
        access_token=create_admin_token(),
        expires_in=settings.admin_token_expire_minutes * 60,
    )


@router.get("/posts", response_model=PostPage)
async def list_all_posts(
    _admin: AdminDep,
    db: SessionDep,
    page: PageDep,
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    include_moderated: bool = Query(False),
) -> PostPage:
    """List posts newest first, optionally including moderated ones."""
    result = PostRepository(db).list_page(
        page=page, limit=limit, include_moderated=include_moderated
    )
    return PostPage(
        posts=[PostResponse.model_validate(post) for post in result.items],
        total=result.total,
        page=result.page,
        limit=result.limit,
        has_more=result.has_more,
    )


@router.post("/posts/{post_id}/moderate", response_model=PostResponse)
async def moderate_post(
    post_id: int,
    moderation: ModerationAction,
    admin: AdminDep,
    db: SessionDep,
) -> Post:
    """Remove a post from public listings or restore it."""
    post = ModerationService.moderate_post(db, post_id, moderation.action, admin)
    db.commit()
    db.refresh(post)
    return post


@router.get("/stats", response_model=PlatformStats)
async def get_stats(_admin: AdminDep, db: SessionDep) -> PlatformStats:
    """Return platform-wide counts."""
    return PlatformStats(**ModerationService.platform_stats(db))


@router.post("/topics/{topic_id}/toggle", response_model=TopicResponse)
async def toggle_topic(topic_id: int, _admin: AdminDep, db: SessionDep) -> Topic:
    """Activate or deactivate a topic."""
    topic = ModerationService.toggle_topic(db, topic_id)
    db.commit()
    db.refresh(topic)
    return topic


@router.get("/audit", response_model=AuditResponse)
async def audit_vote_counters(_admin: AdminDep, db: SessionDep) -> AuditResponse:
    """Report subjects whose vote counters disagree with their vote records."""
    mismatches = audit_all(db)
    return AuditResponse(
        consistent=not mismatches,
        mismatches=[
            CountMismatchResponse(
                subject_kind=m.subject_kind.value,
                subject_id=m.subject_id,
                upvotes=m.upvotes,
                downvotes=m.downvotes,
                ledger_upvotes=m.ledger_upvotes,
                ledger_downvotes=m.ledger_downvotes,
            )
            for m in mismatches
        ],
    )
