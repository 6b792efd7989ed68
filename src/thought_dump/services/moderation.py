"""Moderation services for Thought Dump."""

from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from thought_dump.core.errors import NotFoundError
from thought_dump.db.time import utcnow
from thought_dump.models import Post, PostVote, Topic

logger = logging.getLogger(__name__)

MODERATION_REMOVE = "remove"
MODERATION_APPROVE = "approve"

RECENT_WINDOW = timedelta(hours=24)


class ModerationService:
    """Service handling admin moderation and platform statistics."""

    @staticmethod
    def moderate_post(db: Session, post_id: int, action: str, moderator: str) -> Post:
        """Hide (``remove``) or restore (``approve``) a post.

        The topic's ``post_count`` only counts visible posts, so it changes
        only when the post's visibility actually flips.

        Raises:
            NotFoundError: If the post does not exist.
        """
        post = db.get(Post, post_id)
        if post is None:
            raise NotFoundError("Post not found", code="POST_NOT_FOUND")

        was_moderated = post.is_moderated
        remove = action == MODERATION_REMOVE

        post.is_moderated = remove
        post.moderated_at = utcnow()
        post.moderated_by = moderator

        topic = db.get(Topic, post.topic_id)
        if topic is not None:
            if remove and not was_moderated:
                topic.post_count = Topic.post_count - 1
            elif not remove and was_moderated:
                topic.post_count = Topic.post_count + 1

        db.flush()
        db.refresh(post)
        logger.info("Post %d %sd by %s", post_id, action, moderator)
        return post

    @staticmethod
    def toggle_topic(db: Session, topic_id: int) -> Topic:
        """Flip a topic's ``is_active`` flag."""
        topic = db.get(Topic, topic_id)
        if topic is None:
            raise NotFoundError("Topic not found", code="TOPIC_NOT_FOUND")
        topic.is_active = not topic.is_active
        db.flush()
        db.refresh(topic)
        logger.info("Topic %d active=%s", topic_id, topic.is_active)
        return topic

    @staticmethod
    def platform_stats(db: Session) -> dict[str, int]:
        """Return headline counts for the admin dashboard."""

        def _count(stmt) -> int:
            return int(db.execute(stmt).scalar() or 0)

        since = utcnow() - RECENT_WINDOW
        return {
            "total_posts": _count(select(func.count()).select_from(Post)),
            "total_topics": _count(select(func.count()).select_from(Topic)),
            "total_votes": _count(select(func.count()).select_from(PostVote)),
            "moderated_posts": _count(
                select(func.count()).select_from(Post).where(Post.is_moderated.is_(True))
            ),
            "recent_posts": _count(
                select(func.count()).select_from(Post).where(Post.created_at >= since)
            ),
        }
