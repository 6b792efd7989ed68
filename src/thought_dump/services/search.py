"""Substring search across posts and topics with a simple relevance score."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from thought_dump.models import Post, Topic
from thought_dump.repositories.post_repo import order_clause

# Weights for where the query matched.
POST_CONTENT_WEIGHT = 10.0
POST_TOPIC_WEIGHT = 8.0
POST_AUTHOR_WEIGHT = 5.0
POST_UPVOTE_WEIGHT = 0.1
POST_COMMENT_WEIGHT = 0.2
TOPIC_NAME_WEIGHT = 15.0
TOPIC_DESCRIPTION_WEIGHT = 8.0
TOPIC_ACTIVITY_WEIGHT = 0.1

MIN_SUGGESTION_LENGTH = 2


@dataclass
class SearchResult:
    posts: list[tuple[Post, float]] = field(default_factory=list)
    topics: list[tuple[Topic, float]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.posts) + len(self.topics)


def post_relevance(post: Post, query: str) -> float:
    """Score how well ``post`` matches ``query``, boosted by engagement."""
    needle = query.lower()
    score = 0.0
    if needle in post.content.lower():
        score += POST_CONTENT_WEIGHT
    if post.topic is not None and needle in post.topic.name.lower():
        score += POST_TOPIC_WEIGHT
    if needle in (post.author_nickname or "").lower():
        score += POST_AUTHOR_WEIGHT
    score += post.upvotes * POST_UPVOTE_WEIGHT
    score += post.comment_count * POST_COMMENT_WEIGHT
    return score


def topic_relevance(topic: Topic, query: str) -> float:
    """Score how well ``topic`` matches ``query``, boosted by activity."""
    needle = query.lower()
    score = 0.0
    if needle in topic.name.lower():
        score += TOPIC_NAME_WEIGHT
    if needle in (topic.description or "").lower():
        score += TOPIC_DESCRIPTION_WEIGHT
    score += topic.post_count * TOPIC_ACTIVITY_WEIGHT
    return score


def _sort_topic_hits(hits: list[tuple[Topic, float]], sort_by: str) -> None:
    if sort_by == "trending":
        hits.sort(key=lambda hit: hit[0].post_count, reverse=True)
    elif sort_by == "newest":
        hits.sort(key=lambda hit: hit[0].created_at, reverse=True)
    elif sort_by == "oldest":
        hits.sort(key=lambda hit: hit[0].created_at)
    else:
        hits.sort(key=lambda hit: hit[1], reverse=True)


def search(
    db: Session,
    query: str,
    *,
    search_type: str = "all",
    sort_by: str = "relevance",
    page: int = 1,
    limit: int = 20,
) -> SearchResult:
    """Search visible posts and active topics for ``query``.

    With ``search_type="all"`` each half of the result gets
    ``ceil(limit / 2)`` slots from the first page; a single type uses the
    full ``limit`` and honours ``page``.
    """
    term = query.strip()
    result = SearchResult()
    if not term:
        return result

    pattern = f"%{term}%"
    skip = (page - 1) * limit if search_type != "all" else 0
    take = limit if search_type != "all" else math.ceil(limit / 2)

    if search_type in ("all", "posts"):
        # Relevance falls back to newest at the SQL level and is re-ranked below.
        sql_order = "newest" if sort_by == "relevance" else sort_by
        stmt = (
            select(Post)
            .join(Topic, Topic.id == Post.topic_id)
            .where(
                Post.is_moderated.is_(False),
                or_(
                    Post.content.ilike(pattern),
                    Post.author_nickname.ilike(pattern),
                    Topic.name.ilike(pattern),
                ),
            )
            .order_by(*order_clause(Post, sql_order))
            .offset(skip)
            .limit(take)
        )
        posts = db.execute(stmt).unique().scalars().all()
        result.posts = [(post, post_relevance(post, term)) for post in posts]
        if sort_by == "relevance":
            result.posts.sort(key=lambda hit: hit[1], reverse=True)

    if search_type in ("all", "topics"):
        stmt = (
            select(Topic)
            .where(
                Topic.is_active.is_(True),
                or_(Topic.name.ilike(pattern), Topic.description.ilike(pattern)),
            )
            .order_by(Topic.id)
            .offset(skip)
            .limit(take)
        )
        topics = db.execute(stmt).scalars().all()
        result.topics = [(topic, topic_relevance(topic, term)) for topic in topics]
        _sort_topic_hits(result.topics, sort_by)

    return result


def suggest_topics(db: Session, query: str, limit: int = 5) -> list[Topic]:
    """Return active topics whose name contains ``query``, busiest first."""
    term = query.strip()
    if len(term) < MIN_SUGGESTION_LENGTH:
        return []
    stmt = (
        select(Topic)
        .where(Topic.is_active.is_(True), Topic.name.ilike(f"%{term}%"))
        .order_by(Topic.post_count.desc(), Topic.name.asc())
        .limit(limit)
    )
    return list(db.execute(stmt).scalars().all())
