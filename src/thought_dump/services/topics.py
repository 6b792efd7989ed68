"""Topic creation and lookup."""

from __future__ import annotations

import re

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from thought_dump.core.errors import ConflictError, NotFoundError, ValidationError
from thought_dump.models import Topic

_NON_WORD = re.compile(r"[^\w\s-]")
_SEPARATORS = re.compile(r"[\s_-]+")


def create_slug(name: str) -> str:
    """Turn a topic name into a lowercase, hyphen-separated slug."""
    slug = _NON_WORD.sub("", name.lower().strip())
    slug = _SEPARATORS.sub("-", slug)
    return slug.strip("-")


def get_topic_by_slug(db: Session, slug: str) -> Topic:
    topic = db.execute(select(Topic).where(Topic.slug == slug)).scalars().first()
    if topic is None:
        raise NotFoundError("Topic not found", code="TOPIC_NOT_FOUND")
    return topic


def get_topic(db: Session, topic_id: int) -> Topic:
    topic = db.get(Topic, topic_id)
    if topic is None:
        raise NotFoundError("Topic not found", code="TOPIC_NOT_FOUND")
    return topic


def list_active_topics(db: Session) -> list[Topic]:
    """Active topics, busiest first then alphabetical."""
    stmt = (
        select(Topic)
        .where(Topic.is_active.is_(True))
        .order_by(Topic.post_count.desc(), Topic.name.asc())
    )
    return list(db.execute(stmt).scalars().all())


def create_topic(db: Session, name: str, description: str | None = None) -> Topic:
    """Create a topic, deriving its slug from ``name``.

    Raises:
        ValidationError: If the name has no sluggable characters.
        ConflictError: If a topic with the same name or slug exists.
    """
    slug = create_slug(name)
    if not slug:
        raise ValidationError("Topic name must contain letters or digits")

    existing = db.execute(
        select(Topic).where(or_(Topic.name == name, Topic.slug == slug))
    ).scalars().first()
    if existing is not None:
        raise ConflictError("Topic with this name already exists", code="TOPIC_EXISTS")

    topic = Topic(name=name, slug=slug, description=description)
    db.add(topic)
    db.flush()
    db.refresh(topic)
    return topic
