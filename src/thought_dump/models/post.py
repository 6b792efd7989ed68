"""SQLAlchemy model for anonymous posts."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from thought_dump.db.session import Base
from thought_dump.db.time import utcnow

if TYPE_CHECKING:
    from .topic import Topic


class Post(Base):
    """Short anonymous text filed under a topic.

    ``score`` caches the trending score for the current vote counters and is
    rewritten on every vote; it is never updated on its own.
    """

    __tablename__ = "post"
    __table_args__ = (
        Index("ix_post_topic_id", "topic_id"),
        Index("ix_post_created_at", "created_at"),
        Index("ix_post_score", "score"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    topic_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("topic.id", ondelete="CASCADE"),
        nullable=False,
    )
    author_nickname: Mapped[str] = mapped_column(String(50), default="Anonymous", nullable=False)

    upvotes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    downvotes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    score: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    comment_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    is_moderated: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    moderated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    moderated_by: Mapped[str | None] = mapped_column(String(100), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )

    topic: Mapped[Topic] = relationship("Topic", lazy="joined")
