"""Models capturing anonymous votes on posts and comments."""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from thought_dump.db.session import Base
from thought_dump.db.time import utcnow


class PostVote(Base):
    """One voter's live vote on a post.

    ``voter_id`` is the salted hash of the requester's address, never the
    address itself.
    """

    __tablename__ = "post_vote"
    __table_args__ = (
        CheckConstraint("vote_type IN ('upvote', 'downvote')", name="ck_post_vote_type"),
        UniqueConstraint("post_id", "voter_id", name="uq_post_vote_post_voter"),
        Index("ix_post_vote_post_id", "post_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("post.id", ondelete="CASCADE"),
        nullable=False,
    )
    voter_id: Mapped[str] = mapped_column(String(64), nullable=False)
    vote_type: Mapped[str] = mapped_column(String(8), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )


class CommentVote(Base):
    """One voter's live vote on a comment."""

    __tablename__ = "comment_vote"
    __table_args__ = (
        CheckConstraint("vote_type IN ('upvote', 'downvote')", name="ck_comment_vote_type"),
        UniqueConstraint("comment_id", "voter_id", name="uq_comment_vote_comment_voter"),
        Index("ix_comment_vote_comment_id", "comment_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    comment_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("comment.id", ondelete="CASCADE"),
        nullable=False,
    )
    voter_id: Mapped[str] = mapped_column(String(64), nullable=False)
    vote_type: Mapped[str] = mapped_column(String(8), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )
