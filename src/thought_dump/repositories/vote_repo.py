"""Data access for vote records and the counters they drive."""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.orm import InstrumentedAttribute, Session

from thought_dump.models import Comment, CommentVote, Post, PostVote
from thought_dump.services.ledger import VoteType

__all__ = ["SubjectKind", "VoteRepository", "VotableModel"]


class SubjectKind(StrEnum):
    """Kinds of content that can be voted on."""

    POST = "post"
    COMMENT = "comment"


@dataclass(frozen=True)
class VotableModel:
    """ORM classes backing one subject kind."""

    subject: type[Post] | type[Comment]
    vote: type[PostVote] | type[CommentVote]
    vote_subject_column: InstrumentedAttribute[int]


_MODELS: dict[SubjectKind, VotableModel] = {
    SubjectKind.POST: VotableModel(Post, PostVote, PostVote.post_id),
    SubjectKind.COMMENT: VotableModel(Comment, CommentVote, CommentVote.comment_id),
}


class VoteRepository:
    """Store operations for one subject kind.

    Counter changes are issued as ``SET col = col + :delta`` so concurrent
    voters on the same subject never lose each other's updates.
    """

    def __init__(self, session: Session, kind: SubjectKind) -> None:
        self.session = session
        self.kind = kind
        self.models = _MODELS[kind]

    def get_subject(self, subject_id: int, *, include_moderated: bool = False) -> Any | None:
        """Return the post or comment, hiding moderated ones unless asked.

        A comment counts as moderated while its parent post is moderated.
        """
        subject_model = self.models.subject
        stmt = select(subject_model).where(subject_model.id == subject_id)
        if not include_moderated:
            stmt = stmt.where(subject_model.is_moderated.is_(False))
            if self.kind is SubjectKind.COMMENT:
                stmt = stmt.join(Post, Comment.post_id == Post.id).where(
                    Post.is_moderated.is_(False)
                )
        return self.session.execute(stmt).scalars().first()

    def find_vote(self, subject_id: int, voter_id: str) -> Any | None:
        vote_model = self.models.vote
        stmt = select(vote_model).where(
            self.models.vote_subject_column == subject_id,
            vote_model.voter_id == voter_id,
        )
        return self.session.execute(stmt).scalars().first()

    def upsert_vote(
        self,
        subject_id: int,
        voter_id: str,
        vote_type: VoteType,
        existing: Any | None = None,
    ) -> Any:
        """Create the voter's record or flip the type of the existing one."""
        if existing is not None:
            existing.vote_type = vote_type.value
            self.session.flush()
            return existing

        vote_model = self.models.vote
        record = vote_model(voter_id=voter_id, vote_type=vote_type.value)
        setattr(record, self.models.vote_subject_column.key, subject_id)
        self.session.add(record)
        self.session.flush()
        return record

    def delete_vote(self, record: Any) -> None:
        self.session.delete(record)
        self.session.flush()

    def increment_counters(self, subject_id: int, upvote_delta: int, downvote_delta: int) -> None:
        """Atomically add the deltas to the subject's counters."""
        if upvote_delta == 0 and downvote_delta == 0:
            return
        subject_model = self.models.subject
        self.session.execute(
            update(subject_model)
            .where(subject_model.id == subject_id)
            .values(
                upvotes=subject_model.upvotes + upvote_delta,
                downvotes=subject_model.downvotes + downvote_delta,
            )
            .execution_options(synchronize_session=False)
        )

    def set_score(self, subject_id: int, score: float) -> None:
        subject_model = self.models.subject
        self.session.execute(
            update(subject_model)
            .where(subject_model.id == subject_id)
            .values(score=score)
            .execution_options(synchronize_session=False)
        )

    def count_votes(self, subject_id: int) -> tuple[int, int]:
        """Return ``(upvotes, downvotes)`` counted from live vote records."""
        vote_model = self.models.vote
        rows = self.session.execute(
            select(vote_model.vote_type, func.count())
            .where(self.models.vote_subject_column == subject_id)
            .group_by(vote_model.vote_type)
        ).all()
        counts = {vote_type: count for vote_type, count in rows}
        return counts.get(VoteType.UPVOTE.value, 0), counts.get(VoteType.DOWNVOTE.value, 0)

    def ledger_totals(self) -> dict[int, tuple[int, int]]:
        """Return live ``(upvotes, downvotes)`` per subject that has any votes."""
        vote_model = self.models.vote
        subject_column = self.models.vote_subject_column
        rows = self.session.execute(
            select(subject_column, vote_model.vote_type, func.count())
            .group_by(subject_column, vote_model.vote_type)
        ).all()
        totals: dict[int, tuple[int, int]] = {}
        for subject_id, vote_type, count in rows:
            up, down = totals.get(subject_id, (0, 0))
            if vote_type == VoteType.UPVOTE.value:
                up = count
            else:
                down = count
            totals[subject_id] = (up, down)
        return totals
