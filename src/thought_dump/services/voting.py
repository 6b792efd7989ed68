"""Casting votes on posts and comments."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from thought_dump.core.errors import ConsistencyError, NotFoundError
from thought_dump.db.time import utcnow
from thought_dump.repositories.vote_repo import SubjectKind, VoteRepository
from thought_dump.services.ledger import (
    LedgerTransition,
    RecordAction,
    VoteType,
    parse_vote_type,
    transition,
)
from thought_dump.services.scoring import calculate_score

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {
    SubjectKind.POST: ("Post not found", "POST_NOT_FOUND"),
    SubjectKind.COMMENT: ("Comment not found", "COMMENT_NOT_FOUND"),
}


@dataclass(frozen=True)
class VoteOutcome:
    """Subject totals after a vote, plus the voter's resulting vote."""

    upvotes: int
    downvotes: int
    score: float
    vote: VoteType | None
    transition: LedgerTransition


class VoteService:
    """Applies one vote as a single logical unit.

    Steps: check the subject exists, read the voter's record, compute the
    ledger transition, write the record change, increment counters in SQL,
    then recompute and store the score. Nothing is committed here; the
    caller commits once so that a failure at any step rolls back all of it.
    """

    def __init__(self, session: Session, clock: Callable[[], datetime] = utcnow) -> None:
        self.session = session
        self.clock = clock

    def cast_vote(
        self,
        kind: SubjectKind,
        subject_id: int,
        voter_id: str,
        requested: VoteType | str,
    ) -> VoteOutcome:
        """Cast, flip or withdraw ``voter_id``'s vote on a subject.

        Raises:
            ValidationError: If ``requested`` is not a known vote type.
            NotFoundError: If the subject does not exist or is moderated.
            ConsistencyError: If applying the deltas would leave a negative counter.
        """
        vote_type = parse_vote_type(requested)
        repo = VoteRepository(self.session, kind)

        subject = repo.get_subject(subject_id)
        if subject is None:
            message, code = _NOT_FOUND_CODES[kind]
            raise NotFoundError(message, code=code)

        existing = repo.find_vote(subject_id, voter_id)
        previous = VoteType(existing.vote_type) if existing is not None else None
        change = transition(previous, vote_type)

        if change.action is RecordAction.DELETE:
            repo.delete_vote(existing)
        else:
            repo.upsert_vote(subject_id, voter_id, vote_type, existing)

        repo.increment_counters(subject_id, change.upvote_delta, change.downvote_delta)
        self.session.refresh(subject)
        if subject.upvotes < 0 or subject.downvotes < 0:
            raise ConsistencyError(
                f"Vote counters went negative on {kind.value} {subject_id}",
                details={"upvotes": subject.upvotes, "downvotes": subject.downvotes},
            )

        score = calculate_score(subject.upvotes, subject.downvotes, subject.created_at, self.clock())
        repo.set_score(subject_id, score)
        self.session.refresh(subject)

        logger.debug(
            "%s %s vote on %s %d -> up=%d down=%d score=%.6f",
            change.action.value,
            vote_type.value,
            kind.value,
            subject_id,
            subject.upvotes,
            subject.downvotes,
            score,
        )
        return VoteOutcome(
            upvotes=subject.upvotes,
            downvotes=subject.downvotes,
            score=score,
            vote=change.current,
            transition=change,
        )

    def current_vote(self, kind: SubjectKind, subject_id: int, voter_id: str) -> VoteType | None:
        """Return the voter's live vote on a subject, if any."""
        record = VoteRepository(self.session, kind).find_vote(subject_id, voter_id)
        return VoteType(record.vote_type) if record is not None else None
