"""Consistency audit between vote counters and the vote ledger."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from thought_dump.repositories.vote_repo import SubjectKind, VoteRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CountMismatch:
    """A subject whose stored counters disagree with its live vote records."""

    subject_kind: SubjectKind
    subject_id: int
    upvotes: int
    downvotes: int
    ledger_upvotes: int
    ledger_downvotes: int


def audit_vote_counts(db: Session, kind: SubjectKind) -> list[CountMismatch]:
    """Compare every subject's counters with its live vote records.

    Mismatches are logged and returned, never corrected: fixing them needs a
    decision about which side is authoritative.
    """
    repo = VoteRepository(db, kind)
    subject_model = repo.models.subject
    ledger = repo.ledger_totals()

    rows = db.execute(
        select(subject_model.id, subject_model.upvotes, subject_model.downvotes)
    ).all()

    mismatches: list[CountMismatch] = []
    for subject_id, upvotes, downvotes in rows:
        ledger_up, ledger_down = ledger.get(subject_id, (0, 0))
        if (upvotes, downvotes) == (ledger_up, ledger_down):
            continue
        mismatch = CountMismatch(
            subject_kind=kind,
            subject_id=subject_id,
            upvotes=upvotes,
            downvotes=downvotes,
            ledger_upvotes=ledger_up,
            ledger_downvotes=ledger_down,
        )
        logger.error(
            "Vote counter mismatch on %s %d: counters=(%d, %d) ledger=(%d, %d)",
            kind.value,
            subject_id,
            upvotes,
            downvotes,
            ledger_up,
            ledger_down,
        )
        mismatches.append(mismatch)
    return mismatches


def audit_all(db: Session) -> list[CountMismatch]:
    """Audit posts and comments."""
    mismatches: list[CountMismatch] = []
    for kind in SubjectKind:
        mismatches.extend(audit_vote_counts(db, kind))
    if not mismatches:
        logger.info("Vote counter audit found no mismatches")
    return mismatches
