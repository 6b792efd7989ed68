"""Toggle-vote state machine.

A voter holds at most one live vote per subject. Repeating the same vote
withdraws it; voting the other way flips it in a single step, so the
subject is never counted twice for the same voter.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, StrEnum

from thought_dump.core.errors import ValidationError


class VoteType(StrEnum):
    """Direction of a vote as accepted on the wire and stored in the ledger."""

    UPVOTE = "upvote"
    DOWNVOTE = "downvote"


class VoteState(Enum):
    """Per (subject, voter) ledger state."""

    NO_VOTE = "no_vote"
    UPVOTED = "upvoted"
    DOWNVOTED = "downvoted"

    @classmethod
    def from_vote(cls, vote: VoteType | None) -> VoteState:
        if vote is None:
            return cls.NO_VOTE
        return cls.UPVOTED if vote is VoteType.UPVOTE else cls.DOWNVOTED


class RecordAction(StrEnum):
    """What the caller must do with the stored vote record."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class LedgerTransition:
    """Outcome of applying one requested vote to the current ledger state."""

    previous: VoteType | None
    current: VoteType | None
    upvote_delta: int
    downvote_delta: int

    @property
    def action(self) -> RecordAction:
        if self.current is None:
            return RecordAction.DELETE
        if self.previous is None:
            return RecordAction.CREATE
        return RecordAction.UPDATE

    @property
    def state(self) -> VoteState:
        return VoteState.from_vote(self.current)

    @property
    def net_delta(self) -> int:
        return self.upvote_delta - self.downvote_delta


def _contribution(vote: VoteType | None) -> tuple[int, int]:
    if vote is VoteType.UPVOTE:
        return 1, 0
    if vote is VoteType.DOWNVOTE:
        return 0, 1
    return 0, 0


def parse_vote_type(raw: object) -> VoteType:
    """Coerce ``raw`` into a :class:`VoteType`.

    Raises:
        ValidationError: If ``raw`` is not ``"upvote"`` or ``"downvote"``.
    """
    if isinstance(raw, VoteType):
        return raw
    try:
        return VoteType(str(raw))
    except ValueError as err:
        raise ValidationError(
            "Vote type must be 'upvote' or 'downvote'",
            details={"type": raw},
        ) from err


def transition(existing: VoteType | None, requested: VoteType) -> LedgerTransition:
    """Compute the new ledger state and counter deltas for a vote request.

    Args:
        existing: The voter's live vote on the subject, if any.
        requested: The vote being cast.

    Returns:
        The resulting record state and the deltas to apply to the subject's
        ``upvotes`` and ``downvotes`` counters.
    """
    current = None if existing is requested else requested

    old_up, old_down = _contribution(existing)
    new_up, new_down = _contribution(current)
    return LedgerTransition(
        previous=existing,
        current=current,
        upvote_delta=new_up - old_up,
        downvote_delta=new_down - old_down,
    )
