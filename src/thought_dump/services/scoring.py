"""Trending score used to order posts and comments server-side."""

from __future__ import annotations

import math
from datetime import datetime

from thought_dump.db.time import as_utc, utcnow

# Hours added to the age so brand-new items do not divide by ~0.
AGE_OFFSET_HOURS = 2.0
# Super-linear decay: old items fall out of trending faster than they gain votes.
GRAVITY = 1.8

SECONDS_PER_HOUR = 3600.0


def hours_since(created_at: datetime, now: datetime | None = None) -> float:
    """Return the fractional age in hours, clamped at zero for future timestamps."""
    reference = as_utc(now) if now is not None else utcnow()
    age = (reference - as_utc(created_at)).total_seconds() / SECONDS_PER_HOUR
    return max(age, 0.0)


def calculate_score(
    upvotes: int,
    downvotes: int,
    created_at: datetime,
    now: datetime | None = None,
) -> float:
    """Compute the decay-weighted trending score for a subject.

    ``ratio`` rewards consensus, ``ln(total + 1)`` gives diminishing returns
    to vote volume, and the ``(hours + 2) ** 1.8`` denominator decays the
    score with age.

    Args:
        upvotes: Current upvote counter (>= 0).
        downvotes: Current downvote counter (>= 0).
        created_at: When the subject was created.
        now: Reference time; defaults to the current UTC time.

    Returns:
        ``0.0`` when there are no votes, otherwise a finite non-negative float.
    """
    total_votes = upvotes + downvotes
    if total_votes <= 0:
        return 0.0

    ratio = upvotes / total_votes
    age_hours = hours_since(created_at, now)
    return (ratio * math.log(total_votes + 1)) / math.pow(age_hours + AGE_OFFSET_HOURS, GRAVITY)
