"""Vote-related Pydantic schemas."""

from pydantic import BaseModel, Field

from thought_dump.services.ledger import VoteType


class VoteCreate(BaseModel):
    """Schema for casting or toggling a vote."""

    type: VoteType = Field(..., description="'upvote' or 'downvote'")


class VoteResult(BaseModel):
    """Counters and trending score after a vote was applied."""

    upvotes: int
    downvotes: int
    score: float
