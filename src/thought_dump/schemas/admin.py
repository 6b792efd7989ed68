"""Admin-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class AdminLogin(BaseModel):
    """Admin key exchanged for a session token."""

    admin_key: str = Field(..., min_length=1)


class AdminSession(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token lifetime in seconds")


class ModerationAction(BaseModel):
    """Approve (restore) or remove (hide) a post."""

    action: Literal["approve", "remove"]


class PlatformStats(BaseModel):
    total_posts: int
    total_topics: int
    total_votes: int
    moderated_posts: int
    recent_posts: int


class CountMismatchResponse(BaseModel):
    subject_kind: str
    subject_id: int
    upvotes: int
    downvotes: int
    ledger_upvotes: int
    ledger_downvotes: int


class AuditResponse(BaseModel):
    consistent: bool
    mismatches: list[CountMismatchResponse]
