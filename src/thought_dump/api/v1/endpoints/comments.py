"""Comment vote endpoint for the Thought Dump API."""

from fastapi import APIRouter

from thought_dump.repositories.vote_repo import SubjectKind
from thought_dump.schemas.vote import VoteCreate, VoteResult
from thought_dump.services.voting import VoteService

from ..dependencies import SessionDep, VoterIdDep

router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("/{comment_id}/vote", response_model=VoteResult)
async def vote_on_comment(
    comment_id: int,
    vote_data: VoteCreate,
    voter_id: VoterIdDep,
    db: SessionDep,
) -> VoteResult:
    """Cast, flip or withdraw the requester's vote on a comment."""
    outcome = VoteService(db).cast_vote(SubjectKind.COMMENT, comment_id, voter_id, vote_data.type)
    db.commit()
    return VoteResult(upvotes=outcome.upvotes, downvotes=outcome.downvotes, score=outcome.score)
