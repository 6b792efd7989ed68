"""Repository layer wrapping SQLAlchemy queries."""

from .post_repo import CommentRepository, Page, PostRepository
from .vote_repo import SubjectKind, VoteRepository

__all__ = ["CommentRepository", "Page", "PostRepository", "SubjectKind", "VoteRepository"]
