"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .admin import AdminLogin, AdminSession, ModerationAction, PlatformStats
from .comment import CommentCreate, CommentPage, CommentResponse
from .common import ErrorResponse, PageMeta
from .post import PostCreate, PostPage, PostResponse
from .search import SearchResponse, SuggestionResponse
from .topic import TopicCreate, TopicListResponse, TopicResponse
from .vote import VoteCreate, VoteResult

__all__ = [
    "AdminLogin", "AdminSession", "ModerationAction", "PlatformStats",
    "CommentCreate", "CommentPage", "CommentResponse",
    "ErrorResponse", "PageMeta",
    "PostCreate", "PostPage", "PostResponse",
    "SearchResponse", "SuggestionResponse",
    "TopicCreate", "TopicListResponse", "TopicResponse",
    "VoteCreate", "VoteResult",
]
