"""SQLAlchemy models for the Thought Dump application."""

from .comment import Comment
from .post import Post
from .topic import Topic
from .vote import CommentVote, PostVote

__all__ = [
    "Comment",
    "Post",
    "Topic",
    "CommentVote", "PostVote",
]
