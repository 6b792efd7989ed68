"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .comments import router as comments_router
from .posts import router as posts_router
from .search import router as search_router
from .topics import router as topics_router

__all__ = [
    "admin_router",
    "comments_router",
    "posts_router",
    "search_router",
    "topics_router",
]
