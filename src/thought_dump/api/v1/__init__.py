"""Version 1 API endpoints."""

from .endpoints import (
    admin_router,
    comments_router,
    posts_router,
    search_router,
    topics_router,
)

__all__ = [
    "admin_router",
    "comments_router",
    "posts_router",
    "search_router",
    "topics_router",
]
