"""Data access helpers for working with posts and comments."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, or_, select
from sqlalchemy.orm import Session

from thought_dump.models import Comment, Post, Topic

__all__ = ["CommentRepository", "Page", "PostRepository", "order_clause"]

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    """One slice of an offset-paginated query."""

    items: list[T]
    total: int
    page: int
    limit: int

    @property
    def has_more(self) -> bool:
        return (self.page - 1) * self.limit + self.limit < self.total


def order_clause(model: Any, sort_by: str) -> tuple[Any, ...]:
    """Return ORDER BY columns for ``newest``, ``oldest`` or ``trending``.

    ``id`` breaks ties so paging stays deterministic.
    """
    if sort_by == "trending":
        return (model.score.desc(), model.created_at.desc(), model.id.desc())
    if sort_by == "oldest":
        return (model.created_at.asc(), model.id.asc())
    return (model.created_at.desc(), model.id.desc())


def _paginate(session: Session, stmt: Select[Any], page: int, limit: int) -> tuple[list[Any], int]:
    total = session.execute(select(func.count()).select_from(stmt.order_by(None).subquery())).scalar_one()
    rows = session.execute(stmt.offset((page - 1) * limit).limit(limit)).unique().scalars().all()
    return list(rows), int(total)


class PostRepository:
    """Thin wrapper around database access for post entities."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, post_id: int, *, include_moderated: bool = False) -> Post | None:
        """Return a post by identifier."""
        stmt = select(Post).where(Post.id == post_id)
        if not include_moderated:
            stmt = stmt.where(Post.is_moderated.is_(False))
        return self.session.execute(stmt).unique().scalars().first()

    def list_page(
        self,
        *,
        page: int,
        limit: int,
        sort_by: str = "newest",
        topic_id: int | None = None,
        search: str | None = None,
        include_moderated: bool = False,
    ) -> Page[Post]:
        """Return one page of posts with optional topic and text filters."""
        stmt = select(Post)
        if not include_moderated:
            stmt = stmt.where(Post.is_moderated.is_(False))
        if topic_id is not None:
            stmt = stmt.where(Post.topic_id == topic_id)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.join(Topic, Topic.id == Post.topic_id).where(
                or_(
                    Post.content.ilike(pattern),
                    Post.author_nickname.ilike(pattern),
                    Topic.name.ilike(pattern),
                )
            )
        stmt = stmt.order_by(*order_clause(Post, sort_by))
        items, total = _paginate(self.session, stmt, page, limit)
        return Page(items=items, total=total, page=page, limit=limit)

    def create(
        self,
        *,
        content: str,
        topic: Topic,
        author_nickname: str | None,
    ) -> Post:
        """Insert a new post and bump the topic's post counter."""
        post = Post(
            content=content,
            topic_id=topic.id,
            author_nickname=author_nickname or "Anonymous",
        )
        self.session.add(post)
        topic.post_count = Topic.post_count + 1
        self.session.flush()
        self.session.refresh(post)
        self.session.refresh(topic)
        return post


class CommentRepository:
    """Database access for comments under a post."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, comment_id: int) -> Comment | None:
        return self.session.get(Comment, comment_id)

    def list_page(
        self,
        *,
        post_id: int,
        page: int,
        limit: int,
        sort_by: str = "newest",
    ) -> Page[Comment]:
        stmt = (
            select(Comment)
            .where(Comment.post_id == post_id, Comment.is_moderated.is_(False))
            .order_by(*order_clause(Comment, sort_by))
        )
        items, total = _paginate(self.session, stmt, page, limit)
        return Page(items=items, total=total, page=page, limit=limit)

    def create(
        self,
        *,
        post: Post,
        content: str,
        author_nickname: str | None,
        parent_id: int | None,
    ) -> Comment:
        """Insert a comment and bump the post's comment counter."""
        comment = Comment(
            post_id=post.id,
            parent_id=parent_id,
            content=content,
            author_nickname=author_nickname or "Anonymous",
        )
        self.session.add(comment)
        post.comment_count = Post.comment_count + 1
        self.session.flush()
        self.session.refresh(comment)
        self.session.refresh(post)
        return comment
