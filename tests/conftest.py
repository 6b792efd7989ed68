# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from datetime import UTC, datetime
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ADMIN_SECRET", "test-admin-secret")
os.environ.setdefault("HASH_SECRET", "test-hash-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from thought_dump.core.security import create_admin_token
from thought_dump.db.session import Base
from thought_dump.db.session import get_db as app_get_session
from thought_dump.main import app as fastapi_app
from thought_dump.main import rate_limiter
from thought_dump.models import Comment, Post, Topic

TEST_DB_URL = "sqlite://"

_TOPIC_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Endpoints commit, so clear every table to keep tests independent.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture(autouse=True)
def reset_rate_limit() -> Iterator[None]:
    rate_limiter.reset()
    yield
    rate_limiter.reset()


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def fixed_now() -> datetime:
    """Fixed reference time for score assertions."""
    return datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


@pytest.fixture()
def admin_headers() -> dict[str, str]:
    """Authorization headers carrying a valid admin session token."""
    return {"Authorization": f"Bearer {create_admin_token()}"}


@pytest.fixture()
def make_topic(db_session: Session) -> Callable[..., Topic]:
    """Factory creating persisted topics with unique names."""

    def _make(name: str | None = None, description: str | None = None, **fields) -> Topic:
        number = next(_TOPIC_COUNTER)
        name = name or f"Topic {number}"
        topic = Topic(
            name=name,
            slug=fields.pop("slug", name.lower().replace(" ", "-")),
            description=description,
            **fields,
        )
        db_session.add(topic)
        db_session.flush()
        db_session.refresh(topic)
        return topic

    return _make


@pytest.fixture()
def make_post(db_session: Session) -> Callable[..., Post]:
    """Factory creating persisted posts; bumps the topic counter like the API does."""

    def _make(topic: Topic, content: str = "Test post content", **fields) -> Post:
        post = Post(content=content, topic_id=topic.id, **fields)
        db_session.add(post)
        if not fields.get("is_moderated", False):
            topic.post_count = Topic.post_count + 1
        db_session.flush()
        db_session.refresh(post)
        db_session.refresh(topic)
        return post

    return _make


@pytest.fixture()
def make_comment(db_session: Session) -> Callable[..., Comment]:
    def _make(post: Post, content: str = "Test comment", **fields) -> Comment:
        comment = Comment(post_id=post.id, content=content, **fields)
        db_session.add(comment)
        post.comment_count = Post.comment_count + 1
        db_session.flush()
        db_session.refresh(comment)
        db_session.refresh(post)
        return comment

    return _make


@pytest.fixture()
def test_topic(make_topic: Callable[..., Topic]) -> Topic:
    return make_topic("General Discussion", "Open discussion", slug="general-discussion")


@pytest.fixture()
def test_post(make_post: Callable[..., Post], test_topic: Topic) -> Post:
    return make_post(test_topic, "Welcome to the board")


@pytest.fixture()
def test_comment(make_comment: Callable[..., Comment], test_post: Post) -> Comment:
    return make_comment(test_post, "First!")
