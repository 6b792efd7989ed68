# mypy: ignore-errors
# tests/test_db_session.py
"""Tests for the application engine helpers used outside request handling."""

import pytest
from sqlalchemy import func, select

from thought_dump.db.session import create_tables, drop_tables, session_scope
from thought_dump.models import Topic


@pytest.fixture()
def app_tables():
    create_tables()
    try:
        yield
    finally:
        drop_tables()


def _topic_count() -> int:
    with session_scope() as db:
        return db.execute(select(func.count()).select_from(Topic)).scalar_one()


def test_session_scope_commits(app_tables) -> None:
    with session_scope() as db:
        db.add(Topic(name="Committed", slug="committed"))
    assert _topic_count() == 1


def test_session_scope_rolls_back_on_error(app_tables) -> None:
    with pytest.raises(RuntimeError):
        with session_scope() as db:
            db.add(Topic(name="Discarded", slug="discarded"))
            db.flush()
            raise RuntimeError("boom")
    assert _topic_count() == 0
