# mypy: ignore-errors
# tests/test_rate_limit.py
"""Tests for the per-address request limit."""

import pytest
from fastapi import status

from thought_dump.core.rate_limit import FixedWindowLimiter
from thought_dump.core.settings import settings
from thought_dump.main import rate_limiter


@pytest.fixture()
def low_limit(monkeypatch):
    monkeypatch.setattr(rate_limiter, "max_requests", 3)


def test_requests_over_limit_get_429(client, low_limit) -> None:
    for _ in range(3):
        response = client.get("/api/v1/topics/")
        assert response.status_code == status.HTTP_200_OK

    response = client.get("/api/v1/topics/")
    assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    assert response.json() == {
        "message": "Too many requests from this IP, please try again later.",
        "code": "RATE_LIMITED",
    }
    assert response.headers["X-RateLimit-Remaining"] == "0"
    assert int(response.headers["Retry-After"]) >= 1


def test_votes_count_against_limit(client, low_limit, db_session, test_post) -> None:
    for _ in range(3):
        client.post(f"/api/v1/posts/{test_post.id}/vote", json={"type": "upvote"})

    response = client.post(f"/api/v1/posts/{test_post.id}/vote", json={"type": "upvote"})
    assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS

    # Up, withdraw, up; the rejected fourth toggle never ran.
    db_session.refresh(test_post)
    assert (test_post.upvotes, test_post.downvotes) == (1, 0)


def test_remaining_header_counts_down(client) -> None:
    first = client.get("/api/v1/topics/")
    second = client.get("/api/v1/topics/")
    limit = int(first.headers["X-RateLimit-Limit"])
    assert limit == settings.rate_limit_max_requests
    assert int(first.headers["X-RateLimit-Remaining"]) == limit - 1
    assert int(second.headers["X-RateLimit-Remaining"]) == limit - 2


def test_health_is_not_limited(client, low_limit) -> None:
    for _ in range(5):
        assert client.get("/health").status_code == status.HTTP_200_OK


def test_limit_is_per_address(client, low_limit, monkeypatch) -> None:
    monkeypatch.setattr(settings, "trust_forwarded_for", True)
    for _ in range(3):
        client.get("/api/v1/topics/", headers={"X-Forwarded-For": "203.0.113.1"})

    blocked = client.get("/api/v1/topics/", headers={"X-Forwarded-For": "203.0.113.1"})
    other = client.get("/api/v1/topics/", headers={"X-Forwarded-For": "203.0.113.2"})
    assert blocked.status_code == status.HTTP_429_TOO_MANY_REQUESTS
    assert other.status_code == status.HTTP_200_OK


def test_window_rolls_over() -> None:
    now = [1000.0]
    limiter = FixedWindowLimiter(window_seconds=60, max_requests=2, clock=lambda: now[0])

    assert limiter.hit("a").allowed
    assert limiter.hit("a").allowed
    rejected = limiter.hit("a")
    assert not rejected.allowed
    assert rejected.retry_after == 20

    now[0] = 1020.0
    result = limiter.hit("a")
    assert result.allowed
    assert result.remaining == 1


def test_reset_clears_counts() -> None:
    limiter = FixedWindowLimiter(window_seconds=60, max_requests=1, clock=lambda: 0.0)
    limiter.hit("a")
    assert not limiter.hit("a").allowed
    limiter.reset()
    assert limiter.hit("a").allowed
