# mypy: ignore-errors
# tests/v1/test_admin.py
"""Tests for admin sessions, moderation, statistics and audits."""

from datetime import UTC, datetime, timedelta

from fastapi import status
from jose import jwt
from sqlalchemy import update

from thought_dump.core.settings import settings
from thought_dump.models import Post


def test_create_session_with_valid_key(client) -> None:
    response = client.post("/api/v1/admin/session", json={"admin_key": settings.admin_secret})
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["expires_in"] == settings.admin_token_expire_minutes * 60

    stats = client.get(
        "/api/v1/admin/stats",
        headers={"Authorization": f"Bearer {data['access_token']}"},
    )
    assert stats.status_code == status.HTTP_200_OK


def test_create_session_with_wrong_key(client) -> None:
    response = client.post("/api/v1/admin/session", json={"admin_key": "guess"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"message": "Unauthorized", "code": "UNAUTHORIZED"}


def test_session_disabled_without_admin_secret(client, monkeypatch) -> None:
    monkeypatch.setattr(settings, "admin_secret", None)
    response = client.post("/api/v1/admin/session", json={"admin_key": "anything"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_admin_routes_require_token(client) -> None:
    assert client.get("/api/v1/admin/stats").status_code == status.HTTP_401_UNAUTHORIZED
    response = client.get("/api/v1/admin/stats", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["code"] == "UNAUTHORIZED"


def test_token_without_admin_role_is_rejected(client) -> None:
    token = jwt.encode(
        {"sub": "someone", "exp": datetime.now(UTC) + timedelta(minutes=5)},
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    response = client.get("/api/v1/admin/stats", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_expired_token_is_rejected(client) -> None:
    token = jwt.encode(
        {"sub": "admin", "role": "admin", "exp": datetime.now(UTC) - timedelta(minutes=1)},
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    response = client.get("/api/v1/admin/stats", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_list_posts_includes_moderated_on_request(
    client, admin_headers, make_post, test_topic
) -> None:
    make_post(test_topic, "visible")
    make_post(test_topic, "hidden", is_moderated=True)

    default = client.get("/api/v1/admin/posts", headers=admin_headers).json()
    assert default["total"] == 1

    everything = client.get(
        "/api/v1/admin/posts",
        params={"include_moderated": True},
        headers=admin_headers,
    ).json()
    assert everything["total"] == 2


def test_moderate_post_remove_and_approve(
    client, db_session, admin_headers, test_post, test_topic
) -> None:
    url = f"/api/v1/admin/posts/{test_post.id}/moderate"

    response = client.post(url, json={"action": "remove"}, headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["is_moderated"] is True
    assert data["moderated_by"] == "admin"
    assert data["moderated_at"] is not None
    db_session.refresh(test_topic)
    assert test_topic.post_count == 0
    assert client.get(f"/api/v1/posts/{test_post.id}").status_code == status.HTTP_404_NOT_FOUND

    # Removing twice must not decrement again.
    client.post(url, json={"action": "remove"}, headers=admin_headers)
    db_session.refresh(test_topic)
    assert test_topic.post_count == 0

    response = client.post(url, json={"action": "approve"}, headers=admin_headers)
    assert response.json()["is_moderated"] is False
    db_session.refresh(test_topic)
    assert test_topic.post_count == 1


def test_moderate_invalid_action(client, admin_headers, test_post) -> None:
    response = client.post(
        f"/api/v1/admin/posts/{test_post.id}/moderate",
        json={"action": "delete"},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_moderate_missing_post(client, admin_headers) -> None:
    response = client.post(
        "/api/v1/admin/posts/999/moderate", json={"action": "remove"}, headers=admin_headers
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_stats(client, admin_headers, make_topic, make_post, test_topic) -> None:
    make_topic("Second")
    post = make_post(test_topic, "one")
    make_post(test_topic, "two", is_moderated=True)
    client.post(f"/api/v1/posts/{post.id}/vote", json={"type": "upvote"})

    data = client.get("/api/v1/admin/stats", headers=admin_headers).json()
    assert data == {
        "total_posts": 2,
        "total_topics": 2,
        "total_votes": 1,
        "moderated_posts": 1,
        "recent_posts": 2,
    }


def test_toggle_topic(client, admin_headers, test_topic) -> None:
    url = f"/api/v1/admin/topics/{test_topic.id}/toggle"
    assert client.post(url, headers=admin_headers).json()["is_active"] is False
    assert client.get("/api/v1/topics/").json()["topics"] == []
    assert client.post(url, headers=admin_headers).json()["is_active"] is True


def test_audit_reports_drift(client, db_session, admin_headers, test_post) -> None:
    client.post(f"/api/v1/posts/{test_post.id}/vote", json={"type": "upvote"})
    clean = client.get("/api/v1/admin/audit", headers=admin_headers).json()
    assert clean == {"consistent": True, "mismatches": []}

    db_session.execute(update(Post).where(Post.id == test_post.id).values(downvotes=3))
    report = client.get("/api/v1/admin/audit", headers=admin_headers).json()
    assert report["consistent"] is False
    assert report["mismatches"] == [
        {
            "subject_kind": "post",
            "subject_id": test_post.id,
            "upvotes": 1,
            "downvotes": 3,
            "ledger_upvotes": 1,
            "ledger_downvotes": 0,
        }
    ]
