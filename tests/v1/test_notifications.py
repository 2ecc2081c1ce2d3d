# tests/v1/test_notifications.py
from __future__ import annotations

from fastapi.testclient import TestClient


def _subscribe(client: TestClient, post_id: int, headers: dict[str, str]) -> None:
    assert client.post(f"/api/posts/{post_id}/subscribe", headers=headers).status_code == 200


def test_comment_notifies_subscribers(
    client: TestClient, test_post, make_user, headers_for, other_auth_token
) -> None:
    _subscribe(client, test_post.id, other_auth_token)
    carol_headers = headers_for(make_user("carol"))

    comment = client.post(
        f"/api/posts/{test_post.id}/comments",
        json={"content": "Start with the official tutorial."},
        headers=carol_headers,
    ).json()

    inbox = client.get("/api/notifications", headers=other_auth_token)
    assert inbox.status_code == 200
    body = inbox.json()
    assert body["total"] == 1
    message = body["messages"][0]
    assert message["comment_id"] == comment["id"]
    assert message["post_id"] == test_post.id
    assert message["is_read"] is False
    assert "was commented on by carol" in message["message"]

    assert client.get("/api/notifications", headers=carol_headers).json()["total"] == 0


def test_replies_do_not_notify(
    client: TestClient, test_post, other_user, make_comment, auth_token, other_auth_token
) -> None:
    _subscribe(client, test_post.id, other_auth_token)
    comment = make_comment(other_user, post=test_post)

    client.post(
        f"/api/comments/{comment.id}/comments",
        json={"content": "A reply"},
        headers=auth_token,
    )

    assert client.get("/api/notifications", headers=other_auth_token).json()["total"] == 0


def test_notifications_are_paged_by_four(
    client: TestClient, test_post, auth_token, other_auth_token
) -> None:
    _subscribe(client, test_post.id, other_auth_token)
    for index in range(5):
        client.patch(
            f"/api/posts/{test_post.id}",
            json={"content": f"Revision {index}"},
            headers=auth_token,
        )

    first = client.get("/api/notifications", headers=other_auth_token).json()
    second = client.get("/api/notifications", params={"page": 2}, headers=other_auth_token).json()

    assert first["total"] == 5
    assert len(first["messages"]) == 4
    assert len(second["messages"]) == 1


def test_mark_as_read(
    client: TestClient, test_post, auth_token, other_auth_token
) -> None:
    _subscribe(client, test_post.id, other_auth_token)
    client.patch(f"/api/posts/{test_post.id}", json={"title": "New title"}, headers=auth_token)
    notification_id = client.get("/api/notifications", headers=other_auth_token).json()[
        "messages"
    ][0]["id"]
    url = f"/api/notifications/{notification_id}/read"

    assert client.patch(url, headers=auth_token).status_code == 404
    response = client.patch(url, headers=other_auth_token)
    assert response.status_code == 200
    assert response.json()["is_read"] is True
    assert response.json()["read_at"] is not None

    still_listed = client.get("/api/notifications", headers=other_auth_token).json()
    assert still_listed["total"] == 1


def test_notifications_require_authentication(client: TestClient) -> None:
    assert client.get("/api/notifications").status_code == 401
