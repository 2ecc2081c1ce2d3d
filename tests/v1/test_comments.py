# tests/v1/test_comments.py
"""Comment endpoint tests: replies, edits, locking and best answers."""

from __future__ import annotations

from fastapi.testclient import TestClient


def test_get_comment(client: TestClient, test_post, other_user, make_comment) -> None:
    comment = make_comment(other_user, post=test_post)

    response = client.get(f"/api/comments/{comment.id}")

    assert response.status_code == 200
    body = response.json()
    assert body["author_login"] == "bob"
    assert body["post_id"] == test_post.id
    assert body["parent_id"] is None
    assert body["is_best"] is False


def test_replies(client: TestClient, test_post, other_user, make_comment, auth_token) -> None:
    comment = make_comment(other_user, post=test_post)
    url = f"/api/comments/{comment.id}/comments"

    created = client.post(url, json={"content": "Agreed"}, headers=auth_token)

    assert created.status_code == 200
    reply = created.json()
    assert reply["parent_id"] == comment.id
    assert reply["post_id"] == test_post.id
    assert [item["id"] for item in client.get(url).json()] == [reply["id"]]


def test_reply_to_locked_comment(
    client: TestClient, test_post, other_user, make_comment, auth_token
) -> None:
    comment = make_comment(other_user, post=test_post, locked=True)

    response = client.post(
        f"/api/comments/{comment.id}/comments",
        json={"content": "Hello"},
        headers=auth_token,
    )

    assert response.status_code == 403
    assert response.json()["detail"] == "You cannot respond to this comment"


def test_update_comment_permissions(
    client: TestClient,
    test_post,
    other_user,
    make_comment,
    auth_token,
    other_auth_token,
    admin_auth_token,
) -> None:
    comment = make_comment(other_user, post=test_post)
    url = f"/api/comments/{comment.id}"

    assert client.patch(url, json={"content": "Hijack"}, headers=auth_token).status_code == 403
    response = client.patch(url, json={"content": "Admin"}, headers=admin_auth_token)
    assert response.status_code == 403
    response = client.patch(url, json={"status": "inactive"}, headers=other_auth_token)
    assert response.status_code == 403
    assert client.patch(url, json={}, headers=other_auth_token).status_code == 400

    edited = client.patch(url, json={"content": "Clarified"}, headers=other_auth_token)
    assert edited.status_code == 200
    assert edited.json()["content"] == "Clarified"

    moderated = client.patch(url, json={"status": "inactive"}, headers=admin_auth_token)
    assert moderated.status_code == 200
    assert moderated.json()["status"] == "inactive"


def test_lock_comment(
    client: TestClient,
    test_post,
    other_user,
    make_comment,
    other_auth_token,
    admin_auth_token,
) -> None:
    comment = make_comment(other_user, post=test_post)
    url = f"/api/comments/{comment.id}"

    assert client.patch(f"{url}/lock", headers=other_auth_token).status_code == 403
    assert client.patch(f"{url}/lock", headers=admin_auth_token).json()["locked"] is True
    assert client.patch(f"{url}/lock", headers=admin_auth_token).status_code == 403

    edit = client.patch(url, json={"content": "Late edit"}, headers=other_auth_token)
    assert edit.status_code == 403
    assert edit.json()["detail"] == "This comment is locked"
    assert client.post(f"{url}/like", headers=admin_auth_token).status_code == 403

    assert client.patch(f"{url}/unlock", headers=admin_auth_token).json()["locked"] is False


def test_comment_reactions(
    client: TestClient, db_session, test_post, other_user, make_comment, auth_token
) -> None:
    comment = make_comment(other_user, post=test_post)
    url = f"/api/comments/{comment.id}"

    assert client.post(f"{url}/dislike", headers=auth_token).status_code == 200
    assert client.post(f"{url}/dislike", headers=auth_token).status_code == 403
    db_session.refresh(other_user)
    assert other_user.rating == -1

    assert client.post(f"{url}/like", headers=auth_token).status_code == 200
    assert len(client.get(f"{url}/like").json()) == 1
    assert client.get(f"{url}/dislike").json() == []
    db_session.refresh(other_user)
    assert other_user.rating == 1


def test_delete_comment_removes_replies_and_settles(
    client: TestClient,
    db_session,
    test_post,
    test_user,
    other_user,
    make_comment,
    auth_token,
    other_auth_token,
) -> None:
    comment = make_comment(other_user, post=test_post)
    reply = make_comment(other_user, parent=comment)
    reply_id = reply.id
    client.post(f"/api/comments/{reply.id}/like", headers=auth_token)
    db_session.refresh(other_user)
    assert other_user.rating == 1

    assert client.delete(f"/api/comments/{comment.id}", headers=auth_token).status_code == 403
    response = client.delete(f"/api/comments/{comment.id}", headers=other_auth_token)

    assert response.status_code == 200
    assert client.get(f"/api/comments/{reply_id}").status_code == 404
    assert client.get(f"/api/posts/{test_post.id}/comments").json() == []
    db_session.refresh(other_user)
    assert other_user.rating == 0


def test_choose_best_comment(
    client: TestClient,
    test_post,
    other_user,
    make_user,
    make_comment,
    auth_token,
    other_auth_token,
    admin_auth_token,
) -> None:
    first = make_comment(other_user, post=test_post, content="First answer")
    second = make_comment(make_user("carol"), post=test_post, content="Second answer")
    base = f"/api/posts/{test_post.id}/comments"

    assert client.patch(f"{base}/{first.id}", headers=other_auth_token).status_code == 403
    assert client.patch(f"{base}/{first.id}", headers=admin_auth_token).status_code == 403

    chosen = client.patch(f"{base}/{first.id}", headers=auth_token)
    assert chosen.status_code == 200
    assert chosen.json()["is_best"] is True

    client.patch(f"{base}/{second.id}", headers=auth_token)
    flags = {item["id"]: item["is_best"] for item in client.get(base).json()}
    assert flags == {first.id: False, second.id: True}


def test_best_comment_must_belong_to_post(
    client: TestClient, test_user, make_post, make_comment, other_user, auth_token
) -> None:
    post = make_post(test_user, "First question")
    elsewhere = make_post(test_user, "Second question")
    comment = make_comment(other_user, post=elsewhere)

    response = client.patch(f"/api/posts/{post.id}/comments/{comment.id}", headers=auth_token)

    assert response.status_code == 404
    response = client.patch(f"/api/posts/{post.id}/comments/9999", headers=auth_token)
    assert response.status_code == 404
