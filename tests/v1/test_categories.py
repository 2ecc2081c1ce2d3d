# tests/v1/test_categories.py
from __future__ import annotations

from fastapi.testclient import TestClient


def test_list_categories_sorted_by_title(client: TestClient, categories) -> None:
    response = client.get("/api/categories")
    assert response.status_code == 200
    assert [category["title"] for category in response.json()] == ["career", "health", "python"]


def test_only_admins_manage_categories(
    client: TestClient, auth_token, admin_auth_token, categories
) -> None:
    payload = {"title": "cooking", "description": "Kitchen questions"}

    assert client.post("/api/categories", json=payload, headers=auth_token).status_code == 403
    created = client.post("/api/categories", json=payload, headers=admin_auth_token)
    assert created.status_code == 201
    assert created.json()["title"] == "cooking"

    duplicate = client.post("/api/categories", json=payload, headers=admin_auth_token)
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"] == "Category with this title already exists"


def test_update_and_delete_category(
    client: TestClient, admin_auth_token, auth_token, categories
) -> None:
    category_id = categories["health"].id
    url = f"/api/categories/{category_id}"

    assert client.patch(url, json={"title": "wellbeing"}, headers=auth_token).status_code == 403
    assert client.patch(url, json={"title": "python"}, headers=admin_auth_token).status_code == 400
    assert client.patch(url, json={}, headers=admin_auth_token).status_code == 400

    renamed = client.patch(url, json={"title": "wellbeing"}, headers=admin_auth_token)
    assert renamed.status_code == 200
    assert client.get(url).json()["title"] == "wellbeing"

    assert client.delete(url, headers=admin_auth_token).status_code == 200
    assert client.get(url).status_code == 404


def test_deleting_category_keeps_posts(
    client: TestClient, make_post, test_user, admin_auth_token, categories
) -> None:
    post = make_post(test_user, categories=(categories["python"], categories["career"]))

    client.delete(f"/api/categories/{categories['python'].id}", headers=admin_auth_token)

    response = client.get(f"/api/posts/{post.id}")
    assert response.status_code == 200
    assert response.json()["categories"] == ["career"]


def test_category_posts(client: TestClient, make_post, test_user, categories) -> None:
    python = categories["python"]
    make_post(test_user, "Generators", categories=(python,))
    make_post(test_user, "Salary talks", categories=(categories["career"],))
    make_post(test_user, "Unpublished", categories=(python,), status="inactive")

    response = client.get(f"/api/categories/{python.id}/posts")

    assert response.status_code == 200
    assert [post["title"] for post in response.json()["posts"]] == ["Generators"]
    assert client.get("/api/categories/9999/posts").status_code == 404
