from fastapi.testclient import TestClient

from adventures.main import post_app, user_app
from adventures.schemas import Page


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_services_expose_only_their_routes():
    posts = TestClient(post_app)
    users = TestClient(user_app)

    assert posts.get("/health").status_code == 200
    assert users.get("/health").status_code == 200
    assert posts.get("/api/users").status_code == 404
    assert users.get("/api/posts/1").status_code == 404


def test_unknown_route_uses_error_format(client):
    body = client.get("/api/nothing").json()

    assert body["code"] == "http_error"
    assert body["path"] == "/api/nothing"
    assert "timestamp" in body


def test_page_build():
    page = Page[int].build([1, 2], page=0, size=2, total=5)

    assert page.total_pages == 3
    assert page.first is True
    assert page.last is False
    assert page.number_of_elements == 2


def test_empty_page():
    page = Page[int].build([], page=0, size=10, total=0)

    assert page.empty is True
    assert page.last is True
    assert page.total_pages == 0
