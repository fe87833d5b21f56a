import pytest

from adventures.schemas import CommentCreate
from adventures.services import comment_service
from adventures.utils.exceptions import NotFoundError, ValidationError


def add_comment(client, post_id=1, content="Nice trip", user_id=2, user_name="bob"):
    response = client.post(
        "/api/comments",
        json={"content": content, "postId": post_id, "userId": user_id, "userName": user_name},
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_create_comment(client):
    comment = add_comment(client)

    assert comment["id"] > 0
    assert comment["content"] == "Nice trip"
    assert comment["postId"] == 1
    assert comment["userName"] == "bob"
    assert comment["createdAt"] is not None


def test_create_comment_does_not_check_post(client):
    comment = add_comment(client, post_id=12345)

    assert comment["postId"] == 12345


def test_create_comment_blank_content(client):
    response = client.post(
        "/api/comments",
        json={"content": "   ", "postId": 1, "userId": 2, "userName": "bob"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Comment content is required"


def test_list_comments_oldest_first(client):
    first = add_comment(client, content="first")
    add_comment(client, post_id=2, content="other post")
    second = add_comment(client, content="second")

    comments = client.get("/api/comments/post/1").json()

    assert [c["id"] for c in comments] == [first["id"], second["id"]]
    assert client.get("/api/comments", params={"postId": 1}).json() == comments


def test_count_comments(client):
    add_comment(client)
    add_comment(client)

    assert client.get("/api/comments/post/1/count").json() == {"postId": 1, "count": 2}
    assert client.get("/api/comments/post/2/count").json() == {"postId": 2, "count": 0}


def test_delete_comment(client):
    comment = add_comment(client)

    assert client.delete(f"/api/comments/{comment['id']}").status_code == 204
    assert client.get("/api/comments/post/1").json() == []


def test_delete_missing_comment(client):
    response = client.delete("/api/comments/999")

    assert response.status_code == 404
    assert response.json()["code"] == "not_found"


def test_delete_comments_for_post(client):
    add_comment(client)
    add_comment(client)
    kept = add_comment(client, post_id=2)

    assert client.delete("/api/comments/post/1").status_code == 204
    assert client.get("/api/comments/post/1").json() == []
    assert [c["id"] for c in client.get("/api/comments/post/2").json()] == [kept["id"]]


def test_delete_comments_for_post_without_comments(client):
    assert client.delete("/api/comments/post/1").status_code == 204


@pytest.mark.anyio
async def test_service(db):
    with pytest.raises(ValidationError):
        await comment_service.create_comment(
            db, CommentCreate(content="", post_id=1, user_id=1, user_name="ana")
        )
    with pytest.raises(NotFoundError):
        await comment_service.delete_comment(db, 1)

    assert await comment_service.delete_comments_for_post(db, 1) == 0

    await comment_service.create_comment(
        db, CommentCreate(content="hi", post_id=1, user_id=1, user_name="ana")
    )
    assert await comment_service.delete_comments_for_post(db, 1) == 1
