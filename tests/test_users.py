import jwt
import pytest

from adventures.config import settings
from adventures.models import Follow, User
from adventures.schemas import UserCreate, UserLogin
from adventures.services import user_service
from adventures.utils.exceptions import AuthError, ConflictError, NotFoundError

from conftest import register


def test_register_returns_summary_without_password(client):
    response = register(client)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "User registered successfully: ana"
    assert body["user"]["username"] == "ana"
    assert body["user"]["email"] == "ana@mail.com"
    assert "password" not in body["user"]
    assert "token" not in body


def test_register_duplicate_email_is_rejected(client):
    register(client)
    response = register(client, username="other")

    assert response.status_code == 400
    assert response.json()["message"].startswith("Registration error:")
    assert "email" in response.json()["message"]


def test_register_duplicate_username_is_rejected(client):
    register(client)
    response = register(client, email="other@mail.com")

    assert response.status_code == 400
    assert "username" in response.json()["message"]


def test_login_success(client):
    register(client)
    response = client.post(
        "/api/users/login",
        json={"email": "ana@mail.com", "password": "secret1"},
    )

    assert response.status_code == 200
    assert response.json()["message"] == "Login successful for: ana"
    assert response.json()["user"]["username"] == "ana"


def test_login_wrong_password(client):
    register(client)
    response = client.post(
        "/api/users/login",
        json={"email": "ana@mail.com", "password": "wrong"},
    )

    assert response.status_code == 400
    assert response.json() == {"message": "Login error: Incorrect password"}


def test_login_unknown_email(client):
    response = client.post(
        "/api/users/login",
        json={"email": "nobody@mail.com", "password": "secret1"},
    )

    assert response.status_code == 400
    assert response.json() == {"message": "Login error: User not found"}


def test_register_malformed_email_is_400_message(client):
    response = register(client, email="not-an-email")

    assert response.status_code == 400
    body = response.json()
    assert set(body) == {"message"}
    assert body["message"].startswith("Validation error: email")


def test_login_malformed_email_is_400_message(client):
    response = client.post(
        "/api/users/login",
        json={"email": "not-an-email", "password": "secret1"},
    )

    assert response.status_code == 400
    assert response.json()["message"].startswith("Validation error:")


def test_follow_is_idempotent(client):
    ana = register(client).json()["user"]["id"]
    bob = register(client, username="bob", email="bob@mail.com").json()["user"]["id"]

    first = client.post(f"/api/users/{ana}/follow/{bob}")
    second = client.post(f"/api/users/{ana}/follow/{bob}")

    assert first.status_code == 200
    assert first.text == "Now following bob"
    assert second.status_code == 200
    assert client.get(f"/api/users/{ana}/following").json() == [bob]
    # подписка направленная
    assert client.get(f"/api/users/{bob}/following").json() == []


def test_follow_unknown_user(client):
    ana = register(client).json()["user"]["id"]

    response = client.post(f"/api/users/{ana}/follow/999")

    assert response.status_code == 400
    assert response.text.startswith("Error following user:")


def test_following_of_unknown_user_is_404(client):
    response = client.get("/api/users/42/following")

    assert response.status_code == 404
    assert response.json()["code"] == "not_found"


def test_list_users(client):
    register(client)
    register(client, username="bob", email="bob@mail.com")

    response = client.get("/api/users")

    assert response.status_code == 200
    users = response.json()
    assert {u["username"] for u in users} == {"ana", "bob"}
    assert all(set(u) == {"id", "username", "email"} for u in users)


# ====================
# Сервисный слой
# ====================

@pytest.mark.anyio
async def test_service_errors(db):
    await user_service.register_user(
        db, UserCreate(username="ana", email="ana@mail.com", password="pw")
    )

    with pytest.raises(ConflictError):
        await user_service.register_user(
            db, UserCreate(username="ana2", email="ana@mail.com", password="pw")
        )
    with pytest.raises(ConflictError):
        await user_service.register_user(
            db, UserCreate(username="ana", email="ana2@mail.com", password="pw")
        )
    with pytest.raises(AuthError):
        await user_service.login_user(db, UserLogin(email="ana@mail.com", password="nope"))
    with pytest.raises(NotFoundError):
        await user_service.login_user(db, UserLogin(email="x@mail.com", password="pw"))
    with pytest.raises(NotFoundError):
        await user_service.follow_user(db, 1, 2)


@pytest.mark.anyio
async def test_follow_twice_stores_single_row(db):
    a = await user_service.register_user(
        db, UserCreate(username="a", email="a@mail.com", password="pw")
    )
    b = await user_service.register_user(
        db, UserCreate(username="b", email="b@mail.com", password="pw")
    )

    await user_service.follow_user(db, a.user.id, b.user.id)
    await user_service.follow_user(db, a.user.id, b.user.id)

    assert db.query(Follow).count() == 1
    assert await user_service.get_following_ids(db, a.user.id) == [b.user.id]


@pytest.mark.anyio
async def test_password_stored_as_is_by_default(db):
    await user_service.register_user(
        db, UserCreate(username="ana", email="ana@mail.com", password="secret1")
    )

    assert db.query(User).one().password == "secret1"


@pytest.mark.anyio
async def test_password_hashing_when_enabled(db, monkeypatch):
    monkeypatch.setattr(settings, "PASSWORD_HASHING_ENABLED", True)

    await user_service.register_user(
        db, UserCreate(username="ana", email="ana@mail.com", password="secret1")
    )

    assert db.query(User).one().password != "secret1"
    result = await user_service.login_user(
        db, UserLogin(email="ana@mail.com", password="secret1")
    )
    assert result.user.username == "ana"


@pytest.mark.anyio
async def test_token_issued_when_jwt_enabled(db, monkeypatch):
    monkeypatch.setattr(settings, "JWT_ENABLED", True)

    result = await user_service.register_user(
        db, UserCreate(username="ana", email="ana@mail.com", password="secret1")
    )

    payload = jwt.decode(result.token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert payload["sub"] == str(result.user.id)
    assert payload["token_type"] == "access"
