import os

# Окружение для тестов задается до импорта приложения
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BROKER_URL"] = "memory://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["CREATE_TABLES"] = "false"
os.environ.pop("REDIS_URL", None)

import pytest
from fastapi.testclient import TestClient
from kombu import Connection
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from adventures.main import app
from adventures.models import Base
from adventures.services.events import publisher
from adventures.utils.database import get_db

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def drain_post_created() -> list[dict]:
    """Забрать все сообщения из очереди post.created (memory-транспорт)"""
    payloads = []
    with Connection("memory://") as conn:
        with conn.SimpleQueue(publisher.post_created_queue, no_ack=True) as queue:
            while True:
                try:
                    message = queue.get(block=False)
                except queue.Empty:
                    break
                payloads.append(message.payload)
    return payloads


@pytest.fixture
def post_created_messages():
    drain_post_created()
    return drain_post_created


def make_post(client, **overrides) -> dict:
    body = {
        "title": "Hike",
        "location": "Acapulco",
        "userId": 1,
        "userName": "ana",
    }
    body.update(overrides)
    response = client.post("/api/posts", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def register(client, username="ana", email="ana@mail.com", password="secret1"):
    return client.post(
        "/api/users/register",
        json={"username": username, "email": email, "password": password},
    )
