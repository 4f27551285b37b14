"""
Shared fixtures.

The app runs against mongomock-motor, so no MongoDB server is needed.
Sockets in unit tests are MagicMocks with ``send_text`` as an AsyncMock.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from socialnet.main import create_app
from socialnet.repositories.conversation_repository import ConversationRepository
from socialnet.repositories.message_repository import MessageRepository
from socialnet.repositories.user_repository import UserRepository
from socialnet.services.chat_service import ChatService
from socialnet.utils.delivery import DeliveryFanout
from socialnet.utils.presence import PresenceRegistry
from socialnet.utils.security import hash_password


@pytest.fixture
def db():
    return AsyncMongoMockClient()["socialnet_test"]


@pytest.fixture
def fake_socket():
    def _make():
        ws = MagicMock()
        ws.send_text = AsyncMock()
        return ws
    return _make


@pytest.fixture
def presence():
    return PresenceRegistry()


@pytest.fixture
def chat_service(db, presence):
    return ChatService(
        MessageRepository(db),
        ConversationRepository(db),
        UserRepository(db),
        DeliveryFanout(presence),
    )


@pytest.fixture
def make_user(db):
    """Insert a user straight into the store and return its id."""
    repo = UserRepository(db)

    async def _make(name: str) -> str:
        return await repo.create_user(
            full_name=name,
            email=f"{name.lower()}@example.com",
            hashed_password=hash_password("secret123"),
            profile_photo=f"https://img.example.com/{name.lower()}.png",
            bio="No Bio yet",
        )
    return _make


@pytest.fixture
def client(db):
    app = create_app(database=db)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def signup(client):
    """Register and log in through the API; returns (user_id, token, headers)."""
    def _signup(name: str):
        email = f"{name.lower()}@example.com"
        resp = client.post("/users/register", json={
            "full_name": name,
            "email": email,
            "password": "secret123",
            "confirm_password": "secret123",
        })
        assert resp.status_code == 201, resp.text
        resp = client.post("/users/login", json={"email": email, "password": "secret123"})
        assert resp.status_code == 200, resp.text
        body = resp.json()
        return body["id"], body["access_token"], {"Authorization": f"Bearer {body['access_token']}"}
    return _signup
