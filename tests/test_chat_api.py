# File: tests/test_chat_api.py

"""
Chat endpoint tests.

These use FastAPI's TestClient. To run:
    pytest -q
"""

from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from conftest import TestingSessionLocal, login, register

from chatapp.api.deps import get_db, get_response_generator
from chatapp.core.config import settings
from chatapp.main import app
from chatapp.models.message import Message, MessageRole
from chatapp.models.user import User
from chatapp.services.response_generator import StubResponseGenerator


def test_health_endpoint(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_chat_requires_session(client, message_count):
    resp = client.post("/api/chat", json={"message": "hello"})
    assert resp.status_code == 401
    assert "error" in resp.json()
    assert message_count() == 0


def test_chat_rejects_invalid_token_without_storing(client, message_count):
    resp = client.post(
        "/api/chat",
        json={"message": "hello"},
        headers={"Authorization": "Bearer forged"},
    )
    assert resp.status_code == 401
    assert message_count() == 0


def test_chat_rejects_empty_messages(logged_in_client, message_count):
    for body in ({"message": ""}, {"message": "   \n\t "}, {}):
        resp = logged_in_client.post("/api/chat", json=body)
        assert resp.status_code == 400
        assert "error" in resp.json()

    assert message_count() == 0


def test_chat_rejects_non_text_message(logged_in_client, message_count):
    resp = logged_in_client.post("/api/chat", json={"message": 42})
    assert resp.status_code == 400
    assert message_count() == 0


def test_chat_stores_user_then_assistant_message(logged_in_client):
    user_id = logged_in_client.get("/api/auth/session").json()["user"]["id"]

    resp = logged_in_client.post("/api/chat", json={"message": "  Hello there  "})
    assert resp.status_code == 200

    body = resp.json()
    assert body["response"] == settings.assistant_placeholder_reply

    user_msg = body["userMessage"]
    assistant_msg = body["assistantMessage"]
    assert user_msg["content"] == "Hello there"
    assert user_msg["role"] == "user"
    assert assistant_msg["content"] == body["response"]
    assert assistant_msg["role"] == "assistant"
    assert user_msg["userId"] == assistant_msg["userId"] == user_id
    assert user_msg["id"] < assistant_msg["id"]
    assert "createdAt" in user_msg

    with TestingSessionLocal() as session:
        rows = session.scalars(select(Message).order_by(Message.id)).all()
        assert [(m.role, m.user_id) for m in rows] == [
            (MessageRole.USER, user_id),
            (MessageRole.ASSISTANT, user_id),
        ]


def test_chat_messages_are_scoped_to_caller(client):
    register(client, email="bob@example.com", name="Bob")
    login(client, email="bob@example.com")
    client.post("/api/chat", json={"message": "from bob"})

    register(client)
    login(client)
    client.post("/api/chat", json={"message": "from alice"})

    history = client.get("/api/chat/history").json()["messages"]
    assert [m["content"] for m in history] == [
        "from alice",
        settings.assistant_placeholder_reply,
    ]


def test_chat_history_is_oldest_first_and_limited(logged_in_client):
    for text in ("one", "two", "three"):
        assert logged_in_client.post("/api/chat", json={"message": text}).status_code == 200

    history = logged_in_client.get("/api/chat/history").json()["messages"]
    assert [m["role"] for m in history] == ["user", "assistant"] * 3
    assert [m["content"] for m in history if m["role"] == "user"] == ["one", "two", "three"]

    recent = logged_in_client.get("/api/chat/history", params={"limit": 2}).json()["messages"]
    assert [m["content"] for m in recent] == ["three", settings.assistant_placeholder_reply]


def test_chat_history_requires_session(client):
    assert client.get("/api/chat/history").status_code == 401


def test_chat_for_deleted_user_is_not_found(logged_in_client, message_count):
    with TestingSessionLocal() as session:
        session.delete(session.scalars(select(User)).one())
        session.commit()

    resp = logged_in_client.post("/api/chat", json={"message": "anyone there?"})
    assert resp.status_code == 404
    assert message_count() == 0


def test_chat_uses_injected_response_generator(logged_in_client):
    app.dependency_overrides[get_response_generator] = lambda: StubResponseGenerator("pong")

    resp = logged_in_client.post("/api/chat", json={"message": "ping"})
    assert resp.status_code == 200
    assert resp.json()["response"] == "pong"
    assert resp.json()["assistantMessage"]["content"] == "pong"


class ExplodingGenerator:
    def generate(self, content, history):
        raise RuntimeError("model backend down")


def test_chat_generator_failure_is_500_and_stores_nothing(logged_in_client, message_count):
    app.dependency_overrides[get_response_generator] = ExplodingGenerator

    resp = logged_in_client.post("/api/chat", json={"message": "hello"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error"}
    assert "model backend down" not in resp.text
    assert message_count() == 0


def test_chat_checks_session_before_reading_body(client, message_count):
    for body in (b"{not json", b"", b'{"message": 42}'):
        resp = client.post(
            "/api/chat",
            content=body,
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 401
        assert "error" in resp.json()

    assert message_count() == 0


def test_chat_rejects_malformed_json_once_authenticated(logged_in_client, message_count):
    resp = logged_in_client.post(
        "/api/chat",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert "error" in resp.json()
    assert message_count() == 0


class BrokenSession:
    """Stands in for a session whose database connection has gone away."""

    def _fail(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    get = _fail
    scalars = _fail

    def close(self):
        pass


def test_database_failure_in_dependencies_is_json_500(client):
    register(client)
    token = login(client).json()["accessToken"]
    client.cookies.clear()

    def broken_db():
        yield BrokenSession()

    app.dependency_overrides[get_db] = broken_db
    auth = {"Authorization": f"Bearer {token}"}

    with TestClient(app, raise_server_exceptions=False) as failing_client:
        responses = [
            failing_client.post("/api/chat", json={"message": "hello"}, headers=auth),
            failing_client.get("/api/chat/history", headers=auth),
            failing_client.get("/api/auth/session", headers=auth),
        ]

    for resp in responses:
        assert resp.status_code == 500
        assert resp.headers["content-type"].startswith("application/json")
        assert resp.json() == {"error": "Internal server error"}
        assert "connection refused" not in resp.text
