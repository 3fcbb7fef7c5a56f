# File: tests/conftest.py

"""
Shared fixtures: every test gets a fresh in-memory SQLite schema and a
TestClient whose get_db dependency points at it.
"""

import os

# must be in place before chatapp.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from chatapp.api.deps import get_db
from chatapp.db.init_db import init_db
from chatapp.db.session import build_engine
from chatapp.main import app
from chatapp.models.base import Base
from chatapp.models.message import Message

engine = build_engine("sqlite://", poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def schema():
    init_db(engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def message_count():
    def _count() -> int:
        with TestingSessionLocal() as session:
            return session.scalar(select(func.count(Message.id)))

    return _count


def register(client, email="alice@example.com", password="s3cret-pass", name="Alice"):
    return client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
    )


def login(client, email="alice@example.com", password="s3cret-pass"):
    return client.post("/api/auth/login", json={"email": email, "password": password})


@pytest.fixture
def logged_in_client(client):
    assert register(client).status_code == 200
    assert login(client).status_code == 200
    return client
