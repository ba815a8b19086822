import os
import random

# Settings are read at import time, so configure the environment first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("USE_MOCK_AI", "true")
os.environ.setdefault("ENVIRONMENT", "testing")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from chatflow.api.dependencies import get_chat_provider, get_db
from chatflow.core.database import Base, enable_sqlite_foreign_keys
from chatflow.main import app
from chatflow.services.auth_service import register_user
from chatflow.services.mock_provider import MockChatProvider


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def provider():
    return MockChatProvider(rng=random.Random(0))


@pytest.fixture
def api(session_factory, provider):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_chat_provider] = lambda: provider
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def make_client(api):
    """Build a logged-in client for a freshly registered user."""

    def _make(email="alice@example.com", password="correct-horse", name="Alice"):
        client = TestClient(api)
        resp = client.post("/api/register", json={"name": name, "email": email, "password": password})
        assert resp.status_code == 201, resp.text
        resp = client.post("/api/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return client

    return _make


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def anon_client(api):
    return TestClient(api)


@pytest.fixture
def user(db):
    return register_user(db, name="Alice", email="alice@example.com", password="correct-horse")


@pytest.fixture
def other_user(db):
    return register_user(db, name="Bob", email="bob@example.com", password="battery-staple")
