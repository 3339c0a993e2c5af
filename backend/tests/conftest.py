import pytest
from fastapi.testclient import TestClient

from todo_tracker.config import Settings
from todo_tracker.main import create_app

TEST_SECRET = "test-secret-key"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test-todo.db'}",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        log_level="WARNING",
    )


@pytest.fixture
def app(settings):
    app = create_app(settings)
    yield app
    app.state.engine.dispose()


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


def register(client, username="testuser", email="test@example.com", password="password123"):
    res = client.post("/api/auth/register", json={"username": username, "email": email, "password": password})
    assert res.status_code == 201, res.text
    return res.json()


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(client):
    return bearer(register(client)["token"])


@pytest.fixture
def other_headers(client):
    return bearer(register(client, username="otheruser", email="other@example.com")["token"])
