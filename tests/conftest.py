import pytest
from fastapi.testclient import TestClient

from losers.config import Settings
from losers.main import create_app


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite://",
        SECRET_KEY="test-secret",
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def app(settings):
    app = create_app(settings)
    app.state.context.create_all()
    yield app
    app.state.context.dispose()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def db(app):
    session = app.state.context.session_factory()
    yield session
    session.close()


@pytest.fixture
def register(client):
    """Register a user and return its id plus ready-made auth headers."""
    def _register(username="loser", nickname="Big Loser", password="secret123"):
        response = client.post("/api/auth/register", json={
            "username": username,
            "nickname": nickname,
            "password": password,
        })
        assert response.status_code == 201, response.text
        body = response.json()
        return {
            "id": body["user"]["id"],
            "username": username,
            "headers": {"Authorization": f"Bearer {body['access_token']}"},
        }
    return _register


@pytest.fixture
def create_post(client):
    def _create_post(headers, **overrides):
        payload = {
            "title": "Failed my driving test twice",
            "category": "LIFE",
            "whatFailed": "Forgot to check mirrors",
            "lessonLearned": "Mirrors first, then signal",
        }
        payload.update(overrides)
        response = client.post("/api/posts", json=payload, headers=headers)
        assert response.status_code == 201, response.text
        return response.json()
    return _create_post
