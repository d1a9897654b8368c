import pytest
from fastapi.testclient import TestClient

from exercise_tracker_api.app.core.config import Settings
from exercise_tracker_api.app.main import create_app


@pytest.fixture
def settings(tmp_path):
    return Settings(database_url=str(tmp_path / "exercise_tracker.db"), log_level="WARNING")


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    # Entering the context runs the lifespan, which creates the tables.
    with TestClient(app) as c:
        yield c


@pytest.fixture
def store(app, client):
    return app.state.store


@pytest.fixture
def alice(client):
    """A registered user."""
    return client.post("/api/users", json={"username": "alice"}).json()
