import pytest
from fastapi.testclient import TestClient

from tranquilstay.config import Settings
from tranquilstay.database import create_db_engine
from tranquilstay.main import create_app

TEST_SECRET = "test-secret"


@pytest.fixture
def settings():
    return Settings(JWT_SECRET_KEY=TEST_SECRET, DATABASE_URL="sqlite://", ENVIRONMENT="development")


@pytest.fixture
def app(settings):
    # in-memory database, one shared connection per test
    engine = create_db_engine(settings.DATABASE_URL)
    yield create_app(settings, engine=engine)
    engine.dispose()


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def db(client, app):
    session = app.state.session_factory()
    yield session
    session.close()


@pytest.fixture
def login(client):
    def _login(email="guest@tranquil.io", **claims):
        response = client.post("/jwt", json={"email": email, **claims})
        assert response.status_code == 200
        return response
    return _login


@pytest.fixture
def room(client):
    def _room(room_id="R1", availability=True, **fields):
        response = client.post("/rooms", json={"_id": room_id, "availability": availability, **fields})
        assert response.status_code == 201
        return room_id
    return _room
