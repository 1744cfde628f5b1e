import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from accounting_app.config import Settings
from accounting_app.database import init_db
from accounting_app.main import create_app


@pytest.fixture()
def settings():
    return Settings(
        environment="test",
        database_url="sqlite://",
        static_dir=None,
        log_level="WARNING",
    )


@pytest.fixture()
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as db_session:
        yield db_session


@pytest.fixture()
def client(settings, engine):
    app = create_app(settings, engine)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def user(client):
    response = client.post("/users", json={"name": "Alice"})
    assert response.status_code == 201
    return response.json()


@pytest.fixture()
def make_expense(client, user):
    def _make(**overrides):
        payload = {
            "userId": user["id"],
            "spentAt": "2024-01-15T12:00:00",
            "title": "Lunch",
            "amount": 12.5,
            "category": "food",
        }
        payload.update(overrides)
        response = client.post("/expenses", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _make
