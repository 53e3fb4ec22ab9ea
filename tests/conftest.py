"""
conftest.py - Shared pytest fixtures for the investment tracker tests

Provides:
- An in-memory SQLite engine per test, with all tables created
- A direct session on that engine for inspecting the store
- A TestClient whose requests use the same engine
- Helpers to register users, log in, and create investments/transactions
"""

import os

# Must be set before tracker.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tracker.database import Base, get_db
from tracker.main import app

PASSWORD = "p1"


@pytest.fixture
def engine():
    # StaticPool: every session shares the single in-memory connection
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def register(client: TestClient, email: str, name: str = "Test User", password: str = PASSWORD):
    return client.post("/register", json={"name": name, "email": email, "password": password})


def login(client: TestClient, email: str, password: str = PASSWORD) -> dict:
    response = client.post("/auth", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def create_investment(client: TestClient, headers: dict, **overrides) -> dict:
    body = {
        "name": "Apple Inc.",
        "ticker": "aapl",
        "type": "Stock",
        "purchasePrice": 150.25,
        "currentValue": 172.5,
    }
    body.update(overrides)
    response = client.post("/investments", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def record(client: TestClient, headers: dict, investment_id: str, type_: str, quantity: int, price: float = 100.0, **extra):
    body = {"investmentId": investment_id, "type": type_, "quantity": quantity, "price": price}
    body.update(extra)
    return client.post("/transactions", json=body, headers=headers)


@pytest.fixture
def alice(client):
    register(client, "alice@example.com", name="Alice")
    return login(client, "alice@example.com")


@pytest.fixture
def bob(client):
    register(client, "bob@example.com", name="Bob")
    return login(client, "bob@example.com")
