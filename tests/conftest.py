"""
Pytest configuration and fixtures.
"""

from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from tests.test_constants import TEST_DATABASE_URL, TEST_SECRET_KEY

# Force an in-memory SQLite DB when pytest runs; don't inherit from .env
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["NOTIFICATIONS_ENABLED"] = "false"
os.environ.setdefault("SECRET_KEY", TEST_SECRET_KEY)

from tests.helpers import FakeGateway  # noqa: E402


@pytest.fixture
def db() -> Session:
    """Database session on a fresh schema. Tables are dropped after each test."""
    import app.models  # noqa: F401  (register mappers)
    from app.db.session import Base, SessionLocal, engine

    Base.metadata.create_all(engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)


@pytest.fixture
def gateway() -> FakeGateway:
    """Exchange rate gateway returning 7.0 USD per DOT."""
    return FakeGateway({"DOT": 7.0})


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client."""
    from app.main import app

    return TestClient(app)


@pytest.fixture
def client_with_db(db: Session, gateway: FakeGateway) -> TestClient:
    """TestClient with get_db and the exchange rate gateway overridden."""
    from app.db.session import get_db
    from app.main import app
    from app.services.exchange_rates import get_exchange_rate_gateway

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_exchange_rate_gateway] = lambda: gateway
    c = TestClient(app)
    yield c
    app.dependency_overrides.pop(get_db, None)
    app.dependency_overrides.pop(get_exchange_rate_gateway, None)
