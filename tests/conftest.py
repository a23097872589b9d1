# tests/conftest.py

import pytest
from starlette.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy_utils import create_database, database_exists, drop_database
from unittest.mock import MagicMock

from camp_scheduling.main import app
from camp_scheduling.api import deps
from camp_scheduling.db.session import build_engine, get_db
from camp_scheduling.db.base_class import Base
from camp_scheduling import models  # noqa: F401  registers every table


# --- Test Database Setup ---
# A file database so concurrent sessions see each other's commits.
TEST_DATABASE_URL = "sqlite:///./camp_scheduling_test.db"
engine = build_engine(TEST_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    if database_exists(engine.url):
        drop_database(engine.url)
    create_database(engine.url)
    yield
    engine.dispose()
    drop_database(engine.url)


@pytest.fixture(scope="function", autouse=True)
def clean_tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session():
    session = TestingSessionLocal()
    yield session
    session.close()


# --- Mock Dependencies Setup ---
class MockTokenPayload:
    def __init__(self, sub="parent_123", org_id="org_abc"):
        self.sub = sub
        self.org_id = org_id


@pytest.fixture(scope="function")
def current_user():
    """The caller every request is authenticated as; tests may mutate it."""
    return MockTokenPayload()


@pytest.fixture(scope="function")
def published_events(monkeypatch):
    """Captures booking events instead of sending them to Kafka."""
    publisher = MagicMock(return_value=True)
    monkeypatch.setattr(
        "camp_scheduling.api.v1.endpoints.bookings.publish_slot_booking_event", publisher
    )
    return publisher


# --- Test Client Fixtures ---
@pytest.fixture(scope="function")
def test_client(db_session, current_user, published_events):
    """
    Provides a TestClient that uses the test database and mocks auth and Kafka.
    """

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[deps.get_current_user] = lambda: current_user

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
