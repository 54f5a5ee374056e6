"""
Shared pytest fixtures for the Linkshelf API tests.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from linkshelf.config import Settings
from linkshelf.database import create_db_engine, init_db, make_session_factory, session_scope
from linkshelf.main import create_app
from linkshelf.models.session import SessionEntry
from linkshelf.services.sessions import SessionStore
from linkshelf.services.users import UserStore


def build_settings(**overrides) -> Settings:
    """Settings pinned to test values so the host environment never leaks in."""
    values = {
        "environment": "development",
        "database_url": "sqlite://",
        "session_cookie_name": "session",
        "session_cookie_same_site": "lax",
        "session_ttl_days": 7,
        "cookie_secure_override": None,
        "cors_origins": ("http://localhost:3000",),
        "metadata_fetch_timeout_seconds": 5,
        "log_level": "INFO",
        "seed_email": "",
        "seed_name": "",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def make_settings():
    return build_settings


@pytest.fixture
def engine():
    """In-memory SQLite shared by every connection in a test."""
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def session_store(session_factory):
    return SessionStore(session_factory, ttl_days=7)


@pytest.fixture
def user_store(session_factory):
    return UserStore(session_factory)


@pytest.fixture
def user(user_store):
    return user_store.ensure_user("ada@example.com", "Ada Lovelace")


@pytest.fixture
def insert_session(session_factory, user):
    """Insert a session row with a chosen token and lifetime."""

    def _insert(token: str, expires_in: timedelta = timedelta(days=7), user_id=None):
        now = datetime.now(timezone.utc)
        with session_scope(session_factory) as session:
            session.add(
                SessionEntry(
                    token=token,
                    user_id=user_id if user_id is not None else user.id,
                    created_at=now,
                    expires_at=now + expires_in,
                )
            )
        return token

    return _insert


@pytest.fixture
def session_exists(session_factory):
    """Return whether a session row with the given token is stored."""

    def _exists(token: str) -> bool:
        with session_scope(session_factory) as session:
            return (
                session.query(SessionEntry).filter(SessionEntry.token == token).count()
                > 0
            )

    return _exists


@pytest.fixture
def make_client(engine):
    """Build a TestClient for an app wired to the test database."""

    def _make(settings: Settings | None = None, **kwargs) -> TestClient:
        app = create_app(settings=settings or build_settings(), engine=engine, **kwargs)
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client):
    return make_client()
