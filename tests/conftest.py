"""Root conftest for all tests.

Every test that touches the database gets its own in-memory SQLite engine,
patched into looptimer.db.session so services and routes use it.
"""

from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

import looptimer.db.session as session_module
from looptimer.core.auth import get_current_user_id, get_optional_user_id
from looptimer.db.models import Base
from looptimer.db.session import get_session
from looptimer.main import app
from looptimer.templates.seed import seed_templates

TEST_USER_ID = "user_test_1"


@pytest.fixture
def engine(monkeypatch):
    """Fresh in-memory database with all tables created."""
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(test_engine)

    monkeypatch.setattr(session_module, "_engine", test_engine)
    monkeypatch.setattr(session_module, "_SessionLocal", None)

    yield test_engine
    test_engine.dispose()


@pytest.fixture
def db_session(engine):
    with get_session() as session:
        yield session


@pytest.fixture
def seeded_templates(engine) -> int:
    with get_session() as session:
        return seed_templates(session)


@pytest.fixture
def login() -> Callable[[str | None], None]:
    """Switch the authenticated user for subsequent requests (None = anonymous)."""

    def _login(user_id: str | None) -> None:
        app.dependency_overrides[get_optional_user_id] = lambda: user_id
        if user_id is None:
            app.dependency_overrides.pop(get_current_user_id, None)
        else:
            app.dependency_overrides[get_current_user_id] = lambda: user_id

    return _login


@pytest.fixture
def client(engine, login):
    """Test client authenticated as TEST_USER_ID."""
    login(TEST_USER_ID)
    yield TestClient(app)
    app.dependency_overrides.clear()
