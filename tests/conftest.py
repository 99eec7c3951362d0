"""Pytest configuration and shared fixtures for HabitCast tests.

This module provides database fixtures, entity factories, and a Flask test
client for testing domain logic, repositories, services and routes without
touching the real app database.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional

import pytest

from habitcast import create_app
from habitcast.config import TestConfig
from habitcast.context import UserContext, build_app_context
from habitcast.infra.database import create_db_engine, create_session_factory, init_database
from habitcast.models import Habit, HabitToBreak, Identity, ScorecardEntry

# Wednesday; the week runs Monday 2024-05-13 through Sunday 2024-05-19.
FIXED_NOW = datetime(2024, 5, 15, 12, 0, tzinfo=timezone.utc)
USER_ID = "user-1"
OTHER_USER_ID = "user-2"

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def test_config(tmp_path, monkeypatch):
    """Configuration pointing at a throwaway SQLite file."""

    monkeypatch.setenv("HABITCAST_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("HABITCAST_TEST_DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("HABITCAST_DEV_MODE", "true")
    return TestConfig()


@pytest.fixture(scope="function")
def db_engine(test_config):
    """Create an isolated SQLite database for each test.

    Yields:
        Engine: SQLModel engine with all tables created
    """
    engine = create_db_engine(test_config)
    init_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the one repositories get in production."""

    return create_session_factory(db_engine)


@pytest.fixture
def app_context(test_config, session_factory, db_engine):
    return build_app_context(test_config, session_factory, engine=db_engine)


@pytest.fixture
def ctx(app_context) -> UserContext:
    """The signed-in user, with the clock frozen on a Wednesday."""

    return UserContext(app=app_context, user_id=USER_ID, email="tester@example.com", now=FIXED_NOW)


@pytest.fixture
def other_ctx(app_context) -> UserContext:
    return UserContext(app=app_context, user_id=OTHER_USER_ID, now=FIXED_NOW)


@pytest.fixture
def anonymous_ctx(app_context) -> UserContext:
    return UserContext(app=app_context, user_id=None, now=FIXED_NOW)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def identity_factory(app_context):
    """Factory for creating identities directly through the repository."""

    def _create_identity(
        statement: str = "I am a person who reads.",
        sort_order: int = 0,
        user_id: str = USER_ID,
    ) -> Identity:
        return app_context.identity_repo.create(
            Identity(user_id=user_id, statement=statement, sort_order=sort_order),
            user_id=user_id,
        )

    return _create_identity


@pytest.fixture
def habit_factory(app_context):
    """Factory for creating habits with sensible defaults.

    Returns:
        Callable: Function that creates and persists Habit instances
    """

    def _create_habit(
        name: str = "Read",
        identity_id: Optional[int] = None,
        last_completed_date: Optional[date] = None,
        sort_order: int = 0,
        user_id: str = USER_ID,
        **fields: Any,
    ) -> Habit:
        return app_context.habit_repo.create(
            Habit(
                user_id=user_id,
                name=name,
                identity_id=identity_id,
                last_completed_date=last_completed_date,
                sort_order=sort_order,
                **fields,
            ),
            user_id=user_id,
        )

    return _create_habit


@pytest.fixture
def scorecard_factory(app_context):
    """Factory for scorecard entries; sort order defaults to the bucket's end."""

    def _create_entry(
        habit_name: str,
        rating: str = "=",
        time_of_day: Optional[str] = "anytime",
        sort_order: Optional[int] = None,
        user_id: str = USER_ID,
    ) -> ScorecardEntry:
        repo = app_context.scorecard_repo
        if sort_order is None:
            sort_order = repo.count_in_bucket(time_of_day or "anytime", user_id=user_id)
        return repo.create(
            ScorecardEntry(
                user_id=user_id,
                habit_name=habit_name,
                rating=rating,
                time_of_day=time_of_day,
                sort_order=sort_order,
            ),
            user_id=user_id,
        )

    return _create_entry


@pytest.fixture
def break_factory(app_context):
    def _create_break(identity_id: int, name: str = "Doomscrolling", user_id: str = USER_ID, **fields):
        return app_context.break_repo.create(
            HabitToBreak(user_id=user_id, identity_id=identity_id, name=name, **fields),
            user_id=user_id,
        )

    return _create_break


# =============================================================================
# Flask Fixtures
# =============================================================================


@pytest.fixture
def app(app_context):
    flask_app = create_app(app_context=app_context)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture
def client(app):
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def auth_headers(test_config) -> dict[str, str]:
    """Headers the identity provider's proxy would forward for the test user."""

    return {test_config.AUTH_HEADER: USER_ID, test_config.AUTH_EMAIL_HEADER: "tester@example.com"}
