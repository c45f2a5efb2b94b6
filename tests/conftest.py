"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import gptmarket.models  # noqa: F401
from gptmarket.database import Base, get_db
from gptmarket.main import app
from gptmarket.models.submission import Submission

VALID_SYSTEM_PROMPT = (
    "You are a meticulous travel planner. Ask about budget and dates, "
    "then propose a day-by-day itinerary."
)


@pytest.fixture(scope="function")
def session_factory():
    """Session factory bound to a fresh in-memory SQLite database."""
    # A single shared connection so the API threadpool sees the same database
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)

    engine.dispose()


@pytest.fixture(scope="function")
def test_db(session_factory):
    """Create a test database session for each test."""
    db = session_factory()

    yield db

    db.close()


@pytest.fixture
def make_submission(test_db):
    """Factory that stores a submission with valid defaults."""

    def _make(**overrides):
        fields = {
            "name": "Trip Planner",
            "version": "1.0.0",
            "description": "Plans multi-day trips with budgets, transport options and daily schedules.",
            "category": "travel",
            "tags": ["travel", "planning"],
            "license_type": "MIT",
            "system_prompt": VALID_SYSTEM_PROMPT,
            "temperature": 0.5,
            "top_p": 0.9,
            "max_tokens": 1024,
            "status": "pending",
        }
        fields.update(overrides)
        submission = Submission(**fields)
        test_db.add(submission)
        test_db.commit()
        return submission

    return _make


@pytest.fixture
def client(session_factory):
    """API client using the test database."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
