"""
ScoreTrack - Test Configuration
Pytest fixtures: an in-memory SQLite database per test, stores built on
it, and a FastAPI test client wired to the same database.
"""
import threading

import pytest
from fastapi.testclient import TestClient

from scoretrack.database import Database, build_engine, get_database
from scoretrack.main import app
from scoretrack.schemas.records import SubjectInput, TestInput as NewTestPayload
from scoretrack.services.records import RecordStore
from scoretrack.services.templates import TemplateStore


@pytest.fixture
def database() -> Database:
    """Fresh in-memory database with its own lock."""
    db = Database(build_engine("sqlite://"), lock=threading.Lock(), lock_timeout=1.0)
    db.create_tables()
    yield db
    db.engine.dispose()


@pytest.fixture
def record_store(database: Database) -> RecordStore:
    return RecordStore(database)


@pytest.fixture
def template_store(database: Database) -> TemplateStore:
    return TemplateStore(database)


@pytest.fixture
def client(database: Database):
    """Test client whose routes use the fixture database."""
    app.dependency_overrides[get_database] = lambda: database
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def math_test_input() -> NewTestPayload:
    """+4/-1 negative marking, one subject: 10 total, 8 attempted, 6 correct."""
    return NewTestPayload(
        date="2024-01-01",
        name="Mock 1",
        correct_points=4,
        wrong_points=1,
        is_negative=True,
        subjects=[SubjectInput(name="Math", total_q=10, attempted_q=8, correct_q=6)],
    )
