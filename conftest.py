"""Shared test fixtures — in-memory SQLite, dependency overrides, a fake roster."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from mission_control.database import Base, create_tables, get_db, make_engine
from mission_control.models import Agent, Task
from mission_control.services.task_service import TaskService

# StaticPool keeps one connection so create_all and every session share the
# same in-memory database.
_engine = make_engine("sqlite:///:memory:", poolclass=StaticPool)
create_tables(_engine)
TestingSession = sessionmaker(bind=_engine, autoflush=False, expire_on_commit=False)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


class FakeRoster:
    """In-memory stand-in for AgentRepository."""

    def __init__(self, *agents: Agent):
        self._agents = {a.id: a for a in agents}

    def get_by_id(self, agent_id):
        return self._agents.get(agent_id)


@pytest.fixture(autouse=True)
def clean_db():
    """Wipe tables before each test."""
    with _engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())
    yield


@pytest.fixture
def db():
    session = TestingSession()
    yield session
    session.close()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def team(client) -> dict:
    """Seed the default roster over HTTP; returns {name: id}."""
    res = client.post("/api/agents/init-team")
    assert res.status_code == 200, res.text
    return {a["name"]: a["id"] for a in res.json()}


@pytest.fixture
def roster() -> FakeRoster:
    return FakeRoster(
        Agent(id="alice", name="Alice", role="dev", mention_patterns=["@alice", "@dev"]),
        Agent(id="bob", name="Bob", role="qa", mention_patterns=[]),
        Agent(id="rex", name="Rex", role="reviewer", mention_patterns=["@rex"]),
        Agent(id="lead", name="Lead", role="lead", mention_patterns=["@lead"]),
    )


@pytest.fixture
def service(db, roster) -> TaskService:
    return TaskService(db, roster)


def reload(db, task_id: str) -> Task:
    """Fresh read of a task row, bypassing the identity map."""
    db.expire_all()
    return db.get(Task, task_id)
