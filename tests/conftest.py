"""Pytest configuration and fixtures."""

import json
import os
from collections.abc import Generator
from typing import Any

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-studybuddy-tests")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ["ENVIRONMENT"] = "test"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.database import Base, get_db
from main import app
from models import Flashcard, Topic, User
from routers.auth import security
from services.ai_service import get_flashcard_generator

# One shared in-memory connection so the app thread and the test see the same data
test_engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


class FakeGenerator:
    """Stands in for the AI generator; records calls and returns canned output."""

    def __init__(self, output: Any = None, error: Exception | None = None) -> None:
        self.output = output
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def __call__(self, *, topic: str, count: int, difficulty: str, context: str | None = None) -> Any:
        self.calls.append({"topic": topic, "count": count, "difficulty": difficulty, "context": context})
        if self.error is not None:
            raise self.error
        if self.output is not None:
            return self.output
        return json.dumps(
            [{"question": f"{topic} question {i}", "answer": f"{topic} answer {i}"} for i in range(1, count + 1)]
        )


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=test_engine)

    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def owner(db_session: Session) -> User:
    user = User(email="owner@test.com", username="owner", password_hash="x")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def other_user(db_session: Session) -> User:
    user = User(email="other@test.com", username="other", password_hash="x")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def fake_generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def client(db_session: Session, fake_generator: FakeGenerator) -> Generator[TestClient, Any, None]:
    """Create a test client with database session and a fake generator."""

    def override_get_db() -> Generator[Session, None, None]:
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_flashcard_generator] = lambda: fake_generator

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def auth_headers_for(user: User) -> dict[str, str]:
    token = security.create_access_token(uid=str(user.id))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(owner: User) -> dict[str, str]:
    return auth_headers_for(owner)


@pytest.fixture
def other_headers(other_user: User) -> dict[str, str]:
    return auth_headers_for(other_user)


def topic_count(db_session: Session, user_id: int, name: str) -> int | None:
    """Stored counter for a topic, or None when the row does not exist."""
    db_session.expire_all()
    topic = db_session.execute(
        select(Topic).where(Topic.user_id == user_id, Topic.name == name)
    ).scalar_one_or_none()
    return None if topic is None else topic.flashcard_count


def live_card_count(db_session: Session, user_id: int, name: str) -> int:
    db_session.expire_all()
    return len(
        db_session.execute(
            select(Flashcard).where(Flashcard.user_id == user_id, Flashcard.topic == name)
        ).scalars().all()
    )
