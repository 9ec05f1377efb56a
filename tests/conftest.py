"""
공용 pytest fixture.

앱 import 전에 환경 변수를 고정: sqlite, 기동 시 마이그레이션 끔.
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTO_MIGRATE"] = "0"
os.environ["LOG_FORMAT"] = "text"

from typing import Generator  # noqa: E402
from unittest.mock import AsyncMock  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from tripcommit.database import get_db  # noqa: E402
from tripcommit.main import app  # noqa: E402
from tripcommit.models.base import Base  # noqa: E402
from tripcommit.models.participant import TripParticipant  # noqa: E402
from tripcommit.models.trip import Trip  # noqa: E402
from tripcommit.models.user import User  # noqa: E402


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture
def test_engine():
    """테스트마다 새 in-memory sqlite. StaticPool로 같은 연결 공유."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture
def db_session(session_factory) -> Generator[Session, None, None]:
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def publish_mock(monkeypatch) -> AsyncMock:
    """Redis 발행 대신 호출만 기록."""
    mock = AsyncMock()
    monkeypatch.setattr("tripcommit.routers.trips.publish_participants_changed", mock)
    return mock


@pytest.fixture
def client(session_factory, publish_mock) -> Generator[TestClient, None, None]:
    def _override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# =============================================================================
# DATA FIXTURES
# =============================================================================

@pytest.fixture
def seed(db_session):
    """
    users 1..5 + 확정 시스템이 켜진 여행(정원 3) 하나.
    반환값 add(user_id, **컬럼)으로 참가자 행 추가.
    """
    names = {1: "Alice", 2: "bob", 3: "Zoe", 4: None, 5: "Eve"}
    for user_id, name in names.items():
        db_session.add(User(id=user_id, full_name=name, email=f"user{user_id}@example.com"))
    trip = Trip(
        id=1,
        name="Alps chalet",
        confirmation_enabled=True,
        confirmation_message="Deposit is non-refundable.",
        capacity_limit=3,
    )
    db_session.add(trip)
    db_session.commit()

    def add(user_id: int, **columns) -> TripParticipant:
        participant = TripParticipant(trip_id=1, user_id=user_id, **columns)
        db_session.add(participant)
        db_session.commit()
        return participant

    return add
