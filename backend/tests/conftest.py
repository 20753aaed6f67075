# backend/tests/conftest.py
"""
Pytest configuration.

Every test gets a fresh in-memory SQLite database. The API client shares the
test session through a ``get_db`` override, so data created by fixtures is
visible to the routes and vice versa.
"""

import os

# Set test configuration BEFORE any tennisplan imports
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["EMAIL_PROVIDER"] = "console"
os.environ["PROMETHEUS_DISABLE_CACHE"] = "1"

# Mock Resend globally so no test can send a real email
import unittest.mock

global_resend_mock = unittest.mock.patch("resend.Emails.send")
mocked_send = global_resend_mock.start()
mocked_send.return_value = {"id": "test-email-id"}

from datetime import date, time
from decimal import Decimal
from typing import Iterable, Optional

from fastapi.testclient import TestClient
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tennisplan.core.config import settings
from tennisplan.database import Base, get_db
from tennisplan.main import app
from tennisplan.models import Player, RatePlan, Trainer, TrainingSession
from tennisplan.models.enums import BillingMode, SessionStatus

settings.is_testing = True

test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine, expire_on_commit=False)


@pytest.fixture(scope="function")
def db():
    """Create a new database session with empty tables for each test."""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()

    yield session

    session.rollback()
    session.close()
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db: Session):
    """Create a test client with the test database."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    # Don't use context manager - startup would create tables in the configured database
    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()


# ============================================================================
# Master data fixtures
# ============================================================================


@pytest.fixture
def trainer(db: Session) -> Trainer:
    trainer = Trainer(name="Sarah Becker", email="sarah@example.com", hourly_wage=Decimal("20.00"), is_active=True)
    db.add(trainer)
    db.commit()
    return trainer


@pytest.fixture
def other_trainer(db: Session) -> Trainer:
    trainer = Trainer(name="Jonas Weber", hourly_wage=Decimal("18.00"), is_active=True)
    db.add(trainer)
    db.commit()
    return trainer


@pytest.fixture
def player_anna(db: Session) -> Player:
    player = Player(name="Anna Schmidt", contact_email="anna@example.com", billing_address="Hauptstr. 1\n12345 Musterstadt")
    db.add(player)
    db.commit()
    return player


@pytest.fixture
def player_ben(db: Session) -> Player:
    player = Player(name="Ben Fischer", contact_email="ben@example.com")
    db.add(player)
    db.commit()
    return player


@pytest.fixture
def shared_plan(db: Session) -> RatePlan:
    """40 € per hour, split among the players of a session."""
    plan = RatePlan(name="Gruppe", price_per_hour=Decimal("40.00"), billing_mode=BillingMode.PER_TRAINING.value)
    db.add(plan)
    db.commit()
    return plan


@pytest.fixture
def per_player_plan(db: Session) -> RatePlan:
    """30 € per hour for every player."""
    plan = RatePlan(name="Einzel", price_per_hour=Decimal("30.00"), billing_mode=BillingMode.PER_PLAYER.value)
    db.add(plan)
    db.commit()
    return plan


@pytest.fixture
def flat_plan(db: Session) -> RatePlan:
    plan = RatePlan(
        name="Abo",
        price_per_hour=Decimal("0.00"),
        billing_mode=BillingMode.MONTHLY_FLAT.value,
        monthly_fee=Decimal("60.00"),
    )
    db.add(plan)
    db.commit()
    return plan


@pytest.fixture
def make_session(db: Session):
    """Factory for training sessions stored directly through the ORM."""

    def _make(
        trainer: Trainer,
        rate_plan: Optional[RatePlan],
        players: Iterable[Player],
        session_date: date,
        start: time = time(17, 0),
        end: time = time(18, 0),
        status: SessionStatus = SessionStatus.COMPLETED,
        series_id: Optional[str] = None,
        note: Optional[str] = None,
    ) -> TrainingSession:
        session = TrainingSession(
            trainer_id=trainer.id,
            rate_plan_id=rate_plan.id if rate_plan else None,
            session_date=session_date,
            start_time=start,
            end_time=end,
            status=status.value,
            series_id=series_id,
            note=note,
        )
        session.players = list(players)
        db.add(session)
        db.commit()
        return session

    return _make
