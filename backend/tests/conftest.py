"""Test fixtures for the garden club API.

Every test gets a fresh in-memory SQLite database shared between the test
session and the app (StaticPool), and a fake mailer in place of SMTP.
"""
from __future__ import annotations

import os
from datetime import date, datetime, time, timezone
from typing import Callable, Dict, List, Optional

# Settings are read at import time, so the environment goes first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REMINDER_SCHEDULER_ENABLED", "false")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("EMAIL_ENABLED", "false")
os.environ.setdefault("CRON_SECRET", "test-cron-secret")
os.environ.setdefault("CLUB_TIMEZONE", "UTC")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from garden_club.auth import create_access_token, pwd_context
from garden_club.clock import club_today
from garden_club.database import Base, get_db
from garden_club.main import app
from garden_club.models import CheckIn, Plant, PlantCare, Role, User
from garden_club.services.email import SendResult, get_mailer

CRON_SECRET = "test-cron-secret"
TEST_PASSWORD = "Garden-pass-1"
# one hash for every fixture user; bcrypt is slow on purpose
_PASSWORD_HASH = pwd_context.hash(TEST_PASSWORD)


class FakeMailer:
    """Records every send; addresses in ``fail_for`` fail, in ``raise_for`` raise."""

    def __init__(self):
        self.sent: List[Dict[str, str]] = []
        self.fail_for: set[str] = set()
        self.raise_for: set[str] = set()

    def send(self, to: str, subject: str, html_body: str) -> SendResult:
        if to in self.raise_for:
            raise ConnectionError(f"SMTP connection refused for {to}")
        self.sent.append({"to": to, "subject": subject, "html": html_body})
        if to in self.fail_for:
            return SendResult(success=False, error="mailbox unavailable")
        return SendResult(success=True, message_id=f"<{len(self.sent)}@test>")

    def subjects_for(self, to: str) -> List[str]:
        return [m["subject"] for m in self.sent if m["to"] == to]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()


@pytest.fixture
def client(session_factory, mailer):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db) -> Callable[..., User]:
    counter = {"n": 0}

    def _make(name: Optional[str] = None, role: Role = Role.MEMBER, email: Optional[str] = None) -> User:
        counter["n"] += 1
        n = counter["n"]
        user = User(
            name=name or f"Member {n}",
            email=email or f"member{n}@school.test",
            password_hash=_PASSWORD_HASH,
            role=role,
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def admin(make_user) -> User:
    return make_user(name="Ms. Admin", role=Role.ADMIN, email="admin@school.test")


@pytest.fixture
def member(make_user) -> User:
    return make_user(name="Alex", email="alex@school.test")


@pytest.fixture
def make_plant(db) -> Callable[..., Plant]:
    def _make(name: str = "Basil", **fields) -> Plant:
        plant = Plant(name=name, **fields)
        db.add(plant)
        db.commit()
        return plant

    return _make


@pytest.fixture
def plant(make_plant) -> Plant:
    return make_plant("Basil", water_amount="200 ml")


@pytest.fixture
def make_assignment(db) -> Callable[..., PlantCare]:
    def _make(user: User, plant: Plant, start: date, end: Optional[date] = None, **fields) -> PlantCare:
        assignment = PlantCare(user_id=user.id, plant_id=plant.id, start_date=start, end_date=end, **fields)
        db.add(assignment)
        db.commit()
        return assignment

    return _make


@pytest.fixture
def make_check_in(db) -> Callable[..., CheckIn]:
    def _make(user: User, plant: Plant, at: datetime, notes: Optional[str] = None) -> CheckIn:
        check_in = CheckIn(user_id=user.id, plant_id=plant.id, notes=notes, created_at=at)
        db.add(check_in)
        db.commit()
        return check_in

    return _make


@pytest.fixture
def today() -> date:
    return club_today()


def at(day: date, hour: int, minute: int = 0) -> datetime:
    return datetime.combine(day, time(hour, minute), tzinfo=timezone.utc)


def auth_headers(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


def cron_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {CRON_SECRET}"}
