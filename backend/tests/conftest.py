"""Shared test fixtures and helpers."""

from datetime import date
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from slotbook.database import enable_sqlite_fk, get_db, init_db
from slotbook.main import app
from slotbook.services.slots.records import (
    AvailabilityRule,
    Booking,
    BookingStatus,
    EventOption,
    EventRecord,
    Scope,
    Weekday,
)

# 2030-01-07 is a Monday
MONDAY = date(2030, 1, 7)
TUESDAY = date(2030, 1, 8)


def make_rule(
    start: str = "09:00",
    end: str = "11:00",
    day_of_week: Optional[Weekday] = Weekday.MONDAY,
    specific_date: Optional[date] = None,
    scope: Scope = Scope.EVENT,
    timezone: str = "UTC",
    is_active: bool = True,
    rule_id: int = 1,
) -> AvailabilityRule:
    """Helper to create an AvailabilityRule (weekday rule unless specific_date is given)."""
    return AvailabilityRule(
        id=rule_id,
        scope=scope,
        start_time=start,
        end_time=end,
        timezone=timezone,
        day_of_week=None if specific_date else day_of_week,
        specific_date=specific_date,
        is_active=is_active,
    )


def make_option(
    option_id: int = 1,
    duration: int = 30,
    capacity: int = 1,
    is_default: bool = True,
) -> EventOption:
    return EventOption(id=option_id, duration_minutes=duration, capacity=capacity, is_default=is_default)


def make_booking(
    day: date,
    time_slot: str,
    status: BookingStatus = BookingStatus.CONFIRMED,
    option_id: int = 1,
    booking_id: int = 1,
) -> Booking:
    return Booking(
        id=booking_id,
        event_option_id=option_id,
        date=day,
        time_slot=time_slot,
        status=status,
    )


class InMemoryStore:
    """AvailabilityStore over plain lists; records every call it receives."""

    def __init__(
        self,
        rules: Optional[list[AvailabilityRule]] = None,
        options: Optional[list[EventOption]] = None,
        bookings: Optional[list[Booking]] = None,
        event: Optional[EventRecord] = None,
    ):
        self.rules = rules or []
        self.options = [make_option()] if options is None else options
        self.bookings = bookings or []
        self.event = event or EventRecord(id="evt-1", slug="intro-call", title="Intro call", user_id=1)
        self.calls: list[str] = []

    def find_event(self, username: str, url_slug: str) -> Optional[EventRecord]:
        self.calls.append("find_event")
        if (username, url_slug) == ("ana", self.event.slug):
            return self.event
        return None

    def find_rules_for_resource(self, event: EventRecord) -> list[AvailabilityRule]:
        self.calls.append("find_rules_for_resource")
        return list(self.rules)

    def find_event_options(self, event_id: str) -> list[EventOption]:
        self.calls.append("find_event_options")
        return list(self.options)

    def find_bookings_in_range(self, event_option_id: int, start_date: date, end_date: date) -> list[Booking]:
        self.calls.append("find_bookings_in_range")
        return [
            b for b in self.bookings
            if b.event_option_id == event_option_id and start_date <= b.date <= end_date
        ]


@pytest.fixture
def store():
    return InMemoryStore(rules=[make_rule()])


# ── Database / API ───────────────────────────────────────────────────────


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", enable_sqlite_fk)
    init_db(bind=engine)

    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
