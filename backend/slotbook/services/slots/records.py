# backend/slotbook/services/slots/records.py
"""
Plain records consumed and produced by the availability engine.

The storage layer converts ORM rows into these before the engine sees
them, so the engine never touches a Session.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class Weekday(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def of(cls, day: date) -> "Weekday":
        return WEEKDAYS[day.weekday()]


WEEKDAYS = list(Weekday)  # index = date.weekday()


class Scope(str, Enum):
    """Owner level of a rule. Declaration order is the precedence order."""

    EVENT = "event"
    USER = "user"
    ORGANIZATION = "organization"


SCOPE_PRECEDENCE = list(Scope)


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    NO_SHOW = "no_show"


@dataclass(frozen=True)
class AvailabilityRule:
    """One authored open-hours window.

    Exactly one of ``day_of_week`` / ``specific_date`` is set.
    """

    id: int
    scope: Scope
    start_time: str  # "HH:MM", wall clock in ``timezone``
    end_time: str
    timezone: str = "UTC"
    day_of_week: Weekday | None = None
    specific_date: date | None = None
    is_active: bool = True

    def __post_init__(self):
        if (self.day_of_week is None) == (self.specific_date is None):
            raise ValueError(
                f"Rule {self.id}: exactly one of day_of_week / specific_date must be set"
            )

    @property
    def window(self) -> str:
        return f"{self.start_time}-{self.end_time}"


@dataclass(frozen=True)
class CandidateSlot:
    start: str
    end: str
    source_timezone: str = "UTC"
    window: str = ""  # "start-end" of the rule that produced it


@dataclass(frozen=True)
class EventOption:
    id: int
    duration_minutes: int
    capacity: int
    is_default: bool = False


@dataclass(frozen=True)
class Booking:
    id: int
    event_option_id: int
    date: date
    time_slot: str
    status: BookingStatus


@dataclass(frozen=True)
class TimeSlot:
    start_time: str
    end_time: str
    available: bool
    source_timezone: str


@dataclass(frozen=True)
class Owner:
    name: str
    role: str


@dataclass(frozen=True)
class EventRecord:
    """Bookable event (the resource) with its owning scopes."""

    id: str
    slug: str
    title: str
    user_id: int | None = None
    organization_id: int | None = None
    owners: list[Owner] = field(default_factory=list)


@dataclass(frozen=True)
class Person:
    first_name: str
    last_name: str


@dataclass(frozen=True)
class BookingWithPerson:
    booking: Booking
    person: Person | None = None
