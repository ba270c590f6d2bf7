# backend/slotbook/services/slots/db_store.py
"""
Database reads for the availability engine.

SlotsDbStore is the only place that touches the ORM. It turns rows into
the records in records.py; the engine consumes anything that satisfies
AvailabilityStore (tests use an in-memory implementation).
"""

from datetime import date
from typing import Protocol

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from .config import BookingConfig, get_booking_config
from .records import (
    AvailabilityRule,
    Booking,
    BookingStatus,
    BookingWithPerson,
    EventOption,
    EventRecord,
    Owner,
    Person,
    Scope,
    Weekday,
)


class AvailabilityStore(Protocol):
    def find_event(self, username: str, url_slug: str) -> EventRecord | None: ...

    def find_rules_for_resource(self, event: EventRecord) -> list[AvailabilityRule]: ...

    def find_event_options(self, event_id: str) -> list[EventOption]: ...

    def find_bookings_in_range(
        self, event_option_id: int, start_date: date, end_date: date
    ) -> list[Booking]: ...


class SlotsDbStore:
    """SQLAlchemy implementation of AvailabilityStore."""

    def __init__(self, db: Session, config: BookingConfig | None = None):
        self.db = db
        self.config = config or get_booking_config()

    # ── Events ───────────────────────────────────────────────────────────

    def find_event(self, username: str, url_slug: str) -> EventRecord | None:
        """Event with url_slug owned by the user or by the user's organization."""
        from ...models.generated import Events, Users

        user = self.db.query(Users).filter(Users.username == username).first()
        if not user:
            return None

        owner_filter = Events.user_id == user.id
        if user.organization_id:
            owner_filter = or_(owner_filter, Events.organization_id == user.organization_id)

        event = (
            self.db.query(Events)
            .options(joinedload(Events.user), joinedload(Events.organization))
            .filter(Events.url_slug == url_slug, owner_filter)
            .first()
        )
        if not event:
            return None

        owners: list[Owner] = []
        if event.user and event.user.client:
            client = event.user.client
            owners.append(Owner(
                name=f"{client.first_name} {client.last_name}",
                role="Administrator" if event.user.role == "admin" else "User",
            ))
        if event.organization:
            owners.append(Owner(name=event.organization.name, role="Organization"))

        return EventRecord(
            id=event.id,
            slug=event.url_slug,
            title=event.title,
            user_id=event.user_id,
            organization_id=event.organization_id,
            owners=owners,
        )

    def find_event_options(self, event_id: str) -> list[EventOption]:
        from ...models.generated import EventOptions

        rows = (
            self.db.query(EventOptions)
            .options(joinedload(EventOptions.duration))
            .filter(EventOptions.event_id == event_id)
            .order_by(EventOptions.id)
            .all()
        )
        return [
            EventOption(
                id=row.id,
                duration_minutes=(
                    row.duration.duration_minutes
                    if row.duration
                    else self.config.default_duration_minutes
                ),
                capacity=row.capacity,
                is_default=bool(row.is_default),
            )
            for row in rows
        ]

    # ── Rules ────────────────────────────────────────────────────────────

    def find_rules_for_resource(self, event: EventRecord) -> list[AvailabilityRule]:
        """Active event rules plus event-less rules of the owning user/organization."""
        from ...models.generated import AvailabilitySchedules as Schedules

        conditions = [Schedules.event_id == event.id]
        if event.user_id:
            conditions.append(
                (Schedules.user_id == event.user_id) & Schedules.event_id.is_(None)
            )
        if event.organization_id:
            conditions.append(
                (Schedules.organization_id == event.organization_id) & Schedules.event_id.is_(None)
            )

        rows = (
            self.db.query(Schedules)
            .filter(Schedules.is_active == 1, or_(*conditions))
            .order_by(Schedules.id)
            .all()
        )
        return [_to_rule(row) for row in rows]

    # ── Bookings ─────────────────────────────────────────────────────────

    def find_bookings_in_range(
        self,
        event_option_id: int,
        start_date: date,
        end_date: date,
    ) -> list[Booking]:
        """All bookings (any status) for the option within [start_date, end_date]."""
        return [_to_booking(row) for row in self._booking_rows(event_option_id, start_date, end_date)]

    def find_bookings_with_persons(
        self,
        event_option_id: int,
        start_date: date,
        end_date: date,
    ) -> list[BookingWithPerson]:
        rows = self._booking_rows(event_option_id, start_date, end_date, with_client=True)
        return [
            BookingWithPerson(
                booking=_to_booking(row),
                person=Person(row.client.first_name, row.client.last_name) if row.client else None,
            )
            for row in rows
        ]

    def _booking_rows(
        self,
        event_option_id: int,
        start_date: date,
        end_date: date,
        with_client: bool = False,
    ) -> list:
        from ...models.generated import Bookings

        query = self.db.query(Bookings)
        if with_client:
            query = query.options(joinedload(Bookings.client))

        return (
            query.filter(
                Bookings.event_option_id == event_option_id,
                Bookings.date >= start_date.isoformat(),
                Bookings.date <= end_date.isoformat(),
            )
            .order_by(Bookings.date, Bookings.time_slot, Bookings.id)
            .all()
        )


# ── Row conversion ───────────────────────────────────────────────────────


def _to_rule(row) -> AvailabilityRule:
    if row.event_id is not None:
        scope = Scope.EVENT
    elif row.user_id is not None:
        scope = Scope.USER
    else:
        scope = Scope.ORGANIZATION

    return AvailabilityRule(
        id=row.id,
        scope=scope,
        start_time=row.start_time,
        end_time=row.end_time,
        timezone=row.timezone or "UTC",
        day_of_week=Weekday(row.day_of_week) if row.specific_date is None else None,
        specific_date=date.fromisoformat(row.specific_date) if row.specific_date else None,
        is_active=bool(row.is_active),
    )


def _to_booking(row) -> Booking:
    return Booking(
        id=row.id,
        event_option_id=row.event_option_id,
        date=date.fromisoformat(row.date),
        time_slot=row.time_slot,
        status=BookingStatus(row.status),
    )
