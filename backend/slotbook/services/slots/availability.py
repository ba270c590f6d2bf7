# backend/slotbook/services/slots/availability.py
"""
Capacity accounting: which slots still have room.

Every query follows the same shape:
  1. Load the event, its options, all rules and all bookings for the
     range (once per query, never per day)
  2. Build indices: RuleIndex (date → rules), BookingIndex ((date, slot) → count)
  3. Walk the days: rules → slots (deduplicated) → capacity check

Takes into account:
✓ Date-specific overrides vs recurring weekday rules, per scope
✓ Overlapping windows (one slot per start time)
✓ Countable bookings only (pending / confirmed)
✓ Past dates (strictly before today in UTC) are excluded

Does NOT contain:
✗ Time-zone display (timezones.py, applied by the caller)
✗ Booking creation / cancellation
"""

import calendar
import logging
from collections import Counter
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone as dt_timezone
from enum import Enum

from .calculator import SlotGenerator
from .config import BookingConfig, get_booking_config, minutes_to_time_str, time_str_to_minutes
from .db_store import AvailabilityStore
from .errors import ConfigurationError, InvalidRange, NotFound
from .records import Booking, EventOption, EventRecord, TimeSlot
from .rules import RuleIndex

logger = logging.getLogger(__name__)


# ── Option resolution ────────────────────────────────────────────────────


class OptionSource(str, Enum):
    FOUND = "found"                # the requested option exists
    USED_DEFAULT = "used_default"  # nothing (or an unknown id) was requested


@dataclass(frozen=True)
class OptionResolution:
    option: EventOption
    source: OptionSource


def resolve_option(
    options: list[EventOption],
    requested_id: int | None = None,
) -> OptionResolution:
    """
    Pick the event option a query runs against.

    Raises:
        NotFound: the event has no options
        ConfigurationError: no default, several defaults, or unusable
            capacity/duration
    """
    if not options:
        raise NotFound("Event has no options configured")

    defaults = [opt for opt in options if opt.is_default]
    if not defaults:
        raise ConfigurationError("Event has no default option configured")
    if len(defaults) > 1:
        ids = ", ".join(str(opt.id) for opt in defaults)
        raise ConfigurationError(f"Event has several default options ({ids})")

    for opt in options:
        if opt.capacity <= 0:
            raise ConfigurationError(f"Event option {opt.id} has non-positive capacity {opt.capacity}")
        if opt.duration_minutes <= 0:
            raise ConfigurationError(
                f"Event option {opt.id} has non-positive duration {opt.duration_minutes}"
            )

    if requested_id is not None:
        for opt in options:
            if opt.id == requested_id:
                return OptionResolution(opt, OptionSource.FOUND)
        logger.info("Event option %s not found, using default %s", requested_id, defaults[0].id)

    return OptionResolution(defaults[0], OptionSource.USED_DEFAULT)


# ── Booking index ────────────────────────────────────────────────────────


class BookingIndex:
    """(date, "HH:MM") → number of countable bookings. Built once per query."""

    def __init__(self, bookings: list[Booking], config: BookingConfig | None = None):
        config = config or get_booking_config()
        countable = set(config.countable_statuses)

        self._counts: Counter[tuple[date, str]] = Counter()
        for b in bookings:
            if b.status.value not in countable:
                continue
            try:
                # "09:30:00" and "9:30" both land on the "09:30" slot
                slot = minutes_to_time_str(time_str_to_minutes(b.time_slot))
            except ValueError:
                logger.warning("Booking %s has unreadable time slot %r, not counted", b.id, b.time_slot)
                continue
            self._counts[(b.date, slot)] += 1

    def count(self, day: date, time_slot: str) -> int:
        return self._counts.get((day, time_slot), 0)

    def __len__(self) -> int:
        return sum(self._counts.values())


# ── Query context ────────────────────────────────────────────────────────


def utc_today() -> date:
    """Today at UTC midnight (the past-date cutoff for every query)."""
    return datetime.now(dt_timezone.utc).date()


@dataclass
class _QueryContext:
    event: EventRecord
    option: EventOption
    option_source: OptionSource
    rules: RuleIndex
    bookings: BookingIndex
    generator: SlotGenerator


def _load_context(
    store: AvailabilityStore,
    username: str,
    url_slug: str,
    event_option_id: int | None,
    start_date: date,
    end_date: date,
    config: BookingConfig,
) -> _QueryContext:
    """Batch-fetch everything a query needs. Any failure aborts the query."""
    event = store.find_event(username, url_slug)
    if event is None:
        raise NotFound(f"Event {username}/{url_slug} not found")

    resolution = resolve_option(store.find_event_options(event.id), event_option_id)
    option = resolution.option

    rules = store.find_rules_for_resource(event)
    bookings = store.find_bookings_in_range(option.id, start_date, end_date)

    logger.debug(
        "Loaded event %s option %s (%s): %d rules, %d bookings for %s..%s",
        event.id,
        option.id,
        resolution.source.value,
        len(rules),
        len(bookings),
        start_date.isoformat(),
        end_date.isoformat(),
    )

    return _QueryContext(
        event=event,
        option=option,
        option_source=resolution.source,
        rules=RuleIndex(rules),
        bookings=BookingIndex(bookings, config),
        generator=SlotGenerator(),
    )


def _day_slots(ctx: _QueryContext, day: date) -> list[TimeSlot] | None:
    """
    Slots for one day with availability flags.

    Returns None when no rule applies (day closed, excluded from results).
    """
    day_rules = ctx.rules.rules_for(day)
    if not day_rules:
        return None

    candidates = ctx.generator.slots_for(day_rules, ctx.option.duration_minutes)
    return [
        TimeSlot(
            start_time=slot.start,
            end_time=slot.end,
            available=ctx.bookings.count(day, slot.start) < ctx.option.capacity,
            source_timezone=slot.source_timezone,
        )
        for slot in candidates
    ]


def _iter_days(start_date: date, end_date: date):
    current = start_date
    while current <= end_date:
        yield current
        current += timedelta(days=1)


# ── Public queries ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class MonthAvailability:
    available_dates: list[date]
    availability_count: dict[date, int]
    event_option_id: int | None = None


def get_month_availability(
    store: AvailabilityStore,
    username: str,
    url_slug: str,
    year: int,
    month: int,
    event_option_id: int | None = None,
    timezone: str = "UTC",
    config: BookingConfig | None = None,
    today: date | None = None,
) -> MonthAvailability:
    """
    Dates of the month with at least one open slot, and how many.

    Dates with zero open slots are absent from availability_count.
    Counts are per the rules' authored calendar dates; timezone only
    affects display.
    """
    config = config or get_booking_config()
    today = today or utc_today()

    if not 1 <= month <= 12:
        raise InvalidRange(f"Month must be between 1 and 12, got {month}")

    first_day = date(year, month, 1)
    last_day = date(year, month, calendar.monthrange(year, month)[1])

    ctx = _load_context(store, username, url_slug, event_option_id, first_day, last_day, config)

    counts: dict[date, int] = {}
    for day in _iter_days(max(first_day, today), last_day):
        slots = _day_slots(ctx, day)
        if not slots:
            continue
        open_slots = sum(1 for s in slots if s.available)
        if open_slots > 0:
            counts[day] = open_slots

    logger.debug(
        "Month %04d-%02d for %s/%s (%s): %d available dates, slot cache %d hits / %d misses",
        year, month, username, url_slug, timezone, len(counts),
        ctx.generator.hits, ctx.generator.misses,
    )

    return MonthAvailability(
        available_dates=sorted(counts),
        availability_count=counts,
        event_option_id=ctx.option.id,
    )


def get_time_slots_for_date(
    store: AvailabilityStore,
    username: str,
    url_slug: str,
    target_date: date,
    event_option_id: int | None = None,
    config: BookingConfig | None = None,
    today: date | None = None,
) -> list[TimeSlot]:
    """All slots of one date, open and full, sorted by start time."""
    config = config or get_booking_config()
    today = today or utc_today()

    # Past dates are never served
    if target_date < today:
        return []

    ctx = _load_context(store, username, url_slug, event_option_id, target_date, target_date, config)
    return _day_slots(ctx, target_date) or []


def get_time_slots_for_range(
    store: AvailabilityStore,
    username: str,
    url_slug: str,
    start_date: date,
    end_date: date,
    event_option_id: int | None = None,
    config: BookingConfig | None = None,
    today: date | None = None,
) -> dict[date, list[TimeSlot]]:
    """
    Slots per date for [start_date, end_date].

    Closed and past dates are absent from the result.

    Raises:
        InvalidRange: start after end, or span over max_range_days
    """
    config = config or get_booking_config()
    today = today or utc_today()

    validate_range(start_date, end_date, config)

    ctx = _load_context(store, username, url_slug, event_option_id, start_date, end_date, config)

    result: dict[date, list[TimeSlot]] = {}
    for day in _iter_days(max(start_date, today), end_date):
        slots = _day_slots(ctx, day)
        if slots is not None:
            result[day] = slots

    return result


def validate_range(start_date: date, end_date: date, config: BookingConfig | None = None) -> None:
    config = config or get_booking_config()

    if start_date > end_date:
        raise InvalidRange("Start date must be before or equal to end date")
    if (end_date - start_date).days > config.max_range_days:
        raise InvalidRange(f"Date range cannot exceed {config.max_range_days} days")
