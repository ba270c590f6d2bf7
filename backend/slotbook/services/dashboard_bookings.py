# backend/slotbook/services/dashboard_bookings.py
"""
Owner dashboard: bookings of an event's default option, grouped by date.
"""

from collections import defaultdict
from datetime import date

from .slots import NotFound, SlotsDbStore, validate_range
from .slots.records import BookingWithPerson


def get_bookings_by_date(
    store: SlotsDbStore,
    username: str,
    url_slug: str,
    start_date: date,
    end_date: date,
) -> dict[date, list[BookingWithPerson]]:
    """
    Bookings (every status) for [start_date, end_date], grouped by date.

    Raises:
        InvalidRange: bad span
        NotFound: unknown event, or no default option
    """
    validate_range(start_date, end_date)

    event = store.find_event(username, url_slug)
    if event is None:
        raise NotFound(f"Event {username}/{url_slug} not found")

    default = next((o for o in store.find_event_options(event.id) if o.is_default), None)
    if default is None:
        raise NotFound("No default event option configured for this event")

    grouped: dict[date, list[BookingWithPerson]] = defaultdict(list)
    for item in store.find_bookings_with_persons(default.id, start_date, end_date):
        grouped[item.booking.date].append(item)

    return dict(grouped)
