# backend/slotbook/routers/slots.py
"""
Availability API endpoints.

GET /events/{username}/{url_slug}/availability - Dates of a month with open slots
GET /events/{username}/{url_slug}/slots        - Slots of one date
GET /events/{username}/{url_slug}/slots/range  - Slots of every date in a range (max 31 days)
"""

from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends, Query

from ..dependencies import get_store, requested_timezone
from ..schemas.slots import (
    DateSlotsResponse,
    MonthAvailabilityResponse,
    RangeSlotsResponse,
    TimeSlotOut,
)
from ..services.slots import (
    SlotsDbStore,
    get_month_availability,
    get_time_slots_for_date,
    get_time_slots_for_range,
    render_slots,
)
from ..services.slots.records import TimeSlot


router = APIRouter(prefix="/events", tags=["slots"])

TimeFormat = Literal["12h", "24h"]


@router.get("/{username}/{url_slug}/availability", response_model=MonthAvailabilityResponse)
def get_month_availability_view(
    username: str,
    url_slug: str,
    year: int = Query(..., ge=1000, le=9999),
    month: int = Query(..., ge=1, le=12),
    event_option_id: int | None = Query(None, alias="eventOptionId", gt=0),
    timezone: str = Depends(requested_timezone),
    store: SlotsDbStore = Depends(get_store),
):
    """Get available dates of a month with open-slot counts."""
    result = get_month_availability(
        store,
        username,
        url_slug,
        year,
        month,
        event_option_id=event_option_id,
        timezone=timezone,
    )

    return MonthAvailabilityResponse(
        available_dates=result.available_dates,
        availability_count={d.isoformat(): n for d, n in result.availability_count.items()},
    )


@router.get("/{username}/{url_slug}/slots", response_model=DateSlotsResponse)
def get_date_slots_view(
    username: str,
    url_slug: str,
    target_date: date = Query(..., alias="date"),
    event_option_id: int | None = Query(None, alias="eventOptionId", gt=0),
    time_format: TimeFormat = Query("24h", alias="timeFormat"),
    timezone: str = Depends(requested_timezone),
    store: SlotsDbStore = Depends(get_store),
):
    """Get time slots (open and full) for a date."""
    slots = get_time_slots_for_date(
        store,
        username,
        url_slug,
        target_date,
        event_option_id=event_option_id,
    )

    return DateSlotsResponse(slots=_to_out(slots, target_date, timezone, time_format))


@router.get("/{username}/{url_slug}/slots/range", response_model=RangeSlotsResponse)
def get_range_slots_view(
    username: str,
    url_slug: str,
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
    event_option_id: int | None = Query(None, alias="eventOptionId", gt=0),
    time_format: TimeFormat = Query("24h", alias="timeFormat"),
    timezone: str = Depends(requested_timezone),
    store: SlotsDbStore = Depends(get_store),
):
    """Get time slots grouped by date for a range of at most 31 days."""
    by_date = get_time_slots_for_range(
        store,
        username,
        url_slug,
        start_date,
        end_date,
        event_option_id=event_option_id,
    )

    return RangeSlotsResponse(
        slots_by_date={
            day.isoformat(): _to_out(slots, day, timezone, time_format)
            for day, slots in by_date.items()
        }
    )


def _to_out(
    slots: list[TimeSlot],
    on_date: date,
    timezone: str,
    time_format: str,
) -> list[TimeSlotOut]:
    rendered = render_slots(slots, on_date, timezone, time_format)
    return [
        TimeSlotOut(
            start_time=slot.start_time,
            end_time=slot.end_time,
            available=slot.available,
            source_timezone=slot.source_timezone,
            display_time=r.text,
            display_timezone=r.timezone,
            timezone_warning=str(r.warning) if r.warning else None,
        )
        for slot, r in zip(slots, rendered)
    ]
