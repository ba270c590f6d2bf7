# backend/slotbook/routers/dashboard.py
"""
Owner dashboard endpoints.

GET /dashboard/events/{url_slug}/bookings - Bookings of the default option grouped by date
"""

from datetime import date

from fastapi import APIRouter, Depends, Query

from ..dependencies import get_store
from ..schemas.bookings import BookingsByDateResponse, BookingWithPersonRead, PersonRead
from ..services.dashboard_bookings import get_bookings_by_date
from ..services.slots import SlotsDbStore

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/events/{url_slug}/bookings", response_model=BookingsByDateResponse)
def list_event_bookings(
    url_slug: str,
    # TODO: take the username from the authenticated session once auth lands
    username: str = Query(..., min_length=1),
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
    store: SlotsDbStore = Depends(get_store),
):
    grouped = get_bookings_by_date(store, username, url_slug, start_date, end_date)

    return BookingsByDateResponse(
        bookings_by_date={
            day.isoformat(): [
                BookingWithPersonRead(
                    id=item.booking.id,
                    event_option_id=item.booking.event_option_id,
                    date=item.booking.date,
                    time_slot=item.booking.time_slot,
                    status=item.booking.status.value,
                    person=(
                        PersonRead(
                            first_name=item.person.first_name,
                            last_name=item.person.last_name,
                        )
                        if item.person
                        else None
                    ),
                )
                for item in items
            ]
            for day, items in grouped.items()
        }
    )
