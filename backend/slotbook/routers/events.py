# backend/slotbook/routers/events.py

from fastapi import APIRouter, Depends

from ..dependencies import get_store
from ..schemas.events import EventOptionRead, EventRead, EventResponse, OwnerRead
from ..services.event_data import get_event_data
from ..services.slots import SlotsDbStore

router = APIRouter(prefix="/events", tags=["events"])


@router.get("/{username}/{url_slug}", response_model=EventResponse)
def get_event(username: str, url_slug: str, store: SlotsDbStore = Depends(get_store)):
    data = get_event_data(store, username, url_slug)
    return EventResponse(
        event=EventRead(
            id=data.id,
            slug=data.slug,
            title=data.title,
            default_option_id=data.default_option_id,
            meeting_type=data.meeting_type,
            requires_confirmation=data.requires_confirmation,
            owners=[OwnerRead(name=o.name, role=o.role) for o in data.owners],
            event_options=[
                EventOptionRead(id=o.id, duration_minutes=o.duration_minutes, capacity=o.capacity)
                for o in data.event_options
            ],
        )
    )
