# backend/slotbook/services/event_data.py
"""
Public event page data: title, owners and the bookable options.
"""

from dataclasses import dataclass, field

from .slots import AvailabilityStore, NotFound, resolve_option
from .slots.records import EventOption, Owner

# Fixed for now: every event is a Google Meet without manual confirmation
MEETING_TYPE = "google_meet"
REQUIRES_CONFIRMATION = False


@dataclass(frozen=True)
class EventData:
    id: str
    slug: str
    title: str
    default_option_id: int
    meeting_type: str = MEETING_TYPE
    requires_confirmation: bool = REQUIRES_CONFIRMATION
    owners: list[Owner] = field(default_factory=list)
    event_options: list[EventOption] = field(default_factory=list)


def get_event_data(store: AvailabilityStore, username: str, url_slug: str) -> EventData:
    """
    Raises:
        NotFound: unknown event, or event without options
        ConfigurationError: options exist but the default is missing/ambiguous
    """
    event = store.find_event(username, url_slug)
    if event is None:
        raise NotFound(f"Event {username}/{url_slug} not found")

    options = store.find_event_options(event.id)
    default = resolve_option(options).option

    return EventData(
        id=event.id,
        slug=event.slug,
        title=event.title,
        default_option_id=default.id,
        owners=list(event.owners),
        event_options=options,
    )
