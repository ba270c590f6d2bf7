# backend/slotbook/schemas/events.py

from typing import Literal, Optional
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class OwnerRead(BaseModel):
    name: str
    avatar_url: Optional[str] = None
    role: Optional[str] = None

    model_config = {"from_attributes": True, "alias_generator": to_camel, "populate_by_name": True}


class EventOptionRead(BaseModel):
    id: int
    duration_minutes: int
    capacity: int

    model_config = {"from_attributes": True, "alias_generator": to_camel, "populate_by_name": True}


class EventRead(BaseModel):
    id: str
    slug: str
    title: str
    default_option_id: int
    meeting_type: Literal["google_meet", "zoom", "phone", "in_person"]
    requires_confirmation: bool
    owners: list[OwnerRead]
    event_options: list[EventOptionRead]

    model_config = {"from_attributes": True, "alias_generator": to_camel, "populate_by_name": True}


class EventResponse(BaseModel):
    event: EventRead
