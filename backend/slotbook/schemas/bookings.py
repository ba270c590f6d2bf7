# backend/slotbook/schemas/bookings.py

from datetime import date
from typing import Literal, Optional
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class PersonRead(BaseModel):
    first_name: str
    last_name: str

    model_config = {"from_attributes": True, "alias_generator": to_camel, "populate_by_name": True}


class BookingWithPersonRead(BaseModel):
    id: int
    event_option_id: int
    date: date
    time_slot: str  # "HH:MM"
    status: Literal["pending", "confirmed", "cancelled", "completed", "no_show"]
    person: Optional[PersonRead] = None

    model_config = {"from_attributes": True, "alias_generator": to_camel, "populate_by_name": True}


class BookingsByDateResponse(BaseModel):
    bookings_by_date: dict[str, list[BookingWithPersonRead]]

    model_config = {"from_attributes": True, "alias_generator": to_camel, "populate_by_name": True}
