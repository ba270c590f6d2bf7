# backend/slotbook/schemas/slots.py
"""
Pydantic schemas for availability/slots API.
"""

from datetime import date
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class MonthAvailabilityResponse(BaseModel):
    """Dates of a month that still have open slots."""
    available_dates: list[date]
    availability_count: dict[str, int] = Field(
        description="YYYY-MM-DD → open slots. Dates without open slots are absent."
    )

    model_config = {"from_attributes": True, "alias_generator": to_camel, "populate_by_name": True}


class TimeSlotOut(BaseModel):
    """One slot: source wall-clock times plus the requester's display time."""
    start_time: str  # "HH:MM" in source_timezone
    end_time: str
    available: bool
    source_timezone: str
    display_time: str
    display_timezone: str
    timezone_warning: str | None = None

    model_config = {"from_attributes": True, "alias_generator": to_camel, "populate_by_name": True}


class DateSlotsResponse(BaseModel):
    slots: list[TimeSlotOut]

    model_config = {"from_attributes": True, "alias_generator": to_camel, "populate_by_name": True}


class RangeSlotsResponse(BaseModel):
    slots_by_date: dict[str, list[TimeSlotOut]]

    model_config = {"from_attributes": True, "alias_generator": to_camel, "populate_by_name": True}
