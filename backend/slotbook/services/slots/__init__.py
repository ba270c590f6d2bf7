# backend/slotbook/services/slots/__init__.py
"""
Availability resolution engine.

rules.py        - which rules apply on a date (date-specific beats weekday)
calculator.py   - rule windows → fixed-length slots (memoized per query)
availability.py - slots vs bookings → month counts / date and range slot lists
timezones.py    - display conversion and 12h/24h formatting
"""

from .config import BookingConfig, get_booking_config
from .errors import (
    AvailabilityError,
    ConfigurationError,
    InvalidRange,
    NotFound,
    TimezoneConversionWarning,
)
from .rules import resolve_rules, resolve_scoped_rules, RuleIndex
from .calculator import generate_time_slots, SlotGenerator
from .db_store import AvailabilityStore, SlotsDbStore
from .availability import (
    BookingIndex,
    MonthAvailability,
    OptionResolution,
    OptionSource,
    get_month_availability,
    get_time_slots_for_date,
    get_time_slots_for_range,
    resolve_option,
    validate_range,
)
from .timezones import render, render_slots, convert_time, format_time, is_valid_timezone

__all__ = [
    "BookingConfig",
    "get_booking_config",
    "AvailabilityError",
    "ConfigurationError",
    "InvalidRange",
    "NotFound",
    "TimezoneConversionWarning",
    "resolve_rules",
    "resolve_scoped_rules",
    "RuleIndex",
    "generate_time_slots",
    "SlotGenerator",
    "AvailabilityStore",
    "SlotsDbStore",
    "BookingIndex",
    "MonthAvailability",
    "OptionResolution",
    "OptionSource",
    "get_month_availability",
    "get_time_slots_for_date",
    "get_time_slots_for_range",
    "resolve_option",
    "validate_range",
    "render",
    "render_slots",
    "convert_time",
    "format_time",
    "is_valid_timezone",
]
