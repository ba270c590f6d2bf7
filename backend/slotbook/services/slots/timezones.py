# backend/slotbook/services/slots/timezones.py
"""
Time-zone conversion and display formatting for slots.

Slots are authored as wall-clock times in the rule's zone
(TimeSlot.source_timezone). Display converts (date, time, source zone)
into an instant and reads the wall clock back in the requester's zone.

An unknown zone never fails the request: the unconverted time is
rendered and a TimezoneConversionWarning is attached.
"""

import logging
import re
from datetime import date, datetime, timedelta
from functools import lru_cache
from typing import NamedTuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .config import minutes_to_time_str, time_str_to_minutes
from .errors import TimezoneConversionWarning
from .records import TimeSlot

logger = logging.getLogger(__name__)

TIME_FORMATS = ("12h", "24h")

# Plausible IANA identifier: "UTC", "Europe/Madrid", "America/Argentina/Buenos_Aires", "Etc/GMT+5"
_TZ_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_+\-]*(/[A-Za-z0-9_+\-]+)*$")


class ZonedTime(NamedTuple):
    date: date
    time: str  # "HH:MM"


class RenderedTime(NamedTuple):
    text: str
    timezone: str  # zone the text is expressed in
    warning: TimezoneConversionWarning | None = None


def is_plausible_timezone(name: str | None) -> bool:
    """Cheap syntactic check used by request validation."""
    return bool(name) and len(name) <= 64 and bool(_TZ_NAME_RE.match(name))


@lru_cache(maxsize=256)
def get_zone(name: str) -> ZoneInfo:
    """
    ZoneInfo lookup. Raises ValueError for implausible names and
    ZoneInfoNotFoundError for anything tzdata cannot load (including
    region directories such as "America").
    """
    if not is_plausible_timezone(name):
        raise ValueError(f"Implausible time zone name {name!r}")
    try:
        return ZoneInfo(name)
    except (OSError, ValueError) as e:
        raise ZoneInfoNotFoundError(f"No time zone found with key {name}") from e


def is_valid_timezone(name: str | None) -> bool:
    try:
        get_zone(name)
    except (ZoneInfoNotFoundError, ValueError, TypeError):
        return False
    return True


def convert_time(
    time_str: str,
    on_date: date,
    source_timezone: str,
    target_timezone: str,
) -> ZonedTime:
    """
    Convert a wall-clock time on on_date from source to target zone.

    Returns the target-zone date too, since the conversion may cross
    midnight. Raises ZoneInfoNotFoundError / ValueError for unknown zones.
    """
    minutes = time_str_to_minutes(time_str)
    if source_timezone == target_timezone:
        return ZonedTime(on_date, minutes_to_time_str(minutes))

    source = get_zone(source_timezone)
    target = get_zone(target_timezone)

    local = datetime.combine(on_date, datetime.min.time()) + timedelta(minutes=minutes)
    converted = local.replace(tzinfo=source).astimezone(target)
    return ZonedTime(converted.date(), f"{converted.hour:02d}:{converted.minute:02d}")


def format_time(time_str: str, time_format: str = "24h") -> str:
    """
    Format "HH:MM" for display.

    12h: 0 → 12am, 1-11 → am, 12 → 12pm, 13-23 → (h-12)pm. Minutes always padded.
    """
    if time_format not in TIME_FORMATS:
        raise ValueError(f"time_format must be one of {TIME_FORMATS}, got {time_format!r}")

    minutes = time_str_to_minutes(time_str) % (24 * 60)
    hour, minute = divmod(minutes, 60)
    if time_format == "24h":
        return f"{hour:02d}:{minute:02d}"

    suffix = "am" if hour < 12 else "pm"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minute:02d}{suffix}"


def render_time(
    time_str: str,
    on_date: date,
    source_timezone: str,
    target_timezone: str,
    time_format: str = "24h",
) -> RenderedTime:
    """Convert and format one wall-clock time, degrading to the source zone on failure."""
    try:
        zoned = convert_time(time_str, on_date, source_timezone, target_timezone)
    except (ZoneInfoNotFoundError, ValueError) as e:
        warning = TimezoneConversionWarning(target_timezone, str(e))
        return RenderedTime(format_time(time_str, time_format), source_timezone, warning)

    return RenderedTime(format_time(zoned.time, time_format), target_timezone)


def render(
    slot: TimeSlot,
    on_date: date,
    target_timezone: str,
    time_format: str = "24h",
) -> RenderedTime:
    """Render a slot's start time in target_timezone."""
    return render_time(slot.start_time, on_date, slot.source_timezone, target_timezone, time_format)


def render_slots(
    slots: list[TimeSlot],
    on_date: date,
    target_timezone: str,
    time_format: str = "24h",
) -> list[RenderedTime]:
    """Render a day's slots; conversion problems are logged once per call."""
    rendered = [render(slot, on_date, target_timezone, time_format) for slot in slots]

    warning = next((r.warning for r in rendered if r.warning is not None), None)
    if warning is not None:
        logger.warning(
            "Rendering %s slots in source time zone: %s",
            on_date.isoformat(),
            warning,
        )
    return rendered
