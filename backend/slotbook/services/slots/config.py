# backend/slotbook/services/slots/config.py
"""
Booking configuration for availability resolution.
"""

from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class BookingConfig:
    """
    Configuration for the availability engine.

    Attributes:
        max_range_days: Widest span (end - start) a range query may cover
        default_duration_minutes: Duration used when an option has no duration record
        countable_statuses: Booking statuses that consume slot capacity
        default_time_format: Rendering format when the caller gives none ("12h"/"24h")
    """
    max_range_days: int = 31
    default_duration_minutes: int = 30
    countable_statuses: tuple[str, ...] = ("pending", "confirmed")
    default_time_format: str = "24h"

    def __post_init__(self):
        """Validate configuration."""
        if self.max_range_days < 0:
            raise ValueError(f"max_range_days must be >= 0, got {self.max_range_days}")
        if self.default_duration_minutes <= 0:
            raise ValueError(
                f"default_duration_minutes must be > 0, got {self.default_duration_minutes}"
            )
        if self.default_time_format not in ("12h", "24h"):
            raise ValueError(
                f"default_time_format must be '12h' or '24h', got {self.default_time_format!r}"
            )


@lru_cache
def get_booking_config() -> BookingConfig:
    """Get booking configuration (singleton)."""
    return BookingConfig()


def time_str_to_minutes(value: str) -> int:
    """Convert "HH:MM" (or database-style "HH:MM:SS") to minutes since midnight."""
    try:
        parts = value.strip().split(":")
        if len(parts) == 3 and int(parts[2]) == 0:
            parts = parts[:2]
        hour_str, minute_str = parts
        hour, minute = int(hour_str), int(minute_str)
    except (ValueError, AttributeError):
        raise ValueError(f"Invalid time {value!r}, expected HH:MM") from None

    # 24:00 is allowed as an end-of-day boundary
    if not (0 <= minute < 60) or not (0 <= hour < 24 or (hour == 24 and minute == 0)):
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    return hour * 60 + minute


def minutes_to_time_str(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM"."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"
