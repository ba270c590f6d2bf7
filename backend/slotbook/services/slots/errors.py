# backend/slotbook/services/slots/errors.py
"""
Error taxonomy of the availability engine.

NotFound / ConfigurationError / InvalidRange abort the whole query.
TimezoneConversionWarning is never raised: it rides along with the
rendered value and the caller decides whether to show it.
"""


class AvailabilityError(Exception):
    """Base class for errors that abort an availability query."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(AvailabilityError):
    """Resource, event or event options are absent."""

    status_code = 404


class ConfigurationError(AvailabilityError):
    """Event options exist but are unusable (no default, bad capacity...)."""

    status_code = 500


class InvalidRange(AvailabilityError):
    """Requested span is inverted, too wide, or not a calendar month."""

    status_code = 400


class TimezoneConversionWarning(UserWarning):
    """Slot time could not be converted; the source-zone time is shown instead."""

    def __init__(self, timezone: str, reason: str):
        super().__init__(f"Cannot convert to time zone {timezone!r}: {reason}")
        self.timezone = timezone
        self.reason = reason
