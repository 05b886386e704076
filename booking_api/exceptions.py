"""Custom exceptions for the booking API."""

from typing import Optional


class BookingError(Exception):
    """Base exception for booking errors."""


class BookingValidationError(BookingError):
    """Raised when a booking or notification request is missing or malformed.

    Always detected before any provider call.
    """

    MISSING_FIELDS = "missing_fields"
    INVALID_DATETIME = "invalid_datetime"
    INVALID_TIME_OF_DAY = "invalid_time_of_day"
    INVALID_HEADER = "invalid_header"

    def __init__(self, reason: str, category: str = MISSING_FIELDS):
        super().__init__(reason)
        self.reason = reason
        self.category = category


class ProviderError(BookingError):
    """Raised when an external provider rejects or fails a call."""

    provider = "provider"

    def __init__(self, message: str, code: Optional[int] = None, details: Optional[list] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or []


class CalendarProviderError(ProviderError):
    """Raised when inserting a calendar event fails."""

    provider = "calendar"


class MailProviderError(ProviderError):
    """Raised when the mail relay rejects or fails a send."""

    provider = "mail"


class ConfigurationError(BookingError):
    """Raised when a required setting is absent or unusable. Fatal at startup."""
