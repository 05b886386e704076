"""Shared validation utilities used by both the booking endpoint and the booking form client"""

import re
from datetime import date, datetime, timedelta, timezone
from typing import Union

from ..exceptions import BookingValidationError
from ..schemas import EventRequest

DEFAULT_OFFSET = "+05:30"

MISSING_EVENT_FIELDS = "Missing required fields: summary, start.dateTime, end.dateTime"
INVALID_DATETIME_FORMAT = "Invalid dateTime: Invalid dateTime format"
END_BEFORE_START = "Invalid dateTime: End time must be after start time"

_TIME_OF_DAY_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})\Z")
_OFFSET_PATTERN = re.compile(r"^([+-])(\d{2}):(\d{2})\Z")


def offset_to_tzinfo(offset: str) -> timezone:
    """Convert a "+HH:MM" / "-HH:MM" string into a fixed-offset tzinfo"""
    match = _OFFSET_PATTERN.match(offset or "")
    if not match:
        raise ValueError(f"Invalid UTC offset: {offset!r}")

    sign, hours, minutes = match.groups()
    if int(hours) > 23 or int(minutes) > 59:
        raise ValueError(f"Invalid UTC offset: {offset!r}")
    delta = timedelta(hours=int(hours), minutes=int(minutes))
    return timezone(-delta if sign == "-" else delta)


def parse_time_of_day(time_string: str) -> tuple[int, int]:
    """
    Parse an "HH:MM" time of day.

    Raises:
        BookingValidationError: If the string is malformed or out of range
    """
    match = _TIME_OF_DAY_PATTERN.match((time_string or "").strip())
    if not match:
        raise BookingValidationError(
            f"Invalid time of day: {time_string}", BookingValidationError.INVALID_TIME_OF_DAY
        )

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise BookingValidationError(
            f"Invalid time of day: {time_string}", BookingValidationError.INVALID_TIME_OF_DAY
        )
    return hours, minutes


def combine_date_time(
    day: Union[date, datetime], time_string: str, offset: str = DEFAULT_OFFSET
) -> str:
    """
    Combine a calendar date and an "HH:MM" time of day into a fixed-offset timestamp.

    The offset is applied as-is; the runtime's local timezone is never consulted.

    Args:
        day: Calendar date (a datetime contributes only its date part)
        time_string: Time of day, hours 0-23 and minutes 0-59
        offset: UTC offset in "+HH:MM" form

    Returns:
        Timestamp string "YYYY-MM-DDTHH:MM:00+HH:MM"
    """
    hours, minutes = parse_time_of_day(time_string)
    offset_to_tzinfo(offset)

    if isinstance(day, datetime):
        day = day.date()

    return f"{day.isoformat()}T{hours:02d}:{minutes:02d}:00{offset}"


def parse_event_timestamp(value: str, default_offset: str = DEFAULT_OFFSET) -> datetime:
    """
    Parse an ISO-8601 event timestamp into an aware datetime.

    Timestamps without an offset are read in the default fixed offset.
    """
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise BookingValidationError(
            INVALID_DATETIME_FORMAT, BookingValidationError.INVALID_DATETIME
        ) from e

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=offset_to_tzinfo(default_offset))
    return parsed


def validate_event_request(
    request: EventRequest, default_offset: str = DEFAULT_OFFSET
) -> EventRequest:
    """
    Check a booking request before any calendar call is made.

    Returns:
        The request, unchanged, when it is valid

    Raises:
        BookingValidationError: With a missing-fields or invalid-dateTime reason
    """
    start_value = request.start.date_time if request.start else None
    end_value = request.end.date_time if request.end else None

    if (
        not isinstance(request.summary, str)
        or not request.summary.strip()
        or not start_value
        or not end_value
    ):
        raise BookingValidationError(MISSING_EVENT_FIELDS, BookingValidationError.MISSING_FIELDS)

    start = parse_event_timestamp(start_value, default_offset)
    end = parse_event_timestamp(end_value, default_offset)

    if end <= start:
        raise BookingValidationError(END_BEFORE_START, BookingValidationError.INVALID_DATETIME)

    return request
