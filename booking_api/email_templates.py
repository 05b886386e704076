"""
Plain-text Email Templates
Booking confirmation sent to the attendee after the calendar insert succeeds
"""

from typing import Optional

NO_DESCRIPTION = "No description provided"
NOT_SPECIFIED = "Not specified"


def event_confirmation_subject(event_name: str) -> str:
    return f"Event Confirmation: {event_name}"


def event_confirmation_template(
    event_name: str,
    meeting_link: str,
    date: Optional[str] = None,
    time_range: Optional[str] = None,
    description: Optional[str] = None,
) -> str:
    """Fixed plain-text confirmation body"""
    return f"""Dear Attendee,

Your event "{event_name}" has been scheduled.
Date: {date or NOT_SPECIFIED}
Time: {time_range or NOT_SPECIFIED}
Description: {description or NO_DESCRIPTION}
Google Meet Link: {meeting_link}

Regards,
Event Creator
"""
