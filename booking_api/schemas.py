from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class EventDateTime(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date_time: Optional[str] = Field(None, alias="dateTime")
    time_zone: Optional[str] = Field(None, alias="timeZone")


class EventRequest(BaseModel):
    """Booking request as posted by the form. Presence checks happen in the validator."""

    summary: Optional[str] = None
    description: Optional[str] = None
    start: Optional[EventDateTime] = None
    end: Optional[EventDateTime] = None
    client_email: Optional[str] = None


class CalendarEventResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str


class EventCreatedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = "Event added to calendar"
    event_id: str = Field(..., alias="eventId")


class MailNotification(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    to: Optional[str] = None
    event_name: Optional[str] = Field(None, alias="eventName")
    date: Optional[str] = None
    time_range: Optional[str] = Field(None, alias="timeRange")
    description: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[Any] = None
