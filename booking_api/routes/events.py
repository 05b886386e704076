"""
Event Booking Routes
Validates a booking request and inserts it on the shared Google Calendar
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from ..config import Settings
from ..dependencies import get_calendar_gateway, get_settings
from ..schemas import ErrorResponse, EventCreatedResponse, EventRequest
from ..services.google_calendar_service import CalendarGateway, build_calendar_event
from ..shared.validators import validate_event_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Events"])


@router.post(
    "/event",
    response_model=EventCreatedResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_event(
    data: EventRequest,
    calendar: CalendarGateway = Depends(get_calendar_gateway),
    settings: Settings = Depends(get_settings),
):
    """Book an event on the shared calendar"""
    validate_event_request(data, default_offset=settings.timezone_offset)

    event = build_calendar_event(
        data,
        meeting_link=settings.meeting_link,
        default_time_zone=settings.default_time_zone,
    )

    created = await run_in_threadpool(calendar.insert_event, event)
    logger.info(f"Event booked: {created.id} for {data.client_email or 'N/A'}")

    return EventCreatedResponse(event_id=created.id)
