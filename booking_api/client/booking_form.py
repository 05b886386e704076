"""
Booking form client
Collects the visitor's input, books the event, then asks for the confirmation email
"""

import asyncio
import logging
from datetime import date, datetime
from enum import Enum
from typing import Optional

import httpx

from ..exceptions import BookingValidationError
from ..schemas import EventDateTime, EventRequest
from ..shared.validators import DEFAULT_OFFSET, combine_date_time, validate_event_request

logger = logging.getLogger(__name__)

SUCCESS_DISPLAY_SECONDS = 7.0


class FormState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"


def format_booking_time(moment: datetime) -> str:
    """Display form like "10 Jan 2025, 9:00 am" (wall-clock time of the booking)"""
    hour = moment.hour % 12 or 12
    meridiem = "am" if moment.hour < 12 else "pm"
    return f"{moment.day} {moment.strftime('%b %Y')}, {hour}:{moment.minute:02d} {meridiem}"


def format_display_date(day: date) -> str:
    """Day/month/year without padding, e.g. "10/1/2025\""""
    return f"{day.day}/{day.month}/{day.year}"


class BookingForm:
    """
    Client-side booking flow: Idle -> Submitting -> Success | Error.

    A failed confirmation email never reverts a successful booking; it only
    sets ``warning``.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        meeting_link: str = "",
        http_client: Optional[httpx.AsyncClient] = None,
        success_display_seconds: float = SUCCESS_DISPLAY_SECONDS,
        offset: str = DEFAULT_OFFSET,
        time_zone: str = "Asia/Kolkata",
    ):
        self.base_url = base_url.rstrip("/")
        self.meeting_link = meeting_link
        self.success_display_seconds = success_display_seconds
        self.offset = offset
        self.time_zone = time_zone

        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient()
        self._reset_handle: Optional[asyncio.TimerHandle] = None

        self.selected_date: date = date.today()
        self.start_time = "09:00"
        self.end_time = "10:00"
        self.event_name = ""
        self.event_description = ""
        self.attendee_email = ""

        self.state = FormState.IDLE
        self.success_message = ""
        self.error_message = ""
        self.warning = ""
        self.event_id: Optional[str] = None

    async def __aenter__(self) -> "BookingForm":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._reset_handle is not None:
            self._reset_handle.cancel()
            self._reset_handle = None
        if self._owns_client:
            await self._client.aclose()

    def _fail(self, message: str) -> FormState:
        self.state = FormState.ERROR
        self.error_message = message
        return self.state

    async def submit(self) -> FormState:
        """Run one booking attempt and return the resulting state"""
        if self.state is FormState.SUBMITTING:
            return self.state

        self.error_message = ""
        self.warning = ""

        if not self.event_name:
            self.error_message = "Please enter an event name"
            return self.state
        if not self.attendee_email:
            self.error_message = "Please enter your email"
            return self.state

        self.state = FormState.SUBMITTING
        try:
            return await self._book()
        except Exception as e:
            logger.exception("Unexpected error while booking")
            return self._fail(f"Error booking event: {e}")

    async def _book(self) -> FormState:
        try:
            start_date_time = combine_date_time(self.selected_date, self.start_time, self.offset)
            end_date_time = combine_date_time(self.selected_date, self.end_time, self.offset)
            request = validate_event_request(
                EventRequest(
                    summary=self.event_name,
                    description=self.event_description,
                    start=EventDateTime(date_time=start_date_time, time_zone=self.time_zone),
                    end=EventDateTime(date_time=end_date_time, time_zone=self.time_zone),
                    client_email=self.attendee_email,
                ),
                default_offset=self.offset,
            )
        except BookingValidationError as e:
            return self._fail(e.reason.removeprefix("Invalid dateTime: "))

        payload = request.model_dump(by_alias=True, exclude_none=True)
        logger.debug(f"Event payload sent to backend: {payload}")

        try:
            response = await self._client.post(f"{self.base_url}/api/event", json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Fetch error: {e}")
            return self._fail(f"Error booking event: {e}")

        if response.is_error:
            return self._fail(f"Error booking event: {self._error_from(response)}")

        try:
            data = response.json()
        except ValueError:
            logger.error(f"Non-JSON response: {response.text}")
            return self._fail(
                "Error booking event: "
                f"Server returned non-JSON response (Status: {response.status_code})"
            )
        if not isinstance(data, dict):
            return self._fail(f"Error booking event: Unexpected response {data!r}")

        self.event_id = data.get("eventId")
        booked_at = datetime.fromisoformat(start_date_time)
        self.success_message = (
            f'Event "{self.event_name}" booked for {format_booking_time(booked_at)}. '
            f"Google Meet: {self.meeting_link}"
        )
        self.state = FormState.SUCCESS

        # booking stands even if the confirmation goes wrong
        try:
            await self._send_confirmation()
        except Exception:
            logger.exception("Error sending email")
            self.warning = "Error sending email."
        self._clear_inputs()
        self._schedule_reset()
        return self.state

    async def _send_confirmation(self) -> None:
        try:
            response = await self._client.post(
                f"{self.base_url}/mail/send-email",
                json={
                    "to": self.attendee_email,
                    "eventName": self.event_name,
                    "date": format_display_date(self.selected_date),
                    "timeRange": f"{self.start_time} to {self.end_time}",
                    "description": self.event_description,
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"Error sending email: {e}")
            self.warning = "Error sending email."
            return

        if response.is_error:
            self.warning = f"Failed to send email: {self._error_from(response)}"

    @staticmethod
    def _error_from(response: httpx.Response) -> str:
        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            logger.error(f"Non-JSON response: {response.text}")
            return f"Server returned non-JSON response (Status: {response.status_code})"

        try:
            data = response.json()
        except ValueError:
            logger.error(f"Undecodable JSON error body (Status: {response.status_code})")
            return f"HTTP error {response.status_code}"

        if isinstance(data, dict) and data.get("error"):
            return str(data["error"])
        return f"HTTP error {response.status_code}"

    def _clear_inputs(self) -> None:
        self.event_name = ""
        self.event_description = ""
        self.attendee_email = ""

    def _schedule_reset(self) -> None:
        if self._reset_handle is not None:
            self._reset_handle.cancel()
        loop = asyncio.get_running_loop()
        self._reset_handle = loop.call_later(self.success_display_seconds, self._reset_to_idle)

    def _reset_to_idle(self) -> None:
        self._reset_handle = None
        self.success_message = ""
        if self.state is FormState.SUCCESS:
            self.state = FormState.IDLE
