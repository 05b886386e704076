"""
Google Calendar Service
Inserts booking events on the shared calendar using a service account
"""

import json
import logging
from typing import Any, Dict, Optional

import google_auth_httplib2
import httplib2
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import HttpRequest

from ..config import GOOGLE_CALENDAR_SCOPES, Settings
from ..exceptions import CalendarProviderError, ConfigurationError
from ..schemas import CalendarEventResult, EventRequest

logger = logging.getLogger(__name__)


def build_calendar_event(
    request: EventRequest, meeting_link: str, default_time_zone: str = "Asia/Kolkata"
) -> Dict[str, Any]:
    """
    Build the Calendar API event body for a validated booking request.

    The description gets the meeting link and the requester's email appended.
    """
    description = (
        f"{request.description or ''}\n"
        f"Google Meet Link: {meeting_link}\n"
        f"Client Email: {request.client_email or 'N/A'}"
    )

    return {
        "summary": request.summary,
        "description": description,
        "start": {
            "dateTime": request.start.date_time,
            "timeZone": request.start.time_zone or default_time_zone,
        },
        "end": {
            "dateTime": request.end.date_time,
            "timeZone": request.end.time_zone or default_time_zone,
        },
    }


class CalendarGateway:
    """Single authenticated handle on one Google Calendar, shared by all requests."""

    def __init__(self, credentials, calendar_id: str, service=None):
        self.credentials = credentials
        self.calendar_id = calendar_id
        self.service = service or self._build_service(credentials)

    @classmethod
    def from_settings(cls, settings: Settings) -> "CalendarGateway":
        """
        Create the gateway from the service-account JSON in settings.

        Raises:
            ConfigurationError: If the credential JSON is malformed or rejected
        """
        try:
            info = json.loads(settings.credentials_json)
            credentials = service_account.Credentials.from_service_account_info(
                info, scopes=GOOGLE_CALENDAR_SCOPES
            )
        except (ValueError, KeyError, TypeError) as e:
            raise ConfigurationError(f"Invalid calendar service-account credentials: {e}") from e

        logger.info(
            f"✅ Google Calendar gateway ready for {settings.calendar_id} "
            f"as {credentials.service_account_email}"
        )
        return cls(credentials, settings.calendar_id)

    @staticmethod
    def _build_service(credentials):
        # httplib2.Http is not thread-safe, so every request gets its own transport
        def build_request(http, *args, **kwargs):
            authorized_http = google_auth_httplib2.AuthorizedHttp(
                credentials, http=httplib2.Http()
            )
            return HttpRequest(authorized_http, *args, **kwargs)

        return build(
            "calendar",
            "v3",
            credentials=credentials,
            requestBuilder=build_request,
            cache_discovery=False,
        )

    def insert_event(self, event: Dict[str, Any]) -> CalendarEventResult:
        """
        Insert one event on the configured calendar.

        Returns:
            CalendarEventResult carrying the provider-assigned event ID

        Raises:
            CalendarProviderError: On any provider or transport failure
        """
        logger.info(f"Event object sent to Google Calendar API: {json.dumps(event, indent=2)}")

        try:
            created = (
                self.service.events()
                .insert(calendarId=self.calendar_id, body=event)
                .execute()
            )
        except HttpError as e:
            details = e.error_details if isinstance(e.error_details, list) else []
            logger.error(
                "❌ Error at insert_event: %s",
                {"message": e.reason, "code": e.status_code, "details": e.error_details},
            )
            raise CalendarProviderError(
                f"Failed to insert event: {e.reason}", code=e.status_code, details=details
            ) from e
        except Exception as e:
            logger.error("❌ Error at insert_event: %s", {"message": str(e), "code": None})
            raise CalendarProviderError(f"Failed to insert event: {e}") from e

        event_id: Optional[str] = (created or {}).get("id")
        if not event_id:
            logger.error(f"❌ Calendar API response has no event id: {created}")
            raise CalendarProviderError("Failed to insert event: response has no event id")

        logger.info(f"✅ Google Calendar event created: {event_id}")
        return CalendarEventResult(id=event_id)
