import uuid

import pytest
from fastapi.testclient import TestClient

from booking_api.config import Settings
from booking_api.dependencies import get_calendar_gateway, get_mail_gateway, get_settings
from booking_api.main import app
from booking_api.schemas import CalendarEventResult

TEST_MEET_LINK = "https://meet.google.com/abc-defg-hij"


class FakeCalendarGateway:
    def __init__(self):
        self.inserted = []
        self.error = None

    def insert_event(self, event):
        if self.error:
            raise self.error
        self.inserted.append(event)
        return CalendarEventResult(id=f"evt-{uuid.uuid4().hex[:12]}")


class FakeMailGateway:
    def __init__(self):
        self.sent = []
        self.error = None

    def send_notification(self, notification):
        if self.error:
            raise self.error
        self.sent.append(notification)


@pytest.fixture
def settings():
    return Settings(
        credentials_json="{}",
        calendar_id="bookings@group.calendar.google.com",
        meeting_link=TEST_MEET_LINK,
        email_user="bookings@example.com",
        email_password="app-password",
    )


@pytest.fixture
def calendar_gateway():
    return FakeCalendarGateway()


@pytest.fixture
def mail_gateway():
    return FakeMailGateway()


@pytest.fixture
def client(settings, calendar_gateway, mail_gateway):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_calendar_gateway] = lambda: calendar_gateway
    app.dependency_overrides[get_mail_gateway] = lambda: mail_gateway
    yield TestClient(app)
    app.dependency_overrides.clear()
