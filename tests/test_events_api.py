import logging

import pytest

from booking_api.exceptions import CalendarProviderError
from tests.conftest import TEST_MEET_LINK


def _payload(**overrides):
    payload = {
        "summary": "Demo",
        "start": {"dateTime": "2025-01-10T09:00:00+05:30"},
        "end": {"dateTime": "2025-01-10T10:00:00+05:30"},
    }
    payload.update(overrides)
    return payload


def test_create_event_success(client, calendar_gateway):
    response = client.post("/api/event", json=_payload())

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Event added to calendar"
    assert data["eventId"]
    assert len(calendar_gateway.inserted) == 1


def test_create_event_builds_calendar_payload(client, calendar_gateway):
    response = client.post(
        "/api/event",
        json=_payload(
            description="Quarterly review",
            client_email="visitor@example.com",
            end={"dateTime": "2025-01-10T10:00:00+05:30", "timeZone": "Europe/London"},
        ),
    )

    assert response.status_code == 200
    event = calendar_gateway.inserted[0]
    assert event["summary"] == "Demo"
    assert event["description"] == (
        f"Quarterly review\nGoogle Meet Link: {TEST_MEET_LINK}\nClient Email: visitor@example.com"
    )
    assert event["start"] == {"dateTime": "2025-01-10T09:00:00+05:30", "timeZone": "Asia/Kolkata"}
    assert event["end"]["timeZone"] == "Europe/London"


def test_create_event_without_optional_fields_uses_placeholders(client, calendar_gateway):
    client.post("/api/event", json=_payload())

    description = calendar_gateway.inserted[0]["description"]
    assert description.startswith("\nGoogle Meet Link:")
    assert description.endswith("Client Email: N/A")


def test_create_event_end_before_start(client, calendar_gateway):
    response = client.post(
        "/api/event", json=_payload(end={"dateTime": "2025-01-10T08:00:00+05:30"})
    )

    assert response.status_code == 400
    assert "End time must be after start time" in response.json()["error"]
    assert calendar_gateway.inserted == []


@pytest.mark.parametrize(
    "payload",
    [
        {"start": {"dateTime": "2025-01-10T09:00:00+05:30"}, "end": {"dateTime": "2025-01-10T10:00:00+05:30"}},
        {"summary": "Demo", "end": {"dateTime": "2025-01-10T10:00:00+05:30"}},
        {"summary": "Demo", "start": {"dateTime": "2025-01-10T09:00:00+05:30"}},
        {"summary": "Demo", "start": {"timeZone": "Asia/Kolkata"}, "end": {"dateTime": "2025-01-10T10:00:00+05:30"}},
        {},
    ],
)
def test_create_event_missing_fields_never_calls_calendar(client, calendar_gateway, payload):
    response = client.post("/api/event", json=payload)

    assert response.status_code == 400
    assert response.json() == {
        "error": "Missing required fields: summary, start.dateTime, end.dateTime"
    }
    assert calendar_gateway.inserted == []


def test_create_event_invalid_datetime(client, calendar_gateway):
    response = client.post("/api/event", json=_payload(start={"dateTime": "tomorrow morning"}))

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid dateTime: Invalid dateTime format"}
    assert calendar_gateway.inserted == []


def test_create_event_malformed_body(client, calendar_gateway):
    response = client.post(
        "/api/event", content="{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request body"
    assert calendar_gateway.inserted == []


def test_create_event_is_not_idempotent(client, calendar_gateway):
    first = client.post("/api/event", json=_payload())
    second = client.post("/api/event", json=_payload())

    assert first.status_code == second.status_code == 200
    assert first.json()["eventId"] != second.json()["eventId"]
    assert len(calendar_gateway.inserted) == 2


def test_create_event_provider_failure_is_generic(client, calendar_gateway, caplog):
    caplog.set_level(logging.INFO)
    calendar_gateway.error = CalendarProviderError(
        "Failed to insert event: Not Found",
        code=404,
        details=[{"reason": "notFound", "message": "calendar-xyz-missing"}],
    )

    response = client.post("/api/event", json=_payload())

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to create event"}
    assert "calendar-xyz-missing" not in response.text
    assert "calendar-xyz-missing" in caplog.text
    assert "code=404" in caplog.text
    assert "[calendar]" in caplog.text


def test_cors_allows_any_origin(client):
    response = client.options(
        "/api/event",
        headers={
            "Origin": "https://booking.example.org",
            "Access-Control-Request-Method": "POST",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/").status_code == 200
