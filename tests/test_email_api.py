from booking_api.dependencies import get_mail_gateway
from booking_api.email_service import MailGateway
from booking_api.exceptions import MailProviderError
from booking_api.main import app


def test_send_email_success(client, mail_gateway):
    response = client.post("/mail/send-email", json={"to": "a@example.com", "eventName": "Demo"})

    assert response.status_code == 200
    assert response.json() == {"message": "Email sent successfully"}
    sent = mail_gateway.sent[0]
    assert sent.to == "a@example.com"
    assert sent.event_name == "Demo"
    assert sent.date is None


def test_send_email_passes_display_fields(client, mail_gateway):
    client.post(
        "/mail/send-email",
        json={
            "to": "a@example.com",
            "eventName": "Demo",
            "date": "10/1/2025",
            "timeRange": "09:00 to 10:00",
            "description": "Kickoff",
        },
    )

    sent = mail_gateway.sent[0]
    assert sent.time_range == "09:00 to 10:00"
    assert sent.description == "Kickoff"


def test_send_email_missing_fields(client, mail_gateway):
    response = client.post("/mail/send-email", json={})

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields: to, eventName"}
    assert mail_gateway.sent == []


def test_send_email_blank_event_name(client, mail_gateway):
    response = client.post("/mail/send-email", json={"to": "a@example.com", "eventName": ""})

    assert response.status_code == 400
    assert mail_gateway.sent == []


def test_send_email_relay_failure(client, mail_gateway):
    mail_gateway.error = MailProviderError("(554, b'Message rejected')", code=554)

    response = client.post("/mail/send-email", json={"to": "a@example.com", "eventName": "Demo"})

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Failed to send email"
    assert "Message rejected" in body["details"]


def test_send_email_rejects_line_breaks_in_header_fields(client, mail_gateway):
    response = client.post(
        "/mail/send-email",
        json={"to": "a@example.com", "eventName": "Demo\r\nBcc: victim@example.com"},
    )

    assert response.status_code == 400
    assert response.headers["content-type"] == "application/json"
    assert "line breaks" in response.json()["error"]
    assert mail_gateway.sent == []


def test_send_email_rejects_line_break_in_recipient(client, mail_gateway):
    response = client.post(
        "/mail/send-email", json={"to": "a@example.com\nb@example.com", "eventName": "Demo"}
    )

    assert response.status_code == 400
    assert mail_gateway.sent == []


def test_send_email_header_injection_with_real_gateway(client, mocker):
    smtp = mocker.patch("booking_api.email_service.smtplib.SMTP")
    app.dependency_overrides[get_mail_gateway] = lambda: MailGateway(
        "bookings@example.com", "app-password", "https://meet.google.com/abc"
    )

    response = client.post(
        "/mail/send-email",
        json={"to": "a@example.com", "eventName": "Demo\r\nBcc: victim@example.com"},
    )

    assert response.status_code == 400
    assert "error" in response.json()
    smtp.assert_not_called()
