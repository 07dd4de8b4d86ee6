"""
Tests for outgoing email: markup safety and delivery failures.
"""

import logging
import smtplib

from travelplan.core.config import settings
from travelplan.services import email_service

EVIL_NAME = '<a href="https://evil.example">Click</a>'
EVIL_TRIP = "<script>x()</script>"


class OutboxSpy:
    def __init__(self):
        self.sent = []

    def __call__(self, to_email, subject, html):
        self.sent.append({"to": to_email, "subject": subject, "html": html})
        return True


def _refuse_connection(*args, **kwargs):
    raise smtplib.SMTPConnectError(421, "Service not available")


class TestInvitationMarkup:
    async def test_user_supplied_values_are_escaped(self, client, make_user, make_trip, headers, monkeypatch):
        outbox = OutboxSpy()
        monkeypatch.setattr(email_service, "send_email_html", outbox)
        alice = await make_user(name=EVIL_NAME)
        await make_user(name="<b>Bob</b>", email="bob@example.com")
        trip = await make_trip(alice, name=EVIL_TRIP)

        response = await client.post(
            f"/api/trips/{trip.id}/invite", json={"email": "bob@example.com"}, headers=headers(alice)
        )

        assert response.status_code == 201
        assert len(outbox.sent) == 1
        html = outbox.sent[0]["html"]
        assert "&lt;script&gt;x()&lt;/script&gt;" in html
        assert "&lt;a href=&quot;https://evil.example&quot;&gt;Click&lt;/a&gt;" in html
        assert "&lt;b&gt;Bob&lt;/b&gt;" in html
        assert "<script>" not in html
        assert 'href="https://evil.example"' not in html
        assert "<b>Bob</b>" not in html

    def test_description_is_escaped(self, monkeypatch):
        outbox = OutboxSpy()
        monkeypatch.setattr(email_service, "send_email_html", outbox)

        email_service.send_trip_invitation_email(
            invitee_email="friend@example.com",
            invitee_name="Traveler",
            inviter_name="Alice",
            trip_name="Porto",
            trip_description='<img src=x onerror="steal()">',
            is_new_user=True,
        )

        html = outbox.sent[0]["html"]
        assert "&lt;img src=x onerror=&quot;steal()&quot;&gt;" in html
        assert "<img" not in html

    def test_subject_is_a_single_line(self, monkeypatch):
        outbox = OutboxSpy()
        monkeypatch.setattr(email_service, "send_email_html", outbox)

        email_service.send_trip_invitation_email(
            invitee_email="friend@example.com",
            invitee_name="Traveler",
            inviter_name="Alice\r\nBcc: everyone@example.com",
            trip_name="Porto",
        )

        subject = outbox.sent[0]["subject"]
        assert "\n" not in subject and "\r" not in subject
        assert subject == "Alice Bcc: everyone@example.com invited you to Porto"


class TestDeliveryFailure:
    async def test_signup_succeeds_when_smtp_is_down(self, client, monkeypatch, caplog):
        monkeypatch.setattr(settings, "SMTP_HOST", "smtp.example.com")
        monkeypatch.setattr(email_service.smtplib, "SMTP_SSL", _refuse_connection)

        with caplog.at_level(logging.ERROR, logger="travelplan"):
            response = await client.post(
                "/api/auth/signup",
                json={"name": "Ana", "email": "ana@example.com", "password": "longenough"},
            )

        assert response.status_code == 201
        failures = [r for r in caplog.records if r.name == "travelplan" and r.levelno == logging.ERROR]
        assert any("Failed to send" in r.getMessage() and "ana@example.com" in r.getMessage() for r in failures)

    async def test_invite_succeeds_when_smtp_is_down(self, client, make_user, make_trip, headers, monkeypatch, caplog):
        alice = await make_user()
        trip = await make_trip(alice)
        monkeypatch.setattr(settings, "SMTP_HOST", "smtp.example.com")
        monkeypatch.setattr(email_service.smtplib, "SMTP_SSL", _refuse_connection)

        with caplog.at_level(logging.ERROR, logger="travelplan"):
            response = await client.post(
                f"/api/trips/{trip.id}/invite", json={"email": "friend@example.com"}, headers=headers(alice)
            )

        assert response.status_code == 201
        assert response.json()["receiver_email"] == "friend@example.com"
        failures = [r for r in caplog.records if r.name == "travelplan" and r.levelno == logging.ERROR]
        assert any("Failed to send" in r.getMessage() and "friend@example.com" in r.getMessage() for r in failures)

    def test_network_error_is_reported_not_raised(self, monkeypatch):
        def unreachable(*args, **kwargs):
            raise OSError("Network is unreachable")

        monkeypatch.setattr(settings, "SMTP_HOST", "smtp.example.com")
        monkeypatch.setattr(email_service.smtplib, "SMTP_SSL", unreachable)

        assert email_service.send_email_html("ana@example.com", "Hello", "<p>Hi</p>") is False
