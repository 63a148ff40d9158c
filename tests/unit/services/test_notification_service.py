"""Unit tests for notification_service."""
import smtplib

import pytest
from unittest.mock import patch

from src.models.registration import RegistrationRecord
from src.services import notification_service
from src.services.notification_service import compose_confirmation, send_registration_emails


@pytest.fixture
def record():
    return RegistrationRecord(
        id="reg_1736500000000_abc123xyz",
        timestamp="2026-01-10T09:00:00.000Z",
        first_name="Grace",
        last_name="Hopper",
        email="grace@example.com",
        phone="555-0199",
        city="Macon",
        state="GA",
        registration_type="group-5-early",
        quantity=5,
        attendee_names="Grace\nAda\nKaty\nJoan\nMary",
        attendee_contacts="Ada - 555-0100",
        special_events=("memorial-banquet",),
        vendor_tables=1,
        advertisements=("half-page-bw",),
        total_amount=1375,
    )


@pytest.fixture
def smtp_configured(monkeypatch):
    monkeypatch.setattr(notification_service, "REG_NOTIFY_ENABLED", True)
    monkeypatch.setattr(notification_service, "SMTP_USERNAME", "sender@example.com")
    monkeypatch.setattr(notification_service, "SMTP_PASSWORD", "secret")
    monkeypatch.setattr(notification_service, "SMTP_PORT", 465)
    monkeypatch.setattr(notification_service, "REG_NOTIFY_TO", "")


class TestComposeConfirmation:
    """Test compose_confirmation function."""

    def test_subject_names_registrant(self, record):
        subject, _ = compose_confirmation(record)
        assert subject == "Lectureship Registration - Grace Hopper (reg_1736500000000_abc123xyz)"

    def test_body_lists_purchases(self, record):
        _, body = compose_confirmation(record, payment_method="Check")

        assert "Type: Group 5 People Early Bird - $925" in body
        assert "Vendor Tables: 1 table(s) - $250" in body
        assert "Advertisements: Half Page Black & White - $125" in body
        assert "Special Events: John O. Williams Memorial Banquet - $75" in body
        assert "Payment Method: Check" in body
        assert "ATTENDEE NAMES:" in body
        assert body.rstrip().endswith("TOTAL AMOUNT DUE: $1375")

    def test_vendor_only_record(self, record):
        vendor_only = RegistrationRecord(
            id="reg_v", timestamp=record.timestamp, first_name="V", last_name="Endor",
            email="v@example.com", phone="1", vendor_tables=2, total_amount=350,
        )
        _, body = compose_confirmation(vendor_only)

        assert "Type: Special Events Only - $0" in body
        assert "Payment Method: Not specified" in body
        assert "ATTENDEE NAMES:" not in body


class TestSendRegistrationEmails:
    """Test send_registration_emails function."""

    def test_disabled(self, record, monkeypatch):
        monkeypatch.setattr(notification_service, "REG_NOTIFY_ENABLED", False)

        with patch("smtplib.SMTP_SSL") as mock_smtp:
            assert send_registration_emails(record) is False
        mock_smtp.assert_not_called()

    def test_missing_credentials(self, record, monkeypatch, smtp_configured):
        monkeypatch.setattr(notification_service, "SMTP_PASSWORD", "")

        with patch("smtplib.SMTP_SSL") as mock_smtp:
            assert send_registration_emails(record) is False
        mock_smtp.assert_not_called()

    def test_sends_confirmation(self, record, smtp_configured):
        with patch("smtplib.SMTP_SSL") as mock_smtp:
            assert send_registration_emails(record) is True

        server = mock_smtp.return_value.__enter__.return_value
        server.login.assert_called_once_with("sender@example.com", "secret")
        message = server.send_message.call_args[0][0]
        assert message["To"] == "grace@example.com"

    def test_internal_copy(self, record, monkeypatch, smtp_configured):
        monkeypatch.setattr(notification_service, "REG_NOTIFY_TO", "office@example.com")

        with patch("smtplib.SMTP_SSL") as mock_smtp:
            send_registration_emails(record)

        server = mock_smtp.return_value.__enter__.return_value
        sent = [call[0][0] for call in server.send_message.call_args_list]
        assert [m["To"] for m in sent] == ["grace@example.com", "office@example.com"]
        assert sent[1]["Subject"].startswith("NEW ")
        assert sent[1]["Reply-To"] == "grace@example.com"

    def test_starttls_on_other_ports(self, record, monkeypatch, smtp_configured):
        monkeypatch.setattr(notification_service, "SMTP_PORT", 587)

        with patch("smtplib.SMTP") as mock_smtp:
            assert send_registration_emails(record) is True

        mock_smtp.return_value.__enter__.return_value.starttls.assert_called_once()

    def test_smtp_failure_logged_not_raised(self, record, smtp_configured, caplog):
        with patch("smtplib.SMTP_SSL", side_effect=smtplib.SMTPException("refused")):
            assert send_registration_emails(record) is False

        assert "SMTP send failed" in caplog.text
