"""Confirmation and internal notification e-mails for registrations."""
import logging
import os
import smtplib
import ssl
from email.message import EmailMessage
from typing import List, Optional, Tuple

from src.models.registration import (
    ADVERTISEMENT_TIERS,
    CONFERENCE_DAYS,
    REGISTRATION_TYPES,
    SPECIAL_EVENTS,
    RegistrationRecord,
)
from src.services.pricing_service import (
    advertisement_price,
    registration_price,
    special_events_price,
    vendor_table_price,
)
from src.utils.date_utils import format_display_time

logger = logging.getLogger(__name__)

REG_NOTIFY_ENABLED = os.getenv("REG_NOTIFY_ENABLED", "true").strip().lower() in {"1", "true", "yes", "y"}
REG_NOTIFY_TO = os.getenv("REG_NOTIFY_TO", "")
SMTP_HOST = os.getenv("SMTP_HOST", "smtp.gmail.com")
SMTP_PORT = int(os.getenv("SMTP_PORT", "465"))
SMTP_USERNAME = os.getenv("SMTP_USERNAME", "")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
SMTP_FROM = os.getenv("SMTP_FROM", "")


def _labels(ids, catalog) -> str:
    return ", ".join(catalog.get(i, i) for i in ids) or "None"


def compose_confirmation(record: RegistrationRecord, payment_method: str = "") -> Tuple[str, str]:
    """
    Build subject and plain-text body describing a registration.

    Returns:
        Tuple of (subject, body)
    """
    reg_label = REGISTRATION_TYPES.get(record.registration_type, "Special Events Only")
    reg_price = registration_price(record.registration_type, record.quantity, record.day_to_day_dates)

    lines = [
        "NEW REGISTRATION DETAILS:",
        "",
        f"Registration ID: {record.id}",
        f"Timestamp: {format_display_time(record.timestamp)} UTC",
        "",
        "CONTACT INFORMATION:",
        f"Name: {record.full_name()}",
        f"Email: {record.email}",
        f"Phone: {record.phone}",
    ]
    address = ", ".join(p for p in (record.address, record.city, f"{record.state} {record.zip_code}".strip()) if p)
    if address:
        lines.append(f"Address: {address}")

    lines += [
        "",
        "REGISTRATION DETAILS:",
        f"Type: {reg_label} - ${reg_price}",
        f"Quantity: {record.quantity}",
        f"Payment Method: {payment_method or 'Not specified'}",
    ]
    if record.day_to_day_dates:
        lines.append(f"Day-to-Day Dates: {_labels(record.day_to_day_dates, CONFERENCE_DAYS)}")
    if record.attendee_names:
        lines += ["", "ATTENDEE NAMES:", record.attendee_names]
    if record.attendee_contacts:
        lines += ["", "ATTENDEE CONTACTS:", record.attendee_contacts]
    if record.vendor_tables > 0:
        lines.append(f"Vendor Tables: {record.vendor_tables} table(s) - ${vendor_table_price(record.vendor_tables)}")
    if record.advertisements:
        lines.append(
            f"Advertisements: {_labels(record.advertisements, ADVERTISEMENT_TIERS)}"
            f" - ${advertisement_price(record.advertisements)}"
        )
    if record.special_events:
        lines.append(
            f"Special Events: {_labels(record.special_events, SPECIAL_EVENTS)}"
            f" - ${special_events_price(record.special_events)}"
        )
    if record.additional_notes:
        lines += ["", "ADDITIONAL NOTES:", record.additional_notes]

    lines += ["", f"TOTAL AMOUNT DUE: ${record.total_amount}"]

    subject = f"Lectureship Registration - {record.full_name()} ({record.id})"
    return subject, "\n".join(lines) + "\n"


def _send_email_smtp(recipients: List[str], subject: str, text_body: str, reply_to: Optional[str] = None) -> bool:
    if not SMTP_USERNAME or not SMTP_PASSWORD:
        logger.warning("SMTP not configured: missing SMTP_USERNAME or SMTP_PASSWORD")
        return False

    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = SMTP_FROM or SMTP_USERNAME
    msg["To"] = ", ".join(recipients)
    if reply_to:
        msg["Reply-To"] = reply_to
    msg.set_content(text_body)

    try:
        if SMTP_PORT == 465:
            with smtplib.SMTP_SSL(SMTP_HOST, SMTP_PORT, context=ssl.create_default_context()) as s:
                s.login(SMTP_USERNAME, SMTP_PASSWORD)
                s.send_message(msg)
        else:
            with smtplib.SMTP(SMTP_HOST, SMTP_PORT) as s:
                s.starttls(context=ssl.create_default_context())
                s.login(SMTP_USERNAME, SMTP_PASSWORD)
                s.send_message(msg)
        logger.info("Registration email sent to %s", msg["To"])
        return True
    except (smtplib.SMTPException, OSError):
        logger.exception("SMTP send failed")
        return False


def send_registration_emails(record: RegistrationRecord, payment_method: str = "") -> bool:
    """
    Send the registrant's confirmation and the internal notification.

    Returns:
        True if every attempted e-mail was accepted

    Behavior:
        - Disabled when REG_NOTIFY_ENABLED is false
        - Failures are logged, never raised
    """
    if not REG_NOTIFY_ENABLED:
        return False

    subject, body = compose_confirmation(record, payment_method)
    ok = _send_email_smtp([record.email], subject, body)

    if REG_NOTIFY_TO:
        ok = _send_email_smtp([REG_NOTIFY_TO], f"NEW {subject}", body, reply_to=record.email) and ok
    if not ok:
        logger.warning("Registration email for %s was not fully delivered", record.id)
    return ok
