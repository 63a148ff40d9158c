"""CSV export and plain-text summary report for registrations."""
import csv
import io
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional

from src.models.registration import PAYMENT_STATUSES, RegistrationRecord
from src.utils.date_utils import date_stamp
from src.utils.exceptions import ExportError

LIST_DELIMITER = ", "

CSV_COLUMNS = [
    ("ID", "id"),
    ("Registration Date", "timestamp"),
    ("First Name", "first_name"),
    ("Last Name", "last_name"),
    ("Email", "email"),
    ("Phone", "phone"),
    ("Address", "address"),
    ("City", "city"),
    ("State", "state"),
    ("ZIP Code", "zip_code"),
    ("Registration Type", "registration_type"),
    ("Quantity", "quantity"),
    ("Attendee Names", "attendee_names"),
    ("Attendee Contacts", "attendee_contacts"),
    ("Special Events", "special_events"),
    ("Vendor Tables", "vendor_tables"),
    ("Advertisements", "advertisements"),
    ("Day-to-Day Dates", "day_to_day_dates"),
    ("Additional Notes", "additional_notes"),
    ("Total Amount", "total_amount"),
    ("Payment Status", "payment_status"),
]

CSV_HEADERS = [header for header, _ in CSV_COLUMNS]

REPORT_TITLE = "CHURCHES OF CHRIST NATIONAL LECTURESHIP - REGISTRATION SUMMARY"


def _require_records(records: List[RegistrationRecord]) -> None:
    if not records:
        raise ExportError("No registrations to export")


def _cell(record: RegistrationRecord, attr: str) -> str:
    value = getattr(record, attr)
    if isinstance(value, tuple):
        return LIST_DELIMITER.join(value)
    return str(value)


def export_to_csv(records: List[RegistrationRecord]) -> str:
    """
    Render registrations as CSV text.

    Args:
        records: Registrations in the order they should appear

    Returns:
        CSV with a header row; multi-select fields joined with ", "

    Raises:
        ExportError: If there is nothing to export
    """
    _require_records(records)

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for record in records:
        writer.writerow([_cell(record, attr) for _, attr in CSV_COLUMNS])
    return buffer.getvalue()


def parse_csv(text: str) -> List[Dict[str, str]]:
    """
    Read exported CSV back into rows keyed by header.

    Returns:
        One dict per data row
    """
    reader = csv.DictReader(io.StringIO(text))
    return [dict(row) for row in reader]


@dataclass
class RegistrationSummary:
    """Aggregate figures derived from a registration list."""

    total_registrations: int = 0
    status_counts: Dict[str, int] = field(default_factory=dict)
    paid_revenue: int = 0
    pending_revenue: int = 0
    total_revenue: int = 0
    registration_types: Dict[str, int] = field(default_factory=dict)
    special_events: Dict[str, int] = field(default_factory=dict)
    vendor_registrations: int = 0
    vendor_tables: int = 0
    advertisements: int = 0


def build_summary(records: List[RegistrationRecord]) -> RegistrationSummary:
    """
    Aggregate counts and revenue.

    Behavior:
        - Counts for every payment status, zero included
        - Paid and pending revenue summed separately
        - Breakdown keys sorted alphabetically so output is stable
    """
    status_counts = {status: 0 for status in PAYMENT_STATUSES}
    type_counts: Counter = Counter()
    event_counts: Counter = Counter()
    summary = RegistrationSummary(total_registrations=len(records))

    for record in records:
        status_counts[record.payment_status] = status_counts.get(record.payment_status, 0) + 1
        summary.total_revenue += record.total_amount
        if record.payment_status == "paid":
            summary.paid_revenue += record.total_amount
        elif record.payment_status == "pending":
            summary.pending_revenue += record.total_amount

        if record.registration_type:
            type_counts[record.registration_type] += 1
        for event in record.special_events:
            event_counts[event] += 1

        if record.vendor_tables > 0:
            summary.vendor_registrations += 1
            summary.vendor_tables += record.vendor_tables
        summary.advertisements += len(record.advertisements)

    summary.status_counts = status_counts
    summary.registration_types = dict(sorted(type_counts.items()))
    summary.special_events = dict(sorted(event_counts.items()))
    return summary


def export_summary_report(
    records: List[RegistrationRecord],
    generated_at: Optional[datetime] = None,
) -> str:
    """
    Render the plain-text summary report.

    Args:
        records: Registrations to summarize
        generated_at: Time shown in the header (defaults to now)

    Raises:
        ExportError: If there is nothing to export
    """
    _require_records(records)
    summary = build_summary(records)
    generated_at = generated_at or datetime.now()

    lines = [
        REPORT_TITLE,
        f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}",
        "",
        "OVERVIEW",
        f"Total Registrations: {summary.total_registrations}",
        f"Paid Revenue: ${summary.paid_revenue}",
        f"Pending Revenue: ${summary.pending_revenue}",
        f"Total Billed: ${summary.total_revenue}",
        "",
        "PAYMENT STATUS",
    ]
    lines += [f"{status}: {count}" for status, count in summary.status_counts.items()]
    lines += ["", "REGISTRATION TYPES"]
    lines += [f"{name}: {count}" for name, count in summary.registration_types.items()] or ["none"]
    lines += ["", "SPECIAL EVENTS"]
    lines += [f"{name}: {count}" for name, count in summary.special_events.items()] or ["none"]
    lines += [
        "",
        "VENDORS",
        f"Vendor Registrations: {summary.vendor_registrations}",
        f"Vendor Tables: {summary.vendor_tables}",
        "",
        "ADVERTISEMENTS",
        f"Advertisements Purchased: {summary.advertisements}",
    ]
    return "\n".join(lines) + "\n"


def export_filename(prefix: str, extension: str, day: Optional[date] = None) -> str:
    """Build a dated download name, e.g. "registrations_2026-01-15.csv"."""
    return f"{prefix}_{date_stamp(day)}.{extension.lstrip('.')}"
