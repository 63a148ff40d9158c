"""Date and time utility functions."""
from datetime import date, datetime, timezone
from typing import Optional


def now_iso() -> str:
    """
    Current UTC instant in ISO 8601 format.

    Returns:
        Timestamp string with millisecond precision and a 'Z' suffix
        (e.g., "2026-01-15T14:03:22.125Z")
    """
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def parse_timestamp(timestamp: str) -> datetime:
    """
    Parse ISO 8601 timestamp into a timezone-aware datetime.

    Args:
        timestamp: ISO 8601 string, 'Z' suffix or numeric offset accepted

    Returns:
        datetime in UTC (naive input is assumed to be UTC)

    Raises:
        ValueError: If timestamp format is invalid
    """
    if not isinstance(timestamp, str) or not timestamp.strip():
        raise ValueError(f"Invalid timestamp format: {timestamp!r}")

    try:
        parsed = datetime.fromisoformat(timestamp.strip().replace("Z", "+00:00"))
    except ValueError as e:
        raise ValueError(f"Invalid timestamp format: {timestamp}") from e

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def is_valid_timestamp(timestamp: str) -> bool:
    """Check whether a string parses as an ISO 8601 timestamp."""
    try:
        parse_timestamp(timestamp)
        return True
    except ValueError:
        return False


def date_stamp(day: Optional[date] = None) -> str:
    """
    Format a date as YYYY-MM-DD for backup and export filenames.

    Args:
        day: Date to format (defaults to today)
    """
    return (day or datetime.now().date()).strftime("%Y-%m-%d")


def format_display_time(timestamp: str) -> str:
    """
    Format timestamp for on-screen tables.

    Returns:
        "YYYY-MM-DD HH:MM" in UTC, or the raw value if it cannot be parsed
    """
    try:
        return parse_timestamp(timestamp).strftime("%Y-%m-%d %H:%M")
    except ValueError:
        return timestamp
