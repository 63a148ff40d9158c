"""Admin service: authentication, session state and registration management."""
import hmac
import logging
import os
from pathlib import Path
from threading import Lock
from typing import Dict, List, Tuple

import streamlit as st

from src.models.registration import PAYMENT_STATUSES, RegistrationRecord
from src.utils.exceptions import RegistrationNotFoundError
from src.utils.validation import normalize_search_term

logger = logging.getLogger(__name__)

_ENV_LOADED = False
_ENV_LOCK = Lock()

SORTABLE_FIELDS = [
    "timestamp",
    "first_name",
    "last_name",
    "email",
    "registration_type",
    "quantity",
    "vendor_tables",
    "total_amount",
    "payment_status",
]


def _load_admin_env() -> None:
    """Load admin credentials from .env file if present."""
    global _ENV_LOADED

    if _ENV_LOADED:
        return

    with _ENV_LOCK:
        if _ENV_LOADED:
            return

        env_path = Path(".env")
        if env_path.exists():
            for raw_line in env_path.read_text(encoding="utf-8").splitlines():
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue

                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"\'')

                if key in {"ADMIN_USERNAME", "ADMIN_PASSWORD"} and key not in os.environ:
                    os.environ[key] = value

        _ENV_LOADED = True


def authenticate_admin(username: str, password: str) -> bool:
    """
    Check admin credentials on the server side.

    Args:
        username: Admin username
        password: Admin password

    Returns:
        True if credentials match ADMIN_USERNAME / ADMIN_PASSWORD

    Behavior:
        - Credentials come from the environment or .env, never from page code
        - An unset ADMIN_PASSWORD disables admin login entirely
        - Constant-time comparison
    """
    _load_admin_env()

    admin_username = os.getenv("ADMIN_USERNAME", "admin")
    admin_password = os.getenv("ADMIN_PASSWORD", "")

    if not admin_password:
        logger.warning("ADMIN_PASSWORD is not configured; admin login disabled")
        return False

    username_ok = hmac.compare_digest((username or "").encode(), admin_username.encode())
    password_ok = hmac.compare_digest((password or "").encode(), admin_password.encode())
    return username_ok and password_ok


def is_admin_authenticated() -> bool:
    """True if st.session_state['admin_authenticated'] is set."""
    return st.session_state.get("admin_authenticated", False)


def login_admin(username: str, password: str) -> Tuple[bool, str]:
    """
    Log in admin user.

    Returns:
        Tuple of (success: bool, message: str)
        - (True, "Logged in") on success
        - (False, "Incorrect username or password") on failure
    """
    if authenticate_admin(username, password):
        st.session_state["admin_authenticated"] = True
        logger.info("Admin logged in")
        return True, "Logged in"
    else:
        logger.info("Failed admin login attempt")
        return False, "Incorrect username or password"


def logout_admin() -> None:
    """Clear admin authentication from session state."""
    if "admin_authenticated" in st.session_state:
        del st.session_state["admin_authenticated"]


def update_payment_status(
    records: List[RegistrationRecord],
    registration_id: str,
    status: str,
) -> List[RegistrationRecord]:
    """
    Change one registration's payment status in a working list.

    Args:
        records: Current registrations
        registration_id: Registration to change
        status: New payment status

    Returns:
        New list; only the matching record differs and only in payment status

    Raises:
        ValueError: If status is unknown
        RegistrationNotFoundError: If no record has this ID
    """
    if status not in PAYMENT_STATUSES:
        raise ValueError(f"Payment status must be one of {PAYMENT_STATUSES}, got: {status}")

    found = False
    updated = []
    for record in records:
        if record.id == registration_id:
            record = record.with_payment_status(status)
            found = True
        updated.append(record)

    if not found:
        raise RegistrationNotFoundError(f"Registration not found: {registration_id}")
    return updated


def delete_registration(records: List[RegistrationRecord], registration_id: str) -> List[RegistrationRecord]:
    """
    Remove one registration from a working list.

    Raises:
        RegistrationNotFoundError: If no record has this ID
    """
    remaining = [r for r in records if r.id != registration_id]
    if len(remaining) == len(records):
        raise RegistrationNotFoundError(f"Registration not found: {registration_id}")
    return remaining


def filter_registrations(
    records: List[RegistrationRecord],
    status: str = "all",
    search: str = "",
) -> List[RegistrationRecord]:
    """
    Filter by payment status and a name/email search.

    Args:
        status: "all" or a payment status
        search: Case-insensitive text matched against first name, last name, email
    """
    term = normalize_search_term(search)
    results = []
    for record in records:
        if status != "all" and record.payment_status != status:
            continue
        if term and not any(
            term in value.lower()
            for value in (record.first_name, record.last_name, record.email)
        ):
            continue
        results.append(record)
    return results


def sort_registrations(
    records: List[RegistrationRecord],
    field: str = "timestamp",
    descending: bool = True,
) -> List[RegistrationRecord]:
    """
    Sort registrations by a table column.

    Raises:
        ValueError: If field is not sortable
    """
    if field not in SORTABLE_FIELDS:
        raise ValueError(f"Cannot sort by {field}")

    def sort_key(record: RegistrationRecord):
        value = getattr(record, field)
        return value.lower() if isinstance(value, str) else value

    return sorted(records, key=sort_key, reverse=descending)


def registration_stats(records: List[RegistrationRecord]) -> Dict[str, int]:
    """Headline numbers for the admin dashboard."""
    paid = [r for r in records if r.payment_status == "paid"]
    pending = [r for r in records if r.payment_status == "pending"]
    return {
        "total": len(records),
        "paid": len(paid),
        "pending": len(pending),
        "total_revenue": sum(r.total_amount for r in paid),
        "pending_revenue": sum(r.total_amount for r in pending),
    }
