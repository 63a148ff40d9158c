"""Registration service: validate, price and submit lectureship registrations."""
import logging
import random
import string
import time
from typing import Callable, Optional, Tuple

from src.models.registration import (
    ADVERTISEMENT_TIERS,
    CONFERENCE_DAYS,
    DEFAULT_PAYMENT_STATUS,
    REGISTRATION_TYPES,
    SPECIAL_EVENTS,
    VENDOR_TABLE_OPTIONS,
    RegistrationRecord,
    RegistrationSelection,
)
from src.services.pricing_service import (
    calculate_price,
    is_day_to_day,
    requires_attendee_details,
)
from src.services.registration_store import RegistrationStore, get_registration_store
from src.utils.date_utils import now_iso
from src.utils.exceptions import FileWriteError, ValidationError
from src.utils.validation import contact_field_label, is_blank, missing_contact_fields

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_registration_id() -> str:
    """
    Generate a registration ID.

    Returns:
        "reg_<epoch milliseconds>_<9 random base36 characters>"
    """
    suffix = "".join(random.SystemRandom().choice(_ID_ALPHABET) for _ in range(9))
    return f"reg_{int(time.time() * 1000)}_{suffix}"


def _unknown_choice(selection: RegistrationSelection) -> Optional[Tuple[str, str]]:
    """First selected value outside its catalog, as (field, message)."""
    if selection.registration_type and selection.registration_type not in REGISTRATION_TYPES:
        return "registration_type", f"Unknown registration type: {selection.registration_type}"

    if selection.vendor_tables not in VENDOR_TABLE_OPTIONS:
        return "vendor_tables", f"Vendor tables must be one of {VENDOR_TABLE_OPTIONS}."

    for field_name, catalog in (
        ("day_to_day_dates", CONFERENCE_DAYS),
        ("special_events", SPECIAL_EVENTS),
        ("advertisements", ADVERTISEMENT_TIERS),
    ):
        unknown = [value for value in getattr(selection, field_name) if value not in catalog]
        if unknown:
            return field_name, f"Unknown option for {field_name.replace('_', ' ')}: {', '.join(unknown)}"

    return None


def validate_selection(selection: RegistrationSelection) -> None:
    """
    Check a selection against the registration rules.

    Rules run in order and the first failure is raised:
        0. every chosen type, day, event, ad tier and table count is a known option
        1. something purchasable is selected
        2. day-to-day registrations pick at least one day
        3. multi-attendee registrations list attendee names
        4. multi-attendee registrations list attendee contacts
        5. first name, last name, email and phone are filled in

    Raises:
        ValidationError: with ``code`` naming the failed rule
    """
    unknown = _unknown_choice(selection)
    if unknown:
        field_name, message = unknown
        raise ValidationError(ValidationError.INVALID_SELECTION, message, field=field_name)

    if not selection.has_purchasable_selection():
        raise ValidationError(
            ValidationError.NO_PURCHASABLE_SELECTION,
            "Please select at least one option: registration type, vendor tables, "
            "advertisements, or special events.",
        )

    if is_day_to_day(selection.registration_type) and not selection.day_to_day_dates:
        raise ValidationError(
            ValidationError.MISSING_DAY_SELECTION,
            "Please select at least one day to attend for day-to-day registration.",
            field="day_to_day_dates",
        )

    multi_attendee = requires_attendee_details(selection.registration_type, selection.quantity)

    if multi_attendee and is_blank(selection.attendee_names):
        raise ValidationError(
            ValidationError.MISSING_ATTENDEE_NAMES,
            "Please list all attendee names.",
            field="attendee_names",
        )

    if multi_attendee and is_blank(selection.attendee_contacts):
        raise ValidationError(
            ValidationError.MISSING_ATTENDEE_CONTACTS,
            "Please provide contact information for all attendees.",
            field="attendee_contacts",
        )

    missing = missing_contact_fields(vars(selection))
    if missing:
        raise ValidationError(
            ValidationError.MISSING_CONTACT_FIELD,
            f"{contact_field_label(missing[0])} is required.",
            field=missing[0],
        )


def build_registration(
    selection: RegistrationSelection,
    timestamp: Optional[str] = None,
    id_factory: Callable[[], str] = generate_registration_id,
) -> RegistrationRecord:
    """
    Turn validated form input into a priced registration record.

    Args:
        selection: Raw form input
        timestamp: Creation instant (defaults to now, UTC ISO 8601)
        id_factory: ID generator

    Returns:
        New RegistrationRecord with pending payment status

    Raises:
        ValidationError: If the selection breaks a registration rule
    """
    validate_selection(selection)

    price = calculate_price(selection)

    return RegistrationRecord(
        id=id_factory(),
        timestamp=timestamp or now_iso(),
        first_name=selection.first_name.strip(),
        last_name=selection.last_name.strip(),
        email=selection.email.strip(),
        phone=selection.phone.strip(),
        address=selection.address.strip(),
        city=selection.city.strip(),
        state=selection.state.strip(),
        zip_code=selection.zip_code.strip(),
        registration_type=selection.registration_type,
        quantity=selection.quantity,
        attendee_names=selection.attendee_names.strip(),
        attendee_contacts=selection.attendee_contacts.strip(),
        special_events=selection.special_events,
        vendor_tables=selection.vendor_tables,
        advertisements=selection.advertisements,
        day_to_day_dates=selection.day_to_day_dates if is_day_to_day(selection.registration_type) else (),
        additional_notes=selection.additional_notes.strip(),
        total_amount=price.total,
        payment_status=DEFAULT_PAYMENT_STATUS,
    )


def submit_registration(
    selection: RegistrationSelection,
    store: Optional[RegistrationStore] = None,
    notify: bool = True,
) -> Tuple[bool, str, Optional[RegistrationRecord]]:
    """
    Validate, price, store and confirm a registration.

    Args:
        selection: Raw form input
        store: Repository to write to (defaults to the configured store)
        notify: Send confirmation e-mails after storing

    Returns:
        Tuple of (success: bool, message: str, record or None)
        - (True, "Registration received", record) on success
        - (False, validation message, None) if a rule fails
        - (False, "We could not save your registration...", None) on write failure

    Behavior:
        - E-mail failures are logged and never undo a stored registration
    """
    try:
        record = build_registration(selection)
    except ValidationError as e:
        logger.info("Registration rejected: %s", e.code)
        return False, e.message, None

    store = store or get_registration_store()
    try:
        store.append(record)
    except (FileWriteError, TimeoutError) as e:
        logger.error("Failed to store registration %s: %s", record.id, e)
        return False, "We could not save your registration. Please try again.", None

    if notify:
        from src.services.notification_service import send_registration_emails
        send_registration_emails(record, payment_method=selection.payment_method)

    return True, "Registration received", record
