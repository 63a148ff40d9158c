"""Registration data models for lectureship sign-up."""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Tuple

from src.utils.date_utils import is_valid_timestamp
from src.utils.exceptions import SourceParseError
from src.utils.validation import normalize_choices

# Base attendance tiers, in form order
REGISTRATION_TYPES = {
    "individual-early": "Individual Early Bird",
    "individual-regular": "Individual Regular",
    "georgia-early": "Georgia Resident Early Bird",
    "georgia-regular": "Georgia Resident Regular",
    "group-5-early": "Group 5 People Early Bird",
    "group-5-regular": "Group 5 People Regular",
    "group-10-early": "Group 10 People Early Bird",
    "group-10-regular": "Group 10 People Regular",
    "day-to-day": "Day-to-Day Registration",
}

DAY_TO_DAY_TYPE = "day-to-day"
GROUP_MARKER = "group-"

CONFERENCE_DAYS = {
    "sunday-march-9": "Sunday, March 9",
    "monday-march-10": "Monday, March 10",
    "tuesday-march-11": "Tuesday, March 11",
    "wednesday-march-12": "Wednesday, March 12",
    "thursday-march-13": "Thursday, March 13",
}

SPECIAL_EVENTS = {
    "memorial-banquet": "John O. Williams Memorial Banquet",
}

ADVERTISEMENT_TIERS = {
    "full-page-color": "Full Page Color",
    "half-page-color": "Half Page Color",
    "full-page-bw": "Full Page Black & White",
    "half-page-bw": "Half Page Black & White",
    "quarter-page-bw": "Quarter Page Black & White",
}

VENDOR_TABLE_OPTIONS = [0, 1, 2, 3]

PAYMENT_STATUSES = ["pending", "paid", "partial", "refunded"]
DEFAULT_PAYMENT_STATUS = "pending"

# Serialized key for each attribute, in export column order
FIELD_KEYS = [
    ("id", "id"),
    ("timestamp", "timestamp"),
    ("first_name", "firstName"),
    ("last_name", "lastName"),
    ("email", "email"),
    ("phone", "phone"),
    ("address", "address"),
    ("city", "city"),
    ("state", "state"),
    ("zip_code", "zipCode"),
    ("registration_type", "registrationType"),
    ("quantity", "quantity"),
    ("attendee_names", "attendeeNames"),
    ("attendee_contacts", "attendeeContacts"),
    ("special_events", "specialEvents"),
    ("vendor_tables", "vendorTables"),
    ("advertisements", "advertisements"),
    ("day_to_day_dates", "dayToDayDates"),
    ("additional_notes", "additionalNotes"),
    ("total_amount", "totalAmount"),
    ("payment_status", "paymentStatus"),
]

LIST_FIELDS = {"special_events", "advertisements", "day_to_day_dates"}
INT_FIELDS = {"quantity", "vendor_tables", "total_amount"}
OPTIONAL_TEXT_FIELDS = {
    "address", "city", "state", "zip_code",
    "attendee_names", "attendee_contacts", "additional_notes",
}


@dataclass
class RegistrationSelection:
    """Raw form input for one registration, before validation and pricing."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    registration_type: str = ""
    quantity: int = 1
    day_to_day_dates: Tuple[str, ...] = ()
    attendee_names: str = ""
    attendee_contacts: str = ""
    special_events: Tuple[str, ...] = ()
    vendor_tables: int = 0
    advertisements: Tuple[str, ...] = ()
    additional_notes: str = ""
    payment_method: str = ""

    def __post_init__(self):
        """Normalize multi-select fields and coerce numeric input."""
        self.registration_type = (self.registration_type or "").strip()
        self.day_to_day_dates = normalize_choices(self.day_to_day_dates)
        self.special_events = normalize_choices(self.special_events)
        self.advertisements = normalize_choices(self.advertisements)

        try:
            self.quantity = int(self.quantity or 1)
        except (TypeError, ValueError):
            self.quantity = 1
        if self.quantity < 1:
            self.quantity = 1

        try:
            self.vendor_tables = int(self.vendor_tables or 0)
        except (TypeError, ValueError):
            self.vendor_tables = 0

    def has_purchasable_selection(self) -> bool:
        """True if at least one thing is being bought."""
        return bool(
            self.registration_type
            or self.vendor_tables > 0
            or self.advertisements
            or self.special_events
        )

    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class RegistrationRecord:
    """A priced, validated registration as persisted and exported."""

    id: str
    timestamp: str  # ISO 8601 format
    first_name: str
    last_name: str
    email: str
    phone: str
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    registration_type: str = ""
    quantity: int = 1
    attendee_names: str = ""
    attendee_contacts: str = ""
    special_events: Tuple[str, ...] = field(default_factory=tuple)
    vendor_tables: int = 0
    advertisements: Tuple[str, ...] = field(default_factory=tuple)
    day_to_day_dates: Tuple[str, ...] = field(default_factory=tuple)
    additional_notes: str = ""
    total_amount: int = 0
    payment_status: str = DEFAULT_PAYMENT_STATUS

    def __post_init__(self):
        """Validate record structure after initialization."""
        if not self.id or not str(self.id).strip():
            raise ValueError("Registration ID cannot be empty")

        if not is_valid_timestamp(self.timestamp):
            raise ValueError(f"Invalid timestamp format: {self.timestamp}")

        if self.payment_status not in PAYMENT_STATUSES:
            raise ValueError(
                f"Payment status must be one of {PAYMENT_STATUSES}, got: {self.payment_status}"
            )

        if self.quantity < 1:
            raise ValueError("Quantity must be at least 1")

        if self.vendor_tables not in VENDOR_TABLE_OPTIONS:
            raise ValueError(f"Vendor tables must be one of {VENDOR_TABLE_OPTIONS}")

        if self.total_amount < 0:
            raise ValueError("Total amount cannot be negative")

    def full_name(self) -> str:
        """Registrant's display name."""
        return f"{self.first_name} {self.last_name}".strip()

    def with_payment_status(self, status: str) -> "RegistrationRecord":
        """
        Copy of this record with a new payment status.

        Raises:
            ValueError: If status is not a known payment status
        """
        if status not in PAYMENT_STATUSES:
            raise ValueError(f"Payment status must be one of {PAYMENT_STATUSES}, got: {status}")
        return replace(self, payment_status=status)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the camelCase keys of the stored format."""
        data = {}
        for attr, key in FIELD_KEYS:
            value = getattr(self, attr)
            data[key] = list(value) if attr in LIST_FIELDS else value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RegistrationRecord":
        """
        Parse a serialized record.

        Args:
            data: Mapping with camelCase keys as produced by ``to_dict``

        Returns:
            RegistrationRecord

        Raises:
            SourceParseError: If required keys are missing or values are ill-typed
        """
        if not isinstance(data, dict):
            raise SourceParseError(f"Registration must be an object, got {type(data).__name__}")

        values: Dict[str, Any] = {}
        try:
            for attr, key in FIELD_KEYS:
                if key not in data or data[key] is None:
                    if attr in OPTIONAL_TEXT_FIELDS:
                        values[attr] = ""
                        continue
                    if attr in LIST_FIELDS:
                        values[attr] = ()
                        continue
                    if attr == "vendor_tables":
                        values[attr] = 0
                        continue
                    if attr == "payment_status":
                        values[attr] = DEFAULT_PAYMENT_STATUS
                        continue
                    raise SourceParseError(f"Missing required field: {key}")

                raw = data[key]
                if attr in LIST_FIELDS:
                    values[attr] = _parse_list(raw, key)
                elif attr in INT_FIELDS:
                    values[attr] = _parse_int(raw, key)
                else:
                    if not isinstance(raw, str):
                        raise SourceParseError(f"Field {key} must be text")
                    values[attr] = raw

            return cls(**values)
        except ValueError as e:
            raise SourceParseError(f"Invalid registration {data.get('id')!r}: {e}") from e


def _parse_list(raw: Any, key: str) -> Tuple[str, ...]:
    if isinstance(raw, str):
        # exported/flattened form: "a, b"
        return normalize_choices(raw.split(","))
    if isinstance(raw, (list, tuple)):
        return normalize_choices(raw)
    raise SourceParseError(f"Field {key} must be a list")


def _parse_int(raw: Any, key: str) -> int:
    if isinstance(raw, bool):
        raise SourceParseError(f"Field {key} must be a number")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if isinstance(raw, str) and raw.strip().lstrip("-").isdigit():
        return int(raw.strip())
    raise SourceParseError(f"Field {key} must be a number")


def records_to_dicts(records: List[RegistrationRecord]) -> List[Dict[str, Any]]:
    """Serialize a list of records for JSON storage."""
    return [record.to_dict() for record in records]
