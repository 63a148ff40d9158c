"""Data validation utilities."""
import re
from typing import Any, Dict, Iterable, List, Tuple

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

REQUIRED_CONTACT_FIELDS = [
    ("first_name", "First name"),
    ("last_name", "Last name"),
    ("email", "Email"),
    ("phone", "Phone"),
]


def is_blank(value: Any) -> bool:
    """Return True for None or strings that are empty after stripping."""
    if value is None:
        return True
    return not str(value).strip()


def missing_contact_fields(values: Dict[str, Any]) -> List[str]:
    """
    List required contact fields that are empty.

    Args:
        values: Mapping of attribute name to value (snake_case keys)

    Returns:
        Attribute names in form order, e.g. ["email", "phone"]
    """
    return [name for name, _ in REQUIRED_CONTACT_FIELDS if is_blank(values.get(name))]


def contact_field_label(field_name: str) -> str:
    """Human-readable label for a contact attribute name."""
    for name, label in REQUIRED_CONTACT_FIELDS:
        if name == field_name:
            return label
    return field_name.replace("_", " ").capitalize()


def validate_email(email: str) -> Tuple[bool, str]:
    """
    Validate e-mail address shape.

    Args:
        email: Address to validate

    Returns:
        Tuple of (is_valid: bool, error_message: str)
        - (True, "") if valid
        - (False, "Email is required") if empty
        - (False, "Email address is not valid") if malformed
    """
    if is_blank(email):
        return False, "Email is required"
    if not EMAIL_PATTERN.match(email.strip()):
        return False, "Email address is not valid"
    return True, ""


def validate_quantity(quantity: Any) -> Tuple[bool, str]:
    """
    Validate attendee quantity.

    Returns:
        (True, "") for integers >= 1, otherwise (False, message)
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        return False, "Quantity must be a whole number"
    if quantity < 1:
        return False, "Quantity must be at least 1"
    return True, ""


def normalize_choices(values: Iterable[str]) -> Tuple[str, ...]:
    """
    Normalize a multi-select value into an ordered tuple without repeats.

    Behavior:
        - Trims whitespace, drops empty entries
        - Keeps first occurrence order
        - Example: ["a", " b", "a", ""] → ("a", "b")
    """
    seen = []
    for value in values or ():
        item = str(value).strip()
        if item and item not in seen:
            seen.append(item)
    return tuple(seen)


def normalize_search_term(term: str) -> str:
    """Normalize admin search text for case-insensitive matching."""
    return (term or "").strip().lower()
