"""Custom exception classes."""
from typing import Optional


class ValidationError(Exception):
    """Raised when a registration fails validation.

    ``code`` names the rule that failed so the UI can message it and tests
    can assert on it.
    """

    MISSING_CONTACT_FIELD = "missing-contact-field"
    NO_PURCHASABLE_SELECTION = "no-purchasable-selection"
    MISSING_DAY_SELECTION = "missing-day-selection"
    MISSING_ATTENDEE_NAMES = "missing-attendee-names"
    MISSING_ATTENDEE_CONTACTS = "missing-attendee-contacts"
    INVALID_SELECTION = "invalid-selection"

    def __init__(self, code: str, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.field = field


class SourceParseError(Exception):
    """Raised when a storage source cannot be interpreted."""
    pass


class ExportError(Exception):
    """Raised when there is nothing to export."""
    pass


class RegistrationNotFoundError(Exception):
    """Raised when a registration ID doesn't exist."""
    pass


class FileWriteError(Exception):
    """Raised when unable to write to JSON file."""
    pass
