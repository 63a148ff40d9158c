"""Unit tests for registration_service."""
import re
import pytest
from unittest.mock import patch, MagicMock

from src.models.registration import RegistrationSelection
from src.services.registration_service import (
    build_registration,
    generate_registration_id,
    submit_registration,
)
from src.utils.date_utils import parse_timestamp
from src.utils.exceptions import FileWriteError, ValidationError


@pytest.fixture
def contact():
    """Required contact fields for a registrant."""
    return {
        "first_name": "John",
        "last_name": "Smith",
        "email": "john.smith@example.com",
        "phone": "(555) 123-4567",
    }


class TestGenerateRegistrationId:
    """Test generate_registration_id function."""

    def test_format(self):
        """IDs look like reg_<millis>_<9 base36 chars>."""
        assert re.match(r"^reg_\d{13}_[a-z0-9]{9}$", generate_registration_id())

    def test_unique(self):
        """Consecutive IDs differ."""
        ids = {generate_registration_id() for _ in range(200)}
        assert len(ids) == 200


class TestBuildRegistration:
    """Test build_registration validation and record creation."""

    def test_individual_early_for_two(self, contact):
        """Two-person individual registration priced at 380."""
        selection = RegistrationSelection(
            registration_type="individual-early",
            quantity=2,
            attendee_names="John Smith\nJane Smith",
            attendee_contacts="Jane Smith - (555) 234-5678",
            **contact,
        )
        record = build_registration(selection)

        assert record.total_amount == 380
        assert record.payment_status == "pending"
        assert record.quantity == 2

    def test_record_has_id_and_timestamp(self, contact):
        """Builder stamps a fresh ID and the creation time."""
        selection = RegistrationSelection(registration_type="georgia-early", **contact)
        record = build_registration(selection)

        assert record.id.startswith("reg_")
        parse_timestamp(record.timestamp)
        assert "T" in record.timestamp

    def test_uses_given_timestamp_and_id_factory(self, contact):
        """Timestamp and ID generation can be injected."""
        selection = RegistrationSelection(registration_type="georgia-early", **contact)
        record = build_registration(
            selection,
            timestamp="2026-01-10T12:00:00.000Z",
            id_factory=lambda: "reg_fixed",
        )

        assert record.id == "reg_fixed"
        assert record.timestamp == "2026-01-10T12:00:00.000Z"
        assert record.total_amount == 175

    def test_vendor_and_ad_only_accepted(self, contact):
        """Vendor table and advertisement qualify without a registration type."""
        selection = RegistrationSelection(
            vendor_tables=2,
            advertisements=["full-page-color"],
            **contact,
        )
        record = build_registration(selection)

        assert record.registration_type == ""
        assert record.total_amount == 575

    def test_banquet_only_accepted(self, contact):
        """A special event alone is purchasable."""
        selection = RegistrationSelection(special_events=["memorial-banquet"], **contact)
        assert build_registration(selection).total_amount == 75

    def test_day_to_day(self, contact):
        """Day-to-day with two days costs 150."""
        selection = RegistrationSelection(
            registration_type="day-to-day",
            day_to_day_dates=["sunday-march-9", "monday-march-10"],
            **contact,
        )
        record = build_registration(selection)

        assert record.total_amount == 150
        assert record.day_to_day_dates == ("sunday-march-9", "monday-march-10")

    def test_strips_contact_whitespace(self, contact):
        contact["first_name"] = "  John "
        selection = RegistrationSelection(registration_type="individual-regular", **contact)
        assert build_registration(selection).first_name == "John"

    def test_nothing_selected_rejected(self, contact):
        """No registration, tables, ads or events is rejected."""
        selection = RegistrationSelection(
            registration_type="",
            vendor_tables=0,
            advertisements=[],
            special_events=[],
            **contact,
        )
        with pytest.raises(ValidationError) as exc_info:
            build_registration(selection)

        assert exc_info.value.code == "no-purchasable-selection"

    def test_day_to_day_without_days_rejected(self, contact):
        selection = RegistrationSelection(registration_type="day-to-day", **contact)
        with pytest.raises(ValidationError) as exc_info:
            build_registration(selection)

        assert exc_info.value.code == ValidationError.MISSING_DAY_SELECTION

    def test_group_without_attendee_names_rejected(self, contact):
        """Groups must list attendee names."""
        selection = RegistrationSelection(
            registration_type="group-5-early",
            attendee_contacts="someone",
            **contact,
        )
        with pytest.raises(ValidationError) as exc_info:
            build_registration(selection)

        assert exc_info.value.code == ValidationError.MISSING_ATTENDEE_NAMES

    def test_group_without_attendee_contacts_rejected(self, contact):
        """Groups must list attendee contacts."""
        selection = RegistrationSelection(
            registration_type="group-10-regular",
            attendee_names="A, B, C",
            attendee_contacts="   ",
            **contact,
        )
        with pytest.raises(ValidationError) as exc_info:
            build_registration(selection)

        assert exc_info.value.code == ValidationError.MISSING_ATTENDEE_CONTACTS

    def test_individual_quantity_two_needs_attendee_names(self, contact):
        """Quantity above one on a per-person tier needs attendee names."""
        selection = RegistrationSelection(registration_type="individual-early", quantity=2, **contact)
        with pytest.raises(ValidationError) as exc_info:
            build_registration(selection)

        assert exc_info.value.code == ValidationError.MISSING_ATTENDEE_NAMES

    def test_single_individual_needs_no_attendee_details(self, contact):
        selection = RegistrationSelection(registration_type="individual-early", quantity=1, **contact)
        assert build_registration(selection).attendee_names == ""

    @pytest.mark.parametrize("field_name", ["first_name", "last_name", "email", "phone"])
    def test_missing_contact_field_rejected(self, contact, field_name):
        """Builder re-checks required contact fields."""
        contact[field_name] = ""
        selection = RegistrationSelection(registration_type="individual-early", **contact)
        with pytest.raises(ValidationError) as exc_info:
            build_registration(selection)

        assert exc_info.value.code == ValidationError.MISSING_CONTACT_FIELD
        assert exc_info.value.field == field_name

    @pytest.mark.parametrize("vendor_tables", [4, 7, -1])
    def test_vendor_tables_out_of_range_rejected(self, contact, vendor_tables):
        """Table counts outside 0-3 are a validation failure, not a crash."""
        selection = RegistrationSelection(
            registration_type="individual-early", vendor_tables=vendor_tables, **contact
        )
        with pytest.raises(ValidationError) as exc_info:
            build_registration(selection)

        assert exc_info.value.code == ValidationError.INVALID_SELECTION
        assert exc_info.value.field == "vendor_tables"

    def test_unknown_registration_type_rejected(self, contact):
        """A type outside the catalog is not a purchasable selection."""
        selection = RegistrationSelection(registration_type="vip-platinum", **contact)
        with pytest.raises(ValidationError) as exc_info:
            build_registration(selection)

        assert exc_info.value.code == ValidationError.INVALID_SELECTION
        assert exc_info.value.field == "registration_type"

    @pytest.mark.parametrize("field_name, values", [
        ("day_to_day_dates", ["sunday-march-9", "friday-march-14"]),
        ("special_events", ["womens-luncheon"]),
        ("advertisements", ["billboard"]),
    ])
    def test_unknown_options_rejected(self, contact, field_name, values):
        selection = RegistrationSelection(registration_type="day-to-day", **{field_name: values}, **contact)
        with pytest.raises(ValidationError) as exc_info:
            build_registration(selection)

        assert exc_info.value.code == ValidationError.INVALID_SELECTION
        assert exc_info.value.field == field_name

    def test_days_dropped_for_other_types(self, contact):
        """Day selections only stick to day-to-day registrations."""
        selection = RegistrationSelection(
            registration_type="georgia-regular", day_to_day_dates=["monday-march-10"], **contact
        )
        record = build_registration(selection)

        assert record.day_to_day_dates == ()
        assert record.total_amount == 195

    def test_first_failure_reported(self):
        """Purchasable check runs before the contact check."""
        with pytest.raises(ValidationError) as exc_info:
            build_registration(RegistrationSelection())

        assert exc_info.value.code == ValidationError.NO_PURCHASABLE_SELECTION


class TestSubmitRegistration:
    """Test submit_registration function."""

    def test_successful_submission(self, contact):
        """Record is stored and e-mails are sent."""
        store = MagicMock()
        selection = RegistrationSelection(registration_type="individual-early", **contact)

        with patch('src.services.notification_service.send_registration_emails') as mock_send:
            success, message, record = submit_registration(selection, store=store)

        assert success is True
        assert message == "Registration received"
        assert record.total_amount == 190
        store.append.assert_called_once_with(record)
        mock_send.assert_called_once_with(record, payment_method="")

    def test_validation_failure_not_stored(self, contact):
        """Rejected selections are never persisted."""
        store = MagicMock()
        success, message, record = submit_registration(RegistrationSelection(**contact), store=store, notify=False)

        assert success is False
        assert message.startswith("Please select at least one option")
        assert record is None
        store.append.assert_not_called()

    def test_invalid_vendor_tables_not_stored(self, contact):
        """Out-of-range tables come back as a failed submission."""
        store = MagicMock()
        success, message, record = submit_registration(
            RegistrationSelection(vendor_tables=7, **contact), store=store, notify=False
        )

        assert success is False
        assert "Vendor tables" in message
        assert record is None
        store.append.assert_not_called()

    def test_write_failure_reported(self, contact):
        """Storage errors come back as a failed submission."""
        store = MagicMock()
        store.append.side_effect = FileWriteError("disk full")
        selection = RegistrationSelection(registration_type="individual-early", **contact)

        success, message, record = submit_registration(selection, store=store, notify=False)

        assert success is False
        assert "could not save" in message
        assert record is None

    def test_notify_disabled(self, contact):
        store = MagicMock()
        selection = RegistrationSelection(registration_type="individual-early", **contact)

        with patch('src.services.notification_service.send_registration_emails') as mock_send:
            success, _, _ = submit_registration(selection, store=store, notify=False)

        assert success is True
        mock_send.assert_not_called()
