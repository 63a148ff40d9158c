"""Public registration form and payment screen."""
import logging
from typing import Any, Dict, List, Tuple

import streamlit as st

from src.models.registration import (
    ADVERTISEMENT_TIERS,
    CONFERENCE_DAYS,
    REGISTRATION_TYPES,
    SPECIAL_EVENTS,
    VENDOR_TABLE_OPTIONS,
    RegistrationRecord,
    RegistrationSelection,
)
from src.services.payment_service import payment_links_for
from src.services.pricing_service import (
    ADVERTISEMENT_PRICES,
    PriceBreakdown,
    VENDOR_TABLE_PRICES,
    calculate_price,
    group_headcount,
    is_day_to_day,
    is_group_type,
    requires_attendee_details,
    unit_registration_price,
)
from src.services.registration_service import submit_registration
from src.ui.html_utils import price_summary_html

logger = logging.getLogger(__name__)

FORM_PREFIX = "reg_form_"
RESULT_KEY = "registration_result"
PAYMENT_METHODS = ["", "Credit/Debit Card", "Check by Mail", "Cash at Event"]


def _key(name: str) -> str:
    return f"{FORM_PREFIX}{name}"


def registration_option_label(option: str) -> str:
    if not option:
        return "No Lectureship Registration (Special Events/Vendor/Ads Only)"
    price = unit_registration_price(option)
    suffix = " per day" if is_day_to_day(option) else ""
    return f"{REGISTRATION_TYPES[option]} - ${price:,}{suffix}"


def vendor_option_label(tables: int) -> str:
    if tables == 0:
        return "No vendor tables"
    return f"{tables} table{'s' if tables > 1 else ''} - ${VENDOR_TABLE_PRICES[tables]}"


def selection_from_state(state: Dict[str, Any]) -> RegistrationSelection:
    """Collect the form widgets' values into a selection."""
    registration_type = state.get(_key("registration_type"), "")
    return RegistrationSelection(
        first_name=state.get(_key("first_name"), ""),
        last_name=state.get(_key("last_name"), ""),
        email=state.get(_key("email"), ""),
        phone=state.get(_key("phone"), ""),
        address=state.get(_key("address"), ""),
        city=state.get(_key("city"), ""),
        state=state.get(_key("state"), ""),
        zip_code=state.get(_key("zip_code"), ""),
        registration_type=registration_type,
        quantity=state.get(_key("quantity"), 1),
        day_to_day_dates=[d for d in CONFERENCE_DAYS if state.get(_key(f"day_{d}"))],
        attendee_names=state.get(_key("attendee_names"), ""),
        attendee_contacts=state.get(_key("attendee_contacts"), ""),
        special_events=[e for e in SPECIAL_EVENTS if state.get(_key(f"event_{e}"))],
        vendor_tables=state.get(_key("vendor_tables"), 0),
        advertisements=[a for a in ADVERTISEMENT_TIERS if state.get(_key(f"ad_{a}"))],
        additional_notes=state.get(_key("additional_notes"), ""),
        payment_method=state.get(_key("payment_method"), ""),
    )


def price_summary_rows(breakdown: PriceBreakdown) -> List[Tuple[str, int]]:
    """Non-zero line items for the price summary box."""
    rows = [
        ("Registration", breakdown.registration_price),
        ("Vendor Tables", breakdown.vendor_price),
        ("Advertisements", breakdown.advertisement_price),
        ("Special Events", breakdown.special_events_price),
    ]
    return [(label, amount) for label, amount in rows if amount > 0]


def _render_price_summary(breakdown: PriceBreakdown) -> None:
    rows = price_summary_rows(breakdown)
    if not rows:
        st.info("Select a registration, vendor table, advertisement or event to see your total.")
        return

    st.markdown(price_summary_html(rows, breakdown.total), unsafe_allow_html=True)


def _render_contact_section() -> None:
    st.markdown("### Contact Information")
    col1, col2 = st.columns(2)
    with col1:
        st.text_input("First Name *", key=_key("first_name"))
        st.text_input("Email *", key=_key("email"), placeholder="your.email@example.com")
        st.text_input("Address", key=_key("address"))
        st.text_input("State", key=_key("state"))
    with col2:
        st.text_input("Last Name *", key=_key("last_name"))
        st.text_input("Phone *", key=_key("phone"))
        st.text_input("City", key=_key("city"))
        st.text_input("ZIP Code", key=_key("zip_code"))


def _render_registration_section() -> None:
    st.markdown("### Lectureship Registration")
    registration_type = st.selectbox(
        "Registration Type",
        options=[""] + list(REGISTRATION_TYPES),
        format_func=registration_option_label,
        key=_key("registration_type"),
    )

    if is_day_to_day(registration_type):
        st.caption("Select the days you will attend ($75 per day)")
        for day, label in CONFERENCE_DAYS.items():
            st.checkbox(label, key=_key(f"day_{day}"))
    elif registration_type and not is_group_type(registration_type):
        st.number_input("Number of People", min_value=1, max_value=50, step=1, key=_key("quantity"))

    quantity = st.session_state.get(_key("quantity"), 1)
    if requires_attendee_details(registration_type, quantity):
        headcount = group_headcount(registration_type) or quantity
        st.text_area(f"Attendee Names * ({headcount} people)", key=_key("attendee_names"))
        st.text_area(
            "Attendee Contacts *",
            key=_key("attendee_contacts"),
            help="Phone numbers and email addresses for the other attendees",
        )


def _render_add_on_section() -> None:
    st.markdown("### Special Events")
    for event, label in SPECIAL_EVENTS.items():
        st.checkbox(f"{label} - $75 (banquet-only guests)", key=_key(f"event_{event}"))

    st.markdown("### Vendor Tables")
    st.radio(
        "Vendor tables",
        options=VENDOR_TABLE_OPTIONS,
        format_func=vendor_option_label,
        horizontal=True,
        key=_key("vendor_tables"),
    )

    st.markdown("### Program Advertisements")
    for ad, label in ADVERTISEMENT_TIERS.items():
        st.checkbox(f"{label} - ${ADVERTISEMENT_PRICES[ad]}", key=_key(f"ad_{ad}"))

    st.markdown("### Additional Information")
    st.selectbox("Preferred Payment Method (optional)", options=PAYMENT_METHODS, key=_key("payment_method"))
    st.text_area("Additional Notes", key=_key("additional_notes"))


def _render_payment_screen(record: RegistrationRecord) -> None:
    st.markdown("## Complete Your Payment")
    st.success(f"Thank you {record.first_name}! Your registration ID is `{record.id}`.")

    for item in payment_links_for(record):
        col1, col2 = st.columns([3, 1])
        with col1:
            st.markdown(f"**{item.label}** - ${item.amount:,}")
        with col2:
            st.link_button("Pay now", item.url, use_container_width=True)

    if record.total_amount > 0:
        st.markdown(f"### Total Amount Due: ${record.total_amount:,}")

    st.caption("Mail-in payments: make checks payable to the National Lectureship and include your registration ID.")

    if st.button("⬅️ Back to form"):
        st.session_state.pop(RESULT_KEY, None)
        st.rerun()


def render_register_page() -> None:
    """Render the registration form, or the payment screen after submit."""
    record = st.session_state.get(RESULT_KEY)
    if record is not None:
        _render_payment_screen(record)
        return

    st.markdown("## 📝 Lectureship Registration")
    _render_contact_section()
    _render_registration_section()
    _render_add_on_section()

    selection = selection_from_state(st.session_state)
    _render_price_summary(calculate_price(selection))

    if st.button("Continue to Payment", type="primary", use_container_width=True):
        with st.spinner("Submitting registration..."):
            success, message, record = submit_registration(selection)
        if success:
            st.session_state[RESULT_KEY] = record
            st.rerun()
        else:
            st.error(f"❌ {message}")
