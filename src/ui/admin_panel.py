"""Admin panel UI for reviewing and managing registrations."""
import json
import logging
import traceback
from typing import Any, Dict

import streamlit as st

from src.models.registration import (
    ADVERTISEMENT_TIERS,
    CONFERENCE_DAYS,
    PAYMENT_STATUSES,
    REGISTRATION_TYPES,
    SPECIAL_EVENTS,
    VENDOR_TABLE_OPTIONS,
    RegistrationSelection,
    records_to_dicts,
)
from src.services.admin_service import (
    SORTABLE_FIELDS,
    filter_registrations,
    is_admin_authenticated,
    login_admin,
    logout_admin,
    registration_stats,
    sort_registrations,
)
from src.services.export_service import (
    export_filename,
    export_summary_report,
    export_to_csv,
)
from src.services.reconcile_service import parse_source
from src.services.registration_service import build_registration
from src.services.registration_store import get_registration_store
from src.ui.html_utils import pill
from src.ui.register_page import registration_option_label, vendor_option_label
from src.utils.date_utils import format_display_time
from src.utils.exceptions import (
    FileWriteError,
    RegistrationNotFoundError,
    SourceParseError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_COLORS = {
    "paid": "#10b981",
    "pending": "#f59e0b",
    "partial": "#3b82f6",
    "refunded": "#ef4444",
}


def _show_admin_exception(error: Exception, context: str) -> None:
    """Display error details in UI and log full traceback."""
    logger.exception("Admin panel error during %s", context)

    st.error(f"❌ {context} failed: {error}")
    with st.expander("🔍 Error details"):
        st.code("".join(traceback.format_exception(type(error), error, error.__traceback__)))


def _set_feedback(level: str, message: str) -> None:
    st.session_state["admin_feedback"] = (level, message)


def _render_feedback() -> None:
    feedback = st.session_state.pop("admin_feedback", None)
    if not feedback:
        return
    level, message = feedback
    if level == "success":
        st.success(message)
    elif level == "error":
        st.error(message)
    elif level == "warning":
        st.warning(message)
    else:
        st.info(message)


def status_badge(status: str) -> str:
    """Colored pill for a payment status."""
    return pill(status.capitalize(), STATUS_COLORS.get(status, "#94a3b8"))


def render_login_page():
    """Render admin login page."""
    with st.form("admin_login_form", clear_on_submit=False):
        st.markdown("## 🔐 Admin Access Required")
        st.caption("Churches of Christ National Lectureship 2026")

        username = st.text_input("Username", key="admin_username_input")
        password = st.text_input("Password", type="password", key="admin_password_input")

        submit = st.form_submit_button("Log in", type="primary", use_container_width=True)

        if submit:
            if not username or not password:
                st.error("❌ Enter username and password")
            else:
                success, message = login_admin(username, password)
                if success:
                    st.success(f"✅ {message}")
                    st.rerun()
                else:
                    st.error(f"❌ {message}")


def _render_stats(records) -> None:
    stats = registration_stats(records)
    cols = st.columns(5)
    cols[0].metric("Registrations", stats["total"])
    cols[1].metric("Paid", stats["paid"])
    cols[2].metric("Pending", stats["pending"])
    cols[3].metric("Revenue", f"${stats['total_revenue']:,}")
    cols[4].metric("Pending Revenue", f"${stats['pending_revenue']:,}")


def _render_exports(records) -> None:
    if not records:
        st.info("No registrations to export")
        return

    col1, col2, col3 = st.columns(3)
    with col1:
        st.download_button(
            "⬇️ Export CSV",
            data=export_to_csv(records),
            file_name=export_filename("registrations", "csv"),
            mime="text/csv",
            use_container_width=True,
        )
    with col2:
        st.download_button(
            "⬇️ Summary Report",
            data=export_summary_report(records),
            file_name=export_filename("lectureship_summary", "txt"),
            mime="text/plain",
            use_container_width=True,
        )
    with col3:
        st.download_button(
            "⬇️ JSON Backup",
            data=json.dumps(records_to_dicts(records), ensure_ascii=False, indent=2),
            file_name=export_filename("lectureship_backup", "json"),
            mime="application/json",
            use_container_width=True,
        )


def _render_table(store, records) -> None:
    filter_col, search_col, sort_col, dir_col = st.columns([1, 2, 1, 1])
    with filter_col:
        status = st.selectbox("Status", ["all"] + PAYMENT_STATUSES, key="admin_filter_status")
    with search_col:
        search = st.text_input("Search name or email", key="admin_search")
    with sort_col:
        sort_field = st.selectbox("Sort by", SORTABLE_FIELDS, key="admin_sort_field")
    with dir_col:
        descending = st.radio("Order", ["desc", "asc"], horizontal=True, key="admin_sort_dir") == "desc"

    visible = sort_registrations(filter_registrations(records, status, search), sort_field, descending)
    st.caption(f"Showing {len(visible)} of {len(records)} registrations")

    for record in visible:
        col1, col2, col3, col4, col5 = st.columns([2, 2, 1, 1.4, 0.6], gap="small")
        with col1:
            st.markdown(f"**{record.full_name()}**")
            st.caption(f"{record.email} · {record.phone}")
        with col2:
            st.text(REGISTRATION_TYPES.get(record.registration_type, "Add-ons only"))
            st.caption(format_display_time(record.timestamp))
        with col3:
            st.markdown(f"**${record.total_amount:,}**")
            st.markdown(status_badge(record.payment_status), unsafe_allow_html=True)
        with col4:
            new_status = st.selectbox(
                "Payment status",
                PAYMENT_STATUSES,
                index=PAYMENT_STATUSES.index(record.payment_status),
                key=f"status_{record.id}",
                label_visibility="collapsed",
            )
            if new_status != record.payment_status:
                store.update(record.id, {"paymentStatus": new_status})
                _set_feedback("success", f"{record.full_name()} marked {new_status}")
                st.rerun()
        with col5:
            if st.button("🗑️", key=f"delete_{record.id}", help="Delete"):
                try:
                    store.remove(record.id)
                    _set_feedback("success", f"Deleted registration {record.id}")
                except RegistrationNotFoundError as e:
                    _set_feedback("error", str(e))
                st.rerun()


def manual_entry_selection(values: Dict[str, Any]) -> RegistrationSelection:
    """Selection for the admin's manual-entry form values."""
    return RegistrationSelection(
        first_name=values.get("first_name", ""),
        last_name=values.get("last_name", ""),
        email=values.get("email", ""),
        phone=values.get("phone", ""),
        registration_type=values.get("registration_type", ""),
        quantity=values.get("quantity", 1),
        day_to_day_dates=values.get("day_to_day_dates", ()),
        attendee_names=values.get("attendee_names", ""),
        attendee_contacts=values.get("attendee_contacts", ""),
        special_events=values.get("special_events", ()),
        vendor_tables=values.get("vendor_tables", 0),
        advertisements=values.get("advertisements", ()),
        additional_notes=values.get("additional_notes", ""),
    )


def _render_manual_entry(store) -> None:
    with st.expander("➕ Add registration manually"):
        with st.form("admin_manual_entry", clear_on_submit=True):
            values: Dict[str, Any] = {}
            col1, col2 = st.columns(2)
            with col1:
                values["first_name"] = st.text_input("First Name")
                values["email"] = st.text_input("Email")
                values["registration_type"] = st.selectbox(
                    "Registration Type",
                    [""] + list(REGISTRATION_TYPES),
                    format_func=registration_option_label,
                )
                values["vendor_tables"] = st.selectbox(
                    "Vendor Tables", VENDOR_TABLE_OPTIONS, format_func=vendor_option_label
                )
            with col2:
                values["last_name"] = st.text_input("Last Name")
                values["phone"] = st.text_input("Phone")
                values["quantity"] = st.number_input("Quantity", min_value=1, value=1, step=1)
                values["day_to_day_dates"] = st.multiselect(
                    "Days (day-to-day only)",
                    list(CONFERENCE_DAYS),
                    format_func=CONFERENCE_DAYS.get,
                )
            values["special_events"] = st.multiselect(
                "Special Events", list(SPECIAL_EVENTS), format_func=SPECIAL_EVENTS.get
            )
            values["advertisements"] = st.multiselect(
                "Advertisements", list(ADVERTISEMENT_TIERS), format_func=ADVERTISEMENT_TIERS.get
            )
            values["attendee_names"] = st.text_area("Attendee Names")
            values["attendee_contacts"] = st.text_area("Attendee Contacts")
            values["additional_notes"] = st.text_area("Notes")

            if st.form_submit_button("Add", type="primary"):
                try:
                    record = build_registration(manual_entry_selection(values))
                    store.append(record)
                except ValidationError as e:
                    st.error(f"❌ {e.message}")
                    return
                except FileWriteError as e:
                    _show_admin_exception(e, "Saving registration")
                    return
                _set_feedback("success", f"Added registration {record.id} (${record.total_amount:,})")
                st.rerun()


def _render_backup_tools(store) -> None:
    with st.expander("🗄️ Backup & data tools"):
        uploaded = st.file_uploader("Import JSON backup", type=["json"], key="admin_import")
        if uploaded is not None and st.button("Import"):
            try:
                records = parse_source(uploaded.getvalue().decode("utf-8"), uploaded.name)
            except (SourceParseError, UnicodeDecodeError) as e:
                st.error(f"❌ Invalid backup file: {e}")
            else:
                store.replace_all(records)
                _set_feedback("success", f"Imported {len(records)} registrations")
                st.rerun()

        st.markdown("---")
        confirm = st.checkbox("I understand this deletes ALL registration data", key="admin_confirm_clear")
        if st.button("Clear all data", disabled=not confirm):
            store.clear()
            _set_feedback("warning", "All registration data deleted")
            st.rerun()


def render_admin_panel():
    """Render admin management panel."""
    try:
        if not is_admin_authenticated():
            render_login_page()
            return

        _render_feedback()

        header_col, logout_col = st.columns([4, 1])
        with header_col:
            st.markdown("## 📊 Registration Admin")
        with logout_col:
            if st.button("🚪 Log out", use_container_width=True):
                logout_admin()
                st.session_state.current_page = "register"
                st.rerun()

        store = get_registration_store()
        records = store.list()

        _render_stats(records)
        _render_exports(records)
        _render_manual_entry(store)
        _render_backup_tools(store)

        if not records:
            st.info("📝 No registrations yet")
            return

        _render_table(store, records)

    except Exception as error:
        _show_admin_exception(error, "Loading admin panel")
