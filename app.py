"""
Lectureship registration application
Churches of Christ National Lectureship 2026
"""
import logging
import streamlit as st

from src.ui.admin_panel import render_admin_panel
from src.ui.register_page import render_register_page
from src.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


# Streamlit page config
st.set_page_config(
    page_title="National Lectureship Registration",
    page_icon="📖",
    layout="wide",
    initial_sidebar_state="collapsed"
)


def initialize_session_state():
    """Set session state defaults."""
    if "current_page" not in st.session_state:
        st.session_state.current_page = "register"

    if "admin_authenticated" not in st.session_state:
        st.session_state.admin_authenticated = False

    # Direct link to the admin page: ?page=admin
    if "url_params_processed" not in st.session_state:
        query_params = st.query_params
        if query_params.get("page") == "admin":
            st.session_state.current_page = "admin"
        st.session_state.url_params_processed = True


def apply_custom_css():
    """Apply custom styles."""
    st.markdown("""
        <style>
        #MainMenu {visibility: hidden;}
        footer {visibility: hidden;}

        .stButton > button {
            border-radius: 10px;
            font-weight: 600;
        }

        .price-summary {
            background: #f8fafc;
            border: 1px solid #e2e8f0;
            border-radius: 12px;
            padding: 16px 20px;
            margin: 16px 0;
        }

        .price-row {
            display: flex;
            justify-content: space-between;
            padding: 4px 0;
        }

        .price-total {
            border-top: 1px solid #cbd5e1;
            margin-top: 8px;
            padding-top: 8px;
            font-weight: 700;
            font-size: 1.15rem;
        }
        </style>
    """, unsafe_allow_html=True)


def render_navigation():
    """Render navigation buttons."""
    nav_col1, _, nav_col3 = st.columns([1, 3, 1], gap="small")

    with nav_col1:
        if st.button("📝 Register", use_container_width=True, key="nav_register"):
            st.session_state.current_page = "register"

    with nav_col3:
        if st.button("👤 Admin", use_container_width=True, key="nav_admin"):
            st.session_state.current_page = "admin"


def render_current_page():
    """Render the page selected in session state."""
    try:
        if st.session_state.current_page == "register":
            render_register_page()

        elif st.session_state.current_page == "admin":
            render_admin_panel()

        else:
            st.error(f"Unknown page: {st.session_state.current_page}")
            if st.button("Back to registration"):
                st.session_state.current_page = "register"
                st.rerun()

    except Exception as e:
        # error boundary
        logger.exception("Unhandled exception while rendering page")
        st.error("Something went wrong, please try again")

        with st.expander("🔍 Error details"):
            st.code(str(e))

        if st.button("Back to registration"):
            st.session_state.current_page = "register"
            st.rerun()


def main():
    """Application entry point."""
    setup_logging()
    try:
        initialize_session_state()
        apply_custom_css()
        render_navigation()
        render_current_page()
    except Exception as e:
        logger.exception("Unhandled exception during app execution")
        st.error("The application hit an error, please reload the page")
        st.code(str(e))

        if st.button("🔄 Reload"):
            st.session_state.clear()
            st.rerun()


if __name__ == "__main__":
    main()
