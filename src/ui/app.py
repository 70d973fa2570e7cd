# src/ui/app.py
"""Main Streamlit application with authentication."""

import streamlit as st

from src.auth import AuthManager
from src.ui.helpers.current_context import get_app_context
from src.ui.pages import market_page, trade_page, portfolio_page, history_page, profile_page

# Configure page
st.set_page_config(
    page_title="Paper Trading",
    page_icon="📈",
    layout="wide",
    initial_sidebar_state="expanded",
)

ctx = get_app_context()


def init_session_state():
    """Initialize Streamlit session state."""
    if "authenticated" not in st.session_state:
        st.session_state.authenticated = False
    if "user" not in st.session_state:
        st.session_state.user = None
    if "account_id" not in st.session_state:
        st.session_state.account_id = None
    if "report_timezone" not in st.session_state:
        st.session_state.report_timezone = ctx.settings.report_timezone


def login_page():
    """Render login/signup page."""
    st.title("Paper Trading")
    st.write(
        f"Practice trading with a virtual "
        f"{ctx.settings.starting_balance:,.0f} {ctx.settings.default_currency} balance."
    )

    col1, col2 = st.columns(2)

    with col1:
        st.subheader("Login")
        email = st.text_input("Email", key="login_email")
        password = st.text_input("Password", type="password", key="login_password")

        if st.button("Login", key="login_btn"):
            with ctx.db.get_session() as session:
                user = AuthManager.authenticate(session, email, password)
                account = AuthManager.get_account_for_user(session, user.id) if user else None

            if user and account:
                st.session_state.authenticated = True
                st.session_state.user = user
                st.session_state.account_id = account.id
                st.success("Logged in successfully!")
                st.rerun()
            else:
                st.error("Invalid email or password")

    with col2:
        st.subheader("Sign Up")
        new_username = st.text_input("Name", key="signup_username")
        new_email = st.text_input("Email", key="signup_email")
        new_password = st.text_input("Password", type="password", key="signup_password")
        new_password_confirm = st.text_input(
            "Confirm Password", type="password", key="signup_password_confirm"
        )

        if st.button("Sign Up", key="signup_btn"):
            if not new_username or not new_email or not new_password:
                st.error("All fields required")
            elif new_password != new_password_confirm:
                st.error("Passwords do not match")
            else:
                with ctx.db.get_session() as session:
                    result, message = AuthManager.create_user(
                        session,
                        new_username,
                        new_email,
                        new_password,
                        starting_balance=ctx.settings.starting_balance,
                        currency=ctx.settings.default_currency,
                    )

                if result:
                    st.success("Account created! Please log in.")
                else:
                    st.error(message)


def main_app():
    """Render main application."""
    with st.sidebar:
        st.title("⚙️ Settings")
        st.write(f"Signed in as **{st.session_state.user.username}**")

        st.subheader("Report Settings")
        timezones = ["US/Eastern", "US/Central", "US/Mountain", "US/Pacific", "UTC"]
        current = st.session_state.report_timezone
        st.session_state.report_timezone = st.selectbox(
            "Report Timezone",
            timezones,
            index=timezones.index(current) if current in timezones else 0,
        )

        st.divider()
        if st.button("Logout"):
            st.session_state.authenticated = False
            st.session_state.user = None
            st.session_state.account_id = None
            st.rerun()

    st.title("Paper Trading")

    page = st.selectbox(
        "Navigate",
        ["Market", "Trade", "Portfolio", "History", "Profile"],
    )

    if page == "Market":
        market_page.render(ctx)
    elif page == "Trade":
        trade_page.render(ctx)
    elif page == "Portfolio":
        portfolio_page.render(ctx)
    elif page == "History":
        history_page.render(ctx)
    elif page == "Profile":
        profile_page.render(ctx)


init_session_state()

if st.session_state.authenticated:
    main_app()
else:
    login_page()
