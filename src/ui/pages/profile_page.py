# src/ui/pages/profile_page.py
"""Profile page - wallet and watchlist."""

import streamlit as st

from src.services.watchlist import WatchlistService
from src.ui.helpers.current_context import load_account_state, require_account_id


def render(ctx):
    """Render profile page."""
    st.subheader("Profile")

    account_id = require_account_id()
    user = st.session_state.user
    state = load_account_state(ctx, account_id)

    col1, col2 = st.columns(2)
    col1.write(f"**Name:** {user.username}")
    col1.write(f"**Email:** {user.email}")
    col2.metric("Wallet", f"${state.wallet.balance:,.2f} {state.wallet.currency}")

    st.divider()
    st.subheader("Watchlist")

    with ctx.db.get_session() as session:
        symbols = WatchlistService.list_symbols(session, account_id)

    if not symbols:
        st.write("No stocks in watchlist")

    for symbol in symbols:
        c1, c2 = st.columns([4, 1])
        c1.write(symbol)
        if c2.button("Remove", key=f"remove_{symbol}"):
            with ctx.db.get_session() as session:
                WatchlistService.remove_symbol(session, account_id, symbol)
            st.rerun()

    new_symbol = st.text_input("Add symbol", key="watchlist_add")
    if st.button("Add") and new_symbol:
        with ctx.db.get_session() as session:
            added = WatchlistService.add_symbol(session, account_id, new_symbol)
        if not added:
            st.warning(f"{new_symbol.strip().upper()} is already on your watchlist")
        else:
            st.rerun()
