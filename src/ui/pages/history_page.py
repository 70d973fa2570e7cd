# src/ui/pages/history_page.py
"""History page - all transactions with filters."""

import streamlit as st

from src.domain.metrics import MetricsCalculator
from src.ui.helpers.current_context import load_account_state, require_account_id


def render(ctx):
    """Render transaction history page."""
    st.subheader("Transaction History")

    account_id = require_account_id()
    state = load_account_state(ctx, account_id)

    if not state.transactions:
        st.info("No transactions yet.")
        return

    df = MetricsCalculator.get_transactions_frame(
        state.transactions,
        report_timezone=st.session_state.get("report_timezone", "US/Eastern"),
    )

    col1, col2 = st.columns(2)
    with col1:
        unique_symbols = sorted(df["symbol"].unique())
        symbol_filter = st.multiselect("Symbols", unique_symbols, default=unique_symbols)
    with col2:
        type_filter = st.multiselect("Type", ["BUY", "SELL"], default=["BUY", "SELL"])

    # Empty filter means "all"
    if symbol_filter:
        df = df[df["symbol"].isin(symbol_filter)]
    if type_filter:
        df = df[df["type"].isin(type_filter)]

    if not df.empty:
        st.download_button(
            label="📥 Export to CSV",
            data=df.to_csv(index=False),
            file_name="transactions.csv",
            mime="text/csv",
        )

    df_display = df.copy()
    df_display["price"] = df_display["price"].apply(lambda x: f"${x:,.2f}")
    df_display["total_amount"] = df_display["total_amount"].apply(lambda x: f"${x:,.2f}")
    st.dataframe(df_display, use_container_width=True, hide_index=True)

    st.divider()
    col1, col2, col3 = st.columns(3)
    col1.metric("Transactions", len(df))
    col2.metric("Bought", f"${df.loc[df['type'] == 'BUY', 'total_amount'].sum():,.2f}")
    col3.metric("Sold", f"${df.loc[df['type'] == 'SELL', 'total_amount'].sum():,.2f}")
