# src/ui/pages/portfolio_page.py
"""Portfolio page - positions marked at live quotes."""

import streamlit as st

from src.domain.metrics import MetricsCalculator
from src.io.quotes import QuoteUnavailable
from src.ui.helpers.current_context import load_account_state, require_account_id


def render(ctx):
    """Render portfolio page."""
    st.subheader("Portfolio")

    account_id = require_account_id()
    state = load_account_state(ctx, account_id)

    quotes = {}
    for pos in state.positions:
        try:
            quotes[pos.symbol] = ctx.quotes.get_price(pos.symbol)
        except QuoteUnavailable:
            st.warning(f"No live quote for {pos.symbol}; showing last trade value")

    summary = MetricsCalculator.get_portfolio_summary(state, quotes)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Cash", f"${summary['cash']:,.2f}")
    col2.metric("Market Value", f"${summary['market_value']:,.2f}")
    col3.metric(
        "Unrealized P&L",
        f"${summary['unrealized_pnl']:,.2f}",
        f"{summary['unrealized_pnl_pct']:.2f}%",
    )
    col4.metric("Total Equity", f"${summary['total_equity']:,.2f}")

    st.divider()

    marked = MetricsCalculator.mark_positions(state, quotes)
    df = MetricsCalculator.get_positions_frame(marked)

    if df.empty:
        st.info("No open positions. Head to the Trade page to buy something.")
    else:
        df_display = df.copy()
        for col in ["average_price", "total_investment", "current_value", "unrealized_pnl"]:
            df_display[col] = df_display[col].apply(lambda x: f"${x:,.2f}")
        df_display["unrealized_pnl_pct"] = df_display["unrealized_pnl_pct"].apply(lambda x: f"{x:.2f}%")
        st.dataframe(df_display, use_container_width=True, hide_index=True)

    realized = MetricsCalculator.get_realized_pnl(state.transactions)
    if realized:
        st.subheader("Realized P&L")
        cols = st.columns(min(len(realized), 4))
        for i, (symbol, pnl) in enumerate(sorted(realized.items())):
            cols[i % len(cols)].metric(symbol, f"${pnl:,.2f}")
