# src/ui/pages/market_page.py
"""Market page - quote lookup and price chart."""

import plotly.express as px
import streamlit as st

from src.io.quotes import QuoteUnavailable
from src.services.watchlist import WatchlistService
from src.ui.helpers.current_context import require_account_id


def render(ctx):
    """Render market page."""
    st.subheader("Market")

    account_id = require_account_id()

    with ctx.db.get_session() as session:
        watchlist = WatchlistService.list_symbols(session, account_id)

    col1, col2 = st.columns([3, 1])
    with col1:
        symbol = st.text_input("Symbol", value=watchlist[0] if watchlist else "AAPL").strip().upper()
    with col2:
        range_ = st.selectbox("Range", list(ctx.quotes.RANGE_INTERVALS), index=0)

    if not symbol:
        return

    try:
        price = ctx.quotes.get_price(symbol)
        history = ctx.quotes.get_history(symbol, range_)
    except QuoteUnavailable as e:
        st.error(f"Failed to fetch stock data: {e.reason}")
        return

    col1, col2, col3 = st.columns(3)
    col1.metric("Last Price", f"${price:,.2f}")
    if not history.empty:
        first_close = history["close"].iloc[0]
        change = float(price) - first_close
        col2.metric(f"Change ({range_})", f"${change:,.2f}", f"{change / first_close * 100:.2f}%")
        col3.metric("Range High / Low", f"${history['high'].max():,.2f} / ${history['low'].min():,.2f}")

        fig = px.line(history, x="timestamp", y="close", title=f"{symbol} ({range_})")
        fig.update_layout(xaxis_title="", yaxis_title="Price")
        st.plotly_chart(fig, use_container_width=True)
    else:
        st.info("No chart data for this range.")

    if symbol in watchlist:
        st.caption("On your watchlist")
    elif st.button("☆ Add to watchlist"):
        with ctx.db.get_session() as session:
            WatchlistService.add_symbol(session, account_id, symbol)
        st.rerun()
