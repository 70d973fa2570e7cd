# src/ui/pages/trade_page.py
"""Trade page - buy/sell at the current quote."""

import streamlit as st

from src.io.quotes import QuoteUnavailable
from src.ui.helpers.current_context import load_account_state, require_account_id


def render(ctx):
    """Render trade page."""
    st.subheader("Trade")

    account_id = require_account_id()
    state = load_account_state(ctx, account_id)

    st.metric("Available Balance", f"${state.wallet.balance:,.2f} {state.wallet.currency}")

    symbol = st.text_input("Symbol", key="trade_symbol").strip().upper()
    if not symbol:
        st.info("Enter a symbol to trade.")
        return

    try:
        price = ctx.quotes.get_price(symbol)
    except QuoteUnavailable as e:
        st.error(f"Failed to fetch price data: {e.reason}")
        return

    held = state.position(symbol)

    col1, col2, col3 = st.columns(3)
    col1.metric("Price", f"${price:,.2f}")
    col2.metric("Shares Held", held.quantity if held else 0)
    col3.metric("Avg Cost", f"${held.average_price:,.2f}" if held else "-")

    side = st.radio("Side", ["BUY", "SELL"], horizontal=True)
    quantity = st.number_input("Quantity", min_value=1, step=1, value=1)

    st.write(f"Estimated total: **${price * int(quantity):,.2f}**")

    if st.button(f"Place {side} order", type="primary"):
        # Fill at the quote shown to the user
        outcome = ctx.trades.execute(
            account_id,
            {"symbol": symbol, "type": side, "quantity": int(quantity), "price": price},
        )

        if outcome.ok:
            st.success(outcome.payload["message"])
            st.rerun()
        else:
            error = outcome.payload.get("error", "Transaction failed")
            if "required" in outcome.payload:
                st.error(
                    f"{error}: required {outcome.payload['required']:,}, "
                    f"available {outcome.payload['available']:,}"
                )
            else:
                st.error(error)
