# src/domain/metrics.py
"""Portfolio metrics and reporting frames."""

from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, Mapping, Optional

import pandas as pd
import pytz

from src.domain.models import ZERO, AccountState, Position, TradeType, Transaction


class MetricsCalculator:
    """Derived figures for an account snapshot."""

    @staticmethod
    def mark_positions(state: AccountState, quotes: Mapping[str, Decimal]) -> AccountState:
        """
        Re-value positions at live quotes.
        Symbols without a quote keep the value from their last trade.
        """
        marked = tuple(
            pos.marked(Decimal(str(quotes[pos.symbol]))) if pos.symbol in quotes else pos
            for pos in state.positions
        )
        return AccountState(
            wallet=state.wallet,
            positions=marked,
            transactions=state.transactions,
            version=state.version,
        )

    @staticmethod
    def get_portfolio_summary(
        state: AccountState,
        quotes: Optional[Mapping[str, Decimal]] = None,
    ) -> Dict:
        """Cash, cost basis, market value and unrealized P&L."""
        if quotes:
            state = MetricsCalculator.mark_positions(state, quotes)

        invested = sum((p.total_investment for p in state.positions), ZERO)
        market_value = sum((p.current_value for p in state.positions), ZERO)
        cash = state.wallet.balance

        return {
            "cash": cash,
            "currency": state.wallet.currency,
            "invested": invested,
            "market_value": market_value,
            "unrealized_pnl": market_value - invested,
            "unrealized_pnl_pct": (market_value - invested) / invested * 100 if invested else ZERO,
            "total_equity": cash + market_value,
            "positions_count": len(state.positions),
        }

    @staticmethod
    def get_realized_pnl(transactions: Iterable[Transaction]) -> Dict[str, Decimal]:
        """
        Realized P&L per symbol, replayed from the trade history.

        Uses the same weighted-average cost rule as the ledger, so a sell of q
        units realizes q * (sell price - average cost at that time).
        """
        qty: Dict[str, int] = defaultdict(int)
        cost: Dict[str, Decimal] = defaultdict(lambda: ZERO)
        realized: Dict[str, Decimal] = defaultdict(lambda: ZERO)

        for tx in transactions:
            if tx.type == TradeType.BUY:
                cost[tx.symbol] += tx.total_amount
                qty[tx.symbol] += tx.quantity
                continue

            if qty[tx.symbol] <= 0:
                continue
            avg = cost[tx.symbol] / qty[tx.symbol]
            realized[tx.symbol] += tx.quantity * (tx.price - avg)
            qty[tx.symbol] -= tx.quantity
            cost[tx.symbol] = qty[tx.symbol] * avg

        return dict(realized)

    @staticmethod
    def get_positions_frame(state: AccountState) -> pd.DataFrame:
        columns = [
            "symbol", "quantity", "average_price", "total_investment",
            "current_value", "unrealized_pnl", "unrealized_pnl_pct",
        ]
        if not state.positions:
            return pd.DataFrame(columns=columns)

        rows = [_position_row(p) for p in state.positions]
        return pd.DataFrame(rows, columns=columns).sort_values("symbol").reset_index(drop=True)

    @staticmethod
    def get_transactions_frame(
        transactions: Iterable[Transaction],
        report_timezone: str = "US/Eastern",
    ) -> pd.DataFrame:
        """Trade history, newest first, timestamps shown in the report timezone."""
        columns = ["timestamp", "symbol", "type", "quantity", "price", "total_amount"]
        tz = pytz.timezone(report_timezone)

        rows = []
        for tx in transactions:
            ts = tx.timestamp if tx.timestamp.tzinfo else pytz.UTC.localize(tx.timestamp)
            local = ts.astimezone(tz)
            rows.append({
                "timestamp": local.strftime("%Y-%m-%d %H:%M:%S"),
                "symbol": tx.symbol,
                "type": tx.type.value,
                "quantity": tx.quantity,
                "price": float(tx.price),
                "total_amount": float(tx.total_amount),
            })

        if not rows:
            return pd.DataFrame(columns=columns)
        return pd.DataFrame(rows, columns=columns).iloc[::-1].reset_index(drop=True)


def _position_row(p: Position) -> Dict:
    pnl = p.unrealized_pnl
    return {
        "symbol": p.symbol,
        "quantity": p.quantity,
        "average_price": float(p.average_price),
        "total_investment": float(p.total_investment),
        "current_value": float(p.current_value),
        "unrealized_pnl": float(pnl),
        "unrealized_pnl_pct": float(pnl / p.total_investment * 100) if p.total_investment else 0.0,
    }
