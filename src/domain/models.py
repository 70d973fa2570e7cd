# src/domain/models.py
"""Domain value objects for an account's wallet, holdings and trade history."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple
import uuid

ZERO = Decimal(0)


class TradeType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True)
class Wallet:
    balance: Decimal
    currency: str = "USD"


@dataclass(frozen=True)
class Position:
    """Holdings of one symbol. total_investment == quantity * average_price."""
    symbol: str
    quantity: int = 0
    average_price: Decimal = ZERO
    total_investment: Decimal = ZERO
    current_value: Decimal = ZERO

    @property
    def unrealized_pnl(self) -> Decimal:
        return self.current_value - self.total_investment

    def marked(self, price: Decimal) -> "Position":
        """Copy of this position valued at `price`."""
        return replace(self, current_value=self.quantity * price)


@dataclass(frozen=True)
class Transaction:
    """One executed trade. Never mutated once recorded."""
    symbol: str
    type: TradeType
    quantity: int
    price: Decimal
    total_amount: Decimal
    timestamp: datetime  # timezone-aware UTC
    id: str = field(default_factory=lambda: str(uuid.uuid4()))


@dataclass(frozen=True)
class AccountState:
    """
    Snapshot of an account as seen by the ledger.

    `version` is the store's optimistic-concurrency stamp; the ledger carries
    it through untouched.
    """
    wallet: Wallet
    positions: Tuple[Position, ...] = ()
    transactions: Tuple[Transaction, ...] = ()
    version: int = 0

    def position(self, symbol: str) -> Optional[Position]:
        for pos in self.positions:
            if pos.symbol == symbol:
                return pos
        return None
