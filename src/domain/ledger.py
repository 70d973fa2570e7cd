# src/domain/ledger.py
"""
Ledger engine: applies one BUY or SELL to an account snapshot.
Uses weighted-average cost; lots are never tracked individually.
"""

from dataclasses import replace
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import List, Optional, Union

from src.domain.errors import (
    InsufficientFunds,
    InsufficientShares,
    InvalidPrice,
    InvalidQuantity,
    InvalidSymbol,
    InvalidTradeType,
)
from src.domain.models import ZERO, AccountState, Position, TradeType, Transaction

# Smallest price step; prices are rounded to it before any arithmetic
PRICE_SCALE = Decimal("0.00000001")


class LedgerEngine:
    """Pure state transform from (account, trade) to the new account."""

    @staticmethod
    def apply_trade(
        state: AccountState,
        symbol: str,
        trade_type: Union[TradeType, str],
        quantity: int,
        price: Union[Decimal, int, float, str],
        now: Optional[datetime] = None,
    ) -> AccountState:
        """
        Apply a single trade.

        Args:
            state: Current account snapshot (not modified)
            symbol: Instrument identifier
            trade_type: BUY or SELL
            quantity: Positive whole number of units
            price: Positive execution price, rounded to PRICE_SCALE
            now: Timestamp for the transaction record; naive values are taken as UTC. Defaults to now

        Returns:
            New AccountState with the trade applied

        Raises:
            TradeError subclass when the trade is rejected
        """
        symbol = LedgerEngine._validate_symbol(symbol)
        trade_type = LedgerEngine._validate_type(trade_type)
        quantity = LedgerEngine._validate_quantity(quantity)
        price = LedgerEngine._validate_price(price)

        total_amount = quantity * price
        wallet = state.wallet
        existing = state.position(symbol)

        if trade_type == TradeType.BUY:
            if total_amount > wallet.balance:
                raise InsufficientFunds(required=total_amount, available=wallet.balance)

            position = existing or Position(symbol=symbol)
            total_investment = position.total_investment + total_amount
            new_quantity = position.quantity + quantity
            position = replace(
                position,
                quantity=new_quantity,
                total_investment=total_investment,
                average_price=total_investment / new_quantity,
            )
            balance = wallet.balance - total_amount

        else:
            available = existing.quantity if existing else 0
            if existing is None or available < quantity:
                raise InsufficientShares(required=quantity, available=available)

            new_quantity = existing.quantity - quantity
            # average_price is unchanged by a sell
            position = replace(
                existing,
                quantity=new_quantity,
                total_investment=new_quantity * existing.average_price,
            )
            balance = wallet.balance + total_amount

        position = position.marked(price)

        transaction = Transaction(
            symbol=symbol,
            type=trade_type,
            quantity=quantity,
            price=price,
            total_amount=total_amount,
            timestamp=LedgerEngine._timestamp(now),
        )

        return replace(
            state,
            wallet=replace(wallet, balance=balance),
            positions=LedgerEngine._merge_position(state.positions, position),
            transactions=state.transactions + (transaction,),
        )

    @staticmethod
    def _timestamp(now: Optional[datetime]) -> datetime:
        if now is None:
            return datetime.now(timezone.utc)
        return now.replace(tzinfo=timezone.utc) if now.tzinfo is None else now

    @staticmethod
    def _merge_position(positions, updated: Position):
        """Replace (or append) the traded position and prune empty holdings."""
        merged: List[Position] = []
        found = False
        for pos in positions:
            if pos.symbol == updated.symbol:
                merged.append(updated)
                found = True
            else:
                merged.append(pos)
        if not found:
            merged.append(updated)
        return tuple(p for p in merged if p.quantity > 0)

    @staticmethod
    def _validate_symbol(symbol) -> str:
        if not isinstance(symbol, str) or not symbol.strip():
            raise InvalidSymbol("Symbol is required")
        return symbol.strip()

    @staticmethod
    def _validate_type(trade_type) -> TradeType:
        try:
            return TradeType(str(getattr(trade_type, "value", trade_type)).upper())
        except ValueError:
            raise InvalidTradeType(f"Unknown trade type: {trade_type!r}") from None

    @staticmethod
    def _validate_quantity(quantity) -> int:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidQuantity(f"Quantity must be a positive integer, got {quantity!r}")
        return quantity

    @staticmethod
    def _validate_price(price) -> Decimal:
        if isinstance(price, bool):
            raise InvalidPrice(f"Price must be a positive number, got {price!r}")
        try:
            value = price if isinstance(price, Decimal) else Decimal(str(price))
        except (InvalidOperation, ValueError):
            raise InvalidPrice(f"Price must be a positive number, got {price!r}") from None
        if not value.is_finite() or value <= ZERO:
            raise InvalidPrice(f"Price must be a positive number, got {price!r}")
        try:
            value = value.quantize(PRICE_SCALE, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            raise InvalidPrice(f"Price is too large, got {price!r}") from None
        if value <= ZERO:
            raise InvalidPrice(f"Price is below the smallest step of {PRICE_SCALE}, got {price!r}")
        return value
