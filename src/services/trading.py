# src/services/trading.py
"""
Trade request handling.

Validates the incoming payload, resolves the execution price, runs the ledger
inside the store's serialized update and turns the result into a
(status_code, payload) response.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Optional, Union

from pydantic import ValidationError, field_validator
from sqlmodel import Field, SQLModel

from src.db.store import AccountNotFound, AccountStore, ConcurrentUpdateError, PersistenceFailure
from src.domain.errors import TradeError
from src.domain.ledger import LedgerEngine
from src.domain.models import AccountState, TradeType
from src.io.quotes import QuoteSource, QuoteUnavailable
from src.logging_utils import get_logger

logger = get_logger(__name__)


class TradeRequest(SQLModel):
    """Validated trade payload. Without a price the order fills at the current quote."""
    symbol: str = Field(min_length=1, max_length=32)
    type: TradeType
    quantity: int = Field(gt=0)
    # at most 8 decimal places, the smallest price step the ledger keeps
    price: Optional[Decimal] = Field(default=None, gt=0, decimal_places=8)

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        v = v.strip().upper()
        if not v:
            raise ValueError("symbol must not be blank")
        return v

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        return v.strip().upper() if isinstance(v, str) else v


@dataclass
class TradeOutcome:
    status_code: int
    payload: Dict = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status_code == 200


class TradeService:
    """Executes trades for authenticated accounts."""

    def __init__(self, store: AccountStore, quotes: QuoteSource):
        self.store = store
        self.quotes = quotes

    def execute(self, account_id: str, payload: Union[TradeRequest, Dict]) -> TradeOutcome:
        """Run one trade end to end and describe the result."""
        try:
            request = payload if isinstance(payload, TradeRequest) else TradeRequest.model_validate(payload)
        except ValidationError as e:
            return TradeOutcome(400, {
                "error": "Invalid data format or values",
                "details": [
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
                ],
            })

        price = request.price
        if price is None:
            try:
                price = self.quotes.get_price(request.symbol)
            except QuoteUnavailable as e:
                return TradeOutcome(502, {"error": "Failed to fetch price data", "details": e.reason})

        def apply(state: AccountState) -> AccountState:
            return LedgerEngine.apply_trade(
                state,
                symbol=request.symbol,
                trade_type=request.type,
                quantity=request.quantity,
                price=price,
            )

        try:
            state = self.store.update(account_id, apply)
        except TradeError as e:
            logger.info("Rejected %s %s x%d for %s: %s",
                        request.type.value, request.symbol, request.quantity, account_id, e.kind)
            return TradeOutcome(400, e.to_dict())
        except AccountNotFound:
            return TradeOutcome(404, {"error": "Account not found"})
        except ConcurrentUpdateError as e:
            return TradeOutcome(409, {"error": "Account is busy, please retry", "details": str(e)})
        except PersistenceFailure as e:
            return TradeOutcome(500, {"error": "Failed to save transaction", "details": str(e)})

        logger.info("Executed %s %s x%d @ %s for %s",
                    request.type.value, request.symbol, request.quantity, price, account_id)

        payload = state_to_payload(state)
        payload["message"] = f"{request.type.value} transaction successful"
        return TradeOutcome(200, payload)

    def portfolio(self, account_id: str) -> TradeOutcome:
        """Current wallet, positions and history."""
        try:
            state = self.store.load(account_id)
        except AccountNotFound:
            return TradeOutcome(404, {"error": "Account not found"})
        except PersistenceFailure as e:
            return TradeOutcome(500, {"error": "Internal server error", "details": str(e)})
        return TradeOutcome(200, state_to_payload(state))


def state_to_payload(state: AccountState) -> Dict:
    """JSON-friendly view of an account snapshot."""
    return {
        "wallet": {"balance": float(state.wallet.balance), "currency": state.wallet.currency},
        "portfolio": [
            {
                "symbol": p.symbol,
                "quantity": p.quantity,
                "average_price": float(p.average_price),
                "total_investment": float(p.total_investment),
                "current_value": float(p.current_value),
            }
            for p in state.positions
        ],
        "transactions": [
            {
                "id": t.id,
                "symbol": t.symbol,
                "type": t.type.value,
                "quantity": t.quantity,
                "price": float(t.price),
                "total_amount": float(t.total_amount),
                "timestamp": t.timestamp.isoformat(),
            }
            for t in state.transactions
        ],
    }
