# src/domain/errors.py
"""Trade validation errors raised by the ledger engine."""

from decimal import Decimal
from typing import Dict, Optional, Union

Number = Union[int, Decimal]


class TradeError(Exception):
    """Base class for a rejected trade. The account state is left untouched."""

    kind = "TradeError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict:
        return {"error": self.message, "kind": self.kind}


class InvalidSymbol(TradeError):
    kind = "InvalidSymbol"


class InvalidTradeType(TradeError):
    kind = "InvalidTradeType"


class InvalidQuantity(TradeError):
    kind = "InvalidQuantity"


class InvalidPrice(TradeError):
    kind = "InvalidPrice"


class _ShortfallError(TradeError):
    """A trade that needs more of something than the account holds."""

    def __init__(self, message: str, required: Number, available: Number):
        super().__init__(message)
        self.required = required
        self.available = available

    def to_dict(self) -> Dict:
        payload = super().to_dict()
        payload["required"] = _plain(self.required)
        payload["available"] = _plain(self.available)
        return payload


class InsufficientFunds(_ShortfallError):
    kind = "InsufficientFunds"

    def __init__(self, required: Decimal, available: Decimal, message: Optional[str] = None):
        super().__init__(message or "Insufficient funds", required, available)


class InsufficientShares(_ShortfallError):
    kind = "InsufficientShares"

    def __init__(self, required: int, available: int, message: Optional[str] = None):
        super().__init__(message or "Insufficient shares", required, available)


def _plain(value: Number):
    # JSON payloads carry numbers, not Decimal objects
    if isinstance(value, Decimal):
        return float(value)
    return value
