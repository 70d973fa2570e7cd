# tests/test_trade_service.py
from __future__ import annotations

from decimal import Decimal

from src.db.store import ConcurrentUpdateError, PersistenceFailure
from src.services.trading import TradeRequest, TradeService


def test_buy_with_explicit_price(service, account_id):
    outcome = service.execute(
        account_id, {"symbol": "aapl", "type": "BUY", "quantity": 10, "price": 150}
    )

    assert outcome.status_code == 200
    assert outcome.ok
    assert outcome.payload["message"] == "BUY transaction successful"
    assert outcome.payload["wallet"] == {"balance": 8500.0, "currency": "USD"}
    assert outcome.payload["portfolio"] == [
        {
            "symbol": "AAPL",
            "quantity": 10,
            "average_price": 150.0,
            "total_investment": 1500.0,
            "current_value": 1500.0,
        }
    ]
    assert len(outcome.payload["transactions"]) == 1
    assert outcome.payload["transactions"][0]["total_amount"] == 1500.0


def test_price_comes_from_quote_source_when_omitted(service, quotes, account_id):
    quotes.set_price("MSFT", "312.5")

    outcome = service.execute(account_id, {"symbol": "MSFT", "type": "buy", "quantity": 2})

    assert outcome.status_code == 200
    assert outcome.payload["transactions"][0]["price"] == 312.5
    assert outcome.payload["wallet"]["balance"] == 10000 - 625.0


def test_quote_failure_is_502(service, account_id):
    outcome = service.execute(account_id, {"symbol": "ZZZZ", "type": "BUY", "quantity": 1})
    assert outcome.status_code == 502
    assert outcome.payload["error"] == "Failed to fetch price data"


def test_invalid_payload_is_400(service, store, account_id):
    for payload in [
        {"symbol": "AAPL", "type": "BUY", "quantity": 0, "price": 10},
        {"symbol": "AAPL", "type": "BUY", "quantity": 1, "price": -1},
        {"symbol": "AAPL", "type": "HOLD", "quantity": 1, "price": 10},
        {"symbol": "  ", "type": "BUY", "quantity": 1, "price": 10},
        {"type": "BUY", "quantity": 1, "price": 10},
    ]:
        outcome = service.execute(account_id, payload)
        assert outcome.status_code == 400, payload
        assert outcome.payload["error"] == "Invalid data format or values"
        assert outcome.payload["details"]

    assert store.load(account_id).version == 0


def test_insufficient_funds_is_400_with_figures(service, store, account_id):
    outcome = service.execute(
        account_id, {"symbol": "AAPL", "type": "BUY", "quantity": 100, "price": 1000}
    )

    assert outcome.status_code == 400
    assert outcome.payload == {
        "error": "Insufficient funds",
        "kind": "InsufficientFunds",
        "required": 100000.0,
        "available": 10000.0,
    }
    assert store.load(account_id).transactions == ()


def test_insufficient_shares_is_400_with_figures(service, account_id):
    service.execute(account_id, {"symbol": "AAPL", "type": "BUY", "quantity": 15, "price": 100})

    outcome = service.execute(
        account_id, {"symbol": "AAPL", "type": "SELL", "quantity": 25, "price": 100}
    )

    assert outcome.status_code == 400
    assert outcome.payload["kind"] == "InsufficientShares"
    assert outcome.payload["required"] == 25
    assert outcome.payload["available"] == 15


def test_rejected_trades_leave_stored_account_unchanged(service, store, account_id):
    service.execute(account_id, {"symbol": "AAPL", "type": "BUY", "quantity": 15, "price": 100})
    before = store.load(account_id)

    for payload in [
        {"symbol": "AAPL", "type": "SELL", "quantity": 25, "price": 100},
        {"symbol": "MSFT", "type": "SELL", "quantity": 1, "price": 300},
        {"symbol": "MSFT", "type": "BUY", "quantity": 1000, "price": 300},
        {"symbol": "AAPL", "type": "BUY", "quantity": -1, "price": 100},
    ]:
        assert service.execute(account_id, payload).status_code == 400, payload

    after = store.load(account_id)
    assert after == before
    assert after.version == before.version == 1


def test_price_below_smallest_step_is_400(service, store, account_id):
    for _ in range(5):
        outcome = service.execute(
            account_id, {"symbol": "AAPL", "type": "BUY", "quantity": 1, "price": "0.000000004"}
        )
        assert outcome.status_code == 400
        assert outcome.payload["error"] == "Invalid data format or values"

    state = store.load(account_id)
    assert state.wallet.balance == Decimal("10000")
    assert state.positions == ()
    assert state.version == 0


def test_unknown_account_is_404(service):
    outcome = service.execute("nope", {"symbol": "AAPL", "type": "BUY", "quantity": 1, "price": 1})
    assert outcome.status_code == 404


def test_accepts_validated_request_object(service, account_id):
    request = TradeRequest(symbol="AAPL", type="BUY", quantity=1, price=Decimal("99"))
    outcome = service.execute(account_id, request)
    assert outcome.status_code == 200


class _FailingStore:
    def __init__(self, error):
        self.error = error

    def update(self, account_id, mutator):
        raise self.error

    def load(self, account_id):
        raise self.error


def test_persistence_failure_is_500(quotes):
    service = TradeService(_FailingStore(PersistenceFailure("disk full")), quotes)

    outcome = service.execute("acct", {"symbol": "AAPL", "type": "BUY", "quantity": 1})

    assert outcome.status_code == 500
    assert outcome.payload["error"] == "Failed to save transaction"
    assert "disk full" in outcome.payload["details"]


def test_conflict_after_retries_is_409(quotes):
    service = TradeService(_FailingStore(ConcurrentUpdateError("busy")), quotes)
    outcome = service.execute("acct", {"symbol": "AAPL", "type": "BUY", "quantity": 1})
    assert outcome.status_code == 409


def test_portfolio_view(service, account_id):
    service.execute(account_id, {"symbol": "AAPL", "type": "BUY", "quantity": 2, "price": 50})

    outcome = service.portfolio(account_id)

    assert outcome.status_code == 200
    assert outcome.payload["wallet"]["balance"] == 9900.0
    assert [p["symbol"] for p in outcome.payload["portfolio"]] == ["AAPL"]
    assert service.portfolio("nope").status_code == 404
