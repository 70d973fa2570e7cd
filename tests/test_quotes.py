# tests/test_quotes.py
from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
import requests

from src.io.quotes import QuoteUnavailable, StaticQuoteSource, YahooQuoteSource


def _chart(meta=None, closes=None, timestamps=None):
    quote = {}
    if closes is not None:
        quote = {
            "open": closes,
            "high": closes,
            "low": closes,
            "close": closes,
            "volume": [100] * len(closes),
        }
    return {
        "chart": {
            "result": [
                {
                    "meta": meta or {},
                    "timestamp": timestamps or [],
                    "indicators": {"quote": [quote]},
                }
            ],
            "error": None,
        }
    }


def _source(payload=None, error=None):
    response = MagicMock()
    response.json.return_value = payload
    if error is not None:
        response.raise_for_status.side_effect = error

    http = MagicMock()
    http.get.return_value = response
    return YahooQuoteSource(base_url="https://example.test/", session=http), http


def test_regular_market_price():
    source, http = _source(_chart(meta={"regularMarketPrice": 187.44}))

    assert source.get_price("aapl") == Decimal("187.44")

    url = http.get.call_args.args[0]
    assert url == "https://example.test/v8/finance/chart/AAPL"
    assert http.get.call_args.kwargs["params"] == {"interval": "5m", "range": "1d"}


def test_falls_back_to_previous_close_then_last_close():
    source, _ = _source(_chart(meta={"chartPreviousClose": 99.5}))
    assert source.get_price("X") == Decimal("99.5")

    source, _ = _source(_chart(meta={}, closes=[10.0, 11.0, None], timestamps=[1, 2, 3]))
    assert source.get_price("X") == Decimal("11.0")


def test_crypto_symbols_use_dash():
    source, http = _source(_chart(meta={"regularMarketPrice": 42000}))
    source.get_price("btc/usd")
    assert http.get.call_args.args[0].endswith("/BTC-USD")


def test_http_error_is_quote_unavailable():
    source, _ = _source(error=requests.HTTPError("404 Not Found"))
    with pytest.raises(QuoteUnavailable) as exc:
        source.get_price("NOPE")
    assert exc.value.symbol == "NOPE"


def test_empty_result_is_quote_unavailable():
    source, _ = _source({"chart": {"result": None, "error": {"code": "Not Found"}}})
    with pytest.raises(QuoteUnavailable):
        source.get_price("NOPE")

    source, _ = _source(_chart(meta={}))
    with pytest.raises(QuoteUnavailable):
        source.get_price("NOPE")


def test_history_frame_and_range_fallback():
    source, http = _source(
        _chart(closes=[1.0, None, 3.0], timestamps=[1700000000, 1700000300, 1700000600])
    )

    df = source.get_history("AAPL", "10y")

    assert http.get.call_args.kwargs["params"] == {"interval": "5m", "range": "1d"}
    assert list(df.columns) == ["timestamp", "open", "high", "low", "close", "volume"]
    assert list(df["close"]) == [1.0, 3.0]


def test_history_uses_range_interval():
    source, http = _source(_chart(closes=[], timestamps=[]))
    assert source.get_history("AAPL", "1mo").empty
    assert http.get.call_args.kwargs["params"] == {"interval": "1h", "range": "1mo"}


def test_static_source():
    source = StaticQuoteSource({"aapl": 150})
    assert source.get_price(" AAPL ") == Decimal("150")
    assert source.get_history("AAPL")["close"].iloc[0] == 150.0
    with pytest.raises(QuoteUnavailable):
        source.get_price("MSFT")
