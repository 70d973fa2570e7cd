# src/io/quotes.py
"""
Market quote sources.
The ledger never fetches prices itself; the trade service asks one of these.
"""

from decimal import Decimal
from typing import Dict, List, Optional, Protocol

import pandas as pd
import requests

from src.logging_utils import get_logger

logger = get_logger(__name__)


class QuoteUnavailable(Exception):
    """No usable price could be obtained for a symbol."""

    def __init__(self, symbol: str, reason: str):
        super().__init__(f"Quote unavailable for {symbol}: {reason}")
        self.symbol = symbol
        self.reason = reason


class QuoteSource(Protocol):
    def get_price(self, symbol: str) -> Decimal:
        ...

    def get_history(self, symbol: str, range_: str = "1d") -> pd.DataFrame:
        ...


HISTORY_COLUMNS = ["timestamp", "open", "high", "low", "close", "volume"]


class YahooQuoteSource:
    """Quotes from the Yahoo Finance chart API."""

    # range -> bar interval
    RANGE_INTERVALS = {
        "1d": "5m",
        "5d": "15m",
        "1mo": "1h",
        "3mo": "1d",
        "1y": "1d",
    }
    DEFAULT_RANGE = "1d"

    HEADERS = {
        "User-Agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
        )
    }

    def __init__(
        self,
        base_url: str = "https://query1.finance.yahoo.com",
        timeout: float = 10,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.http = session or requests.Session()

    @staticmethod
    def to_provider_symbol(symbol: str) -> str:
        """Crypto and forex pairs are written BTC/USD here but BTC-USD upstream."""
        return symbol.strip().upper().replace("/", "-")

    def fetch_chart(self, symbol: str, range_: str = DEFAULT_RANGE) -> Dict:
        """Return the first chart result for a symbol."""
        if range_ not in self.RANGE_INTERVALS:
            range_ = self.DEFAULT_RANGE

        url = f"{self.base_url}/v8/finance/chart/{self.to_provider_symbol(symbol)}"
        params = {"interval": self.RANGE_INTERVALS[range_], "range": range_}

        try:
            r = self.http.get(url, params=params, headers=self.HEADERS, timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("Quote request failed for %s: %s", symbol, e)
            raise QuoteUnavailable(symbol, str(e)) from e

        results = (data.get("chart") or {}).get("result") or []
        if not results:
            raise QuoteUnavailable(symbol, "no chart data")
        return results[0]

    def get_price(self, symbol: str) -> Decimal:
        result = self.fetch_chart(symbol)
        meta = result.get("meta") or {}

        price = meta.get("regularMarketPrice") or meta.get("chartPreviousClose")
        if not price:
            closes = _quote_series(result).get("close") or []
            price = next((c for c in reversed(closes) if c), None)

        if not price or price <= 0:
            raise QuoteUnavailable(symbol, "no price in response")
        return Decimal(str(price))

    def get_history(self, symbol: str, range_: str = DEFAULT_RANGE) -> pd.DataFrame:
        """OHLCV bars for the chart; rows without a close are dropped."""
        result = self.fetch_chart(symbol, range_)
        timestamps = result.get("timestamp") or []
        if not timestamps:
            return pd.DataFrame(columns=HISTORY_COLUMNS)

        quote = _quote_series(result)
        df = pd.DataFrame(
            {
                "timestamp": pd.to_datetime(timestamps, unit="s", utc=True),
                "open": quote.get("open") or [None] * len(timestamps),
                "high": quote.get("high") or [None] * len(timestamps),
                "low": quote.get("low") or [None] * len(timestamps),
                "close": quote.get("close") or [None] * len(timestamps),
                "volume": quote.get("volume") or [None] * len(timestamps),
            }
        )
        return df.dropna(subset=["close"]).reset_index(drop=True)


class StaticQuoteSource:
    """Fixed prices; for tests and offline use."""

    def __init__(self, prices: Optional[Dict[str, object]] = None):
        self.prices: Dict[str, Decimal] = {}
        for symbol, price in (prices or {}).items():
            self.set_price(symbol, price)

    def set_price(self, symbol: str, price) -> None:
        self.prices[symbol.strip().upper()] = Decimal(str(price))

    def get_price(self, symbol: str) -> Decimal:
        try:
            return self.prices[symbol.strip().upper()]
        except KeyError:
            raise QuoteUnavailable(symbol, "unknown symbol") from None

    def get_history(self, symbol: str, range_: str = "1d") -> pd.DataFrame:
        price = float(self.get_price(symbol))
        return pd.DataFrame(
            [
                {
                    "timestamp": pd.Timestamp.now(tz="UTC"),
                    "open": price,
                    "high": price,
                    "low": price,
                    "close": price,
                    "volume": 0,
                }
            ],
            columns=HISTORY_COLUMNS,
        )


def _quote_series(result: Dict) -> Dict[str, List]:
    quotes = (result.get("indicators") or {}).get("quote") or [{}]
    return quotes[0] or {}
