# src/config.py
"""
Application settings.
Read from the environment (and an optional .env file) once at startup.
"""

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional

from dotenv import load_dotenv


def _getenv(name: str, default: str = "") -> str:
    return os.getenv(name, default)


def _getint(name: str, default: int) -> int:
    try:
        return int(_getenv(name, str(default)))
    except ValueError:
        return default


def _getdecimal(name: str, default: str) -> Decimal:
    try:
        return Decimal(_getenv(name, default))
    except InvalidOperation:
        return Decimal(default)


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./paper_trading.db"
    starting_balance: Decimal = Decimal("10000")
    default_currency: str = "USD"

    quote_base_url: str = "https://query1.finance.yahoo.com"
    quote_timeout_seconds: int = 10

    # Attempts for a read-modify-write before giving up on a version conflict
    trade_max_retries: int = 3

    log_level: str = "INFO"
    log_file: Optional[str] = None
    report_timezone: str = "US/Eastern"


def load_settings() -> Settings:
    """Build settings from environment variables."""
    load_dotenv()

    return Settings(
        database_url=_getenv("DATABASE_URL", Settings.database_url),
        starting_balance=_getdecimal("STARTING_BALANCE", str(Settings.starting_balance)),
        default_currency=_getenv("DEFAULT_CURRENCY", Settings.default_currency).strip().upper() or "USD",
        quote_base_url=_getenv("QUOTE_BASE_URL", Settings.quote_base_url).rstrip("/"),
        quote_timeout_seconds=_getint("QUOTE_TIMEOUT_SECONDS", Settings.quote_timeout_seconds),
        trade_max_retries=max(1, _getint("TRADE_MAX_RETRIES", Settings.trade_max_retries)),
        log_level=_getenv("LOG_LEVEL", Settings.log_level).upper(),
        log_file=_getenv("LOG_FILE") or None,
        report_timezone=_getenv("REPORT_TIMEZONE", Settings.report_timezone),
    )
