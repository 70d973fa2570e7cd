# src/ui/helpers/current_context.py
"""Function(s) to expose current runtime context"""

from dataclasses import dataclass

import streamlit as st

from src.config import Settings, load_settings
from src.db.session import Database
from src.db.store import AccountStore, StoreError
from src.domain.models import AccountState
from src.io.quotes import YahooQuoteSource
from src.logging_utils import get_logger, init_logging
from src.services.trading import TradeService

logger = get_logger(__name__)


@dataclass
class AppContext:
    settings: Settings
    db: Database
    store: AccountStore
    quotes: YahooQuoteSource
    trades: TradeService


@st.cache_resource
def get_app_context() -> AppContext:
    """Built once per server process; the database stays open for its lifetime."""
    settings = load_settings()
    init_logging(settings.log_level, settings.log_file)

    db = Database(settings.database_url).open()
    store = AccountStore(db, max_retries=settings.trade_max_retries)
    quotes = YahooQuoteSource(settings.quote_base_url, timeout=settings.quote_timeout_seconds)

    return AppContext(
        settings=settings,
        db=db,
        store=store,
        quotes=quotes,
        trades=TradeService(store, quotes),
    )


def require_account_id() -> str:
    account_id = st.session_state.get("account_id")
    if not account_id:
        st.info("Log in to view your account.")
        st.stop()
    return account_id


def load_account_state(ctx: AppContext, account_id: str) -> AccountState:
    """Load the signed-in account, or show an error and stop the page."""
    try:
        return ctx.store.load(account_id)
    except StoreError as e:
        logger.error("Could not load account %s: %s", account_id, e)
        st.error(f"Could not load your account: {e}")
        st.stop()
