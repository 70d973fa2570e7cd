# tests/conftest.py
"""Test configuration and fixtures."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from sqlmodel import Session, SQLModel

from src.auth import AuthManager
from src.db.models import Account, User
from src.db.session import Database, create_db_engine
from src.db.store import AccountStore
from src.domain.models import AccountState, Wallet
from src.io.quotes import StaticQuoteSource
from src.services.trading import TradeService


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite shared by every session of a test."""
    engine = create_db_engine("sqlite:///:memory:")
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="db")
def db_fixture(engine):
    return Database.from_engine(engine)


@pytest.fixture(name="test_user")
def test_user_fixture(session: Session):
    """Create test user."""
    user = User(
        username="testuser",
        email="test@example.com",
        hashed_password=AuthManager.hash_password("testpass123"),
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture(name="account_id")
def account_id_fixture(session: Session, test_user: User) -> str:
    """Create a funded account and return its id."""
    account = Account(user_id=test_user.id, balance=Decimal("10000"), currency="USD")
    session.add(account)
    session.commit()
    session.refresh(account)
    return account.id


@pytest.fixture(name="store")
def store_fixture(db: Database):
    return AccountStore(db, max_retries=3)


@pytest.fixture(name="quotes")
def quotes_fixture():
    return StaticQuoteSource({"AAPL": "150", "MSFT": "300"})


@pytest.fixture(name="service")
def service_fixture(store: AccountStore, quotes: StaticQuoteSource):
    return TradeService(store, quotes)


@pytest.fixture(name="fresh_state")
def fresh_state_fixture():
    """Account at registration: 10000 USD, nothing held."""
    return AccountState(wallet=Wallet(balance=Decimal("10000"), currency="USD"))


@pytest.fixture(name="trade_time")
def trade_time_fixture():
    return datetime(2025, 1, 15, 14, 30, 0, tzinfo=timezone.utc)
