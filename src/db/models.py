# src/db/models.py
"""
SQLModel definitions for the paper trading app.
Designed for SQLite locally, PostgreSQL in production.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import List
from sqlmodel import SQLModel, Field, Relationship
import sqlalchemy
from sqlalchemy.types import String, TypeDecorator
import uuid


class DecimalText(TypeDecorator):
    """
    Exact decimal stored as its string form.

    SQLite keeps NUMERIC as a float, so money round-trips through text instead.
    Nothing is rounded on the way in or out.
    """
    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(value if isinstance(value, Decimal) else Decimal(str(value)))

    def process_result_value(self, value, dialect):
        return None if value is None else Decimal(value)


# Money columns
MONEY = {"sa_type": DecimalText}


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp (the storage convention for every datetime column)."""
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """Registered user."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    username: str = Field(unique=True, index=True)
    email: str = Field(unique=True, index=True)
    hashed_password: str
    created_at: datetime = Field(default_factory=utcnow)

    accounts: List["Account"] = Relationship(back_populates="user", cascade_delete=True)


class Account(SQLModel, table=True):
    """Paper trading account: wallet balance plus a version stamp for optimistic updates."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    user_id: str = Field(foreign_key="user.id", index=True)
    balance: Decimal = Field(default=Decimal(0), **MONEY)
    currency: str = Field(default="USD")
    version: int = Field(default=0)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    user: User = Relationship(back_populates="accounts")
    positions: List["Position"] = Relationship(back_populates="account", cascade_delete=True)
    transactions: List["Transaction"] = Relationship(back_populates="account", cascade_delete=True)
    watchlist: List["WatchlistItem"] = Relationship(back_populates="account", cascade_delete=True)


class Position(SQLModel, table=True):
    """Current holding of one symbol (rows with zero quantity are never stored)."""
    __tablename__ = "position"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    account_id: str = Field(foreign_key="account.id", index=True)
    symbol: str = Field(index=True)

    quantity: int = Field()
    average_price: Decimal = Field(**MONEY)
    total_investment: Decimal = Field(**MONEY)
    current_value: Decimal = Field(**MONEY)

    __table_args__ = (
        sqlalchemy.UniqueConstraint("account_id", "symbol", name="uq_account_position"),
    )

    account: Account = Relationship(back_populates="positions")


class Transaction(SQLModel, table=True):
    """Executed trade. Append-only."""
    __tablename__ = "trade_transaction"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    account_id: str = Field(foreign_key="account.id", index=True)
    symbol: str = Field(index=True)

    sequence: int = Field(default=0)  # position in the account's history
    type: str = Field()  # BUY or SELL
    quantity: int = Field()
    price: Decimal = Field(**MONEY)
    total_amount: Decimal = Field(**MONEY)
    timestamp: datetime = Field(default_factory=utcnow, index=True)

    account: Account = Relationship(back_populates="transactions")


class WatchlistItem(SQLModel, table=True):
    """Symbol the user follows on the market page."""
    __tablename__ = "watchlist_item"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    account_id: str = Field(foreign_key="account.id", index=True)
    symbol: str = Field()
    added_at: datetime = Field(default_factory=utcnow)

    __table_args__ = (
        sqlalchemy.UniqueConstraint("account_id", "symbol", name="uq_account_watchlist"),
    )

    account: Account = Relationship(back_populates="watchlist")
