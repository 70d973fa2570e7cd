# src/db/store.py
"""
Account store: loads and saves ledger snapshots.

Saves are optimistic: the account row carries a version that must match the
version the snapshot was loaded at. A stale save is rejected, and update()
reloads and re-applies up to max_retries times.
"""

from datetime import datetime, timezone
from typing import Callable

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from src.db.models import (
    Account,
    Position as PositionRow,
    Transaction as TransactionRow,
    utcnow,
)
from src.db.session import Database
from src.domain.models import AccountState, Position, TradeType, Transaction, Wallet
from src.logging_utils import get_logger

logger = get_logger(__name__)


class StoreError(Exception):
    """Base class for account store failures."""


class AccountNotFound(StoreError):
    def __init__(self, account_id: str):
        super().__init__(f"Account not found: {account_id}")
        self.account_id = account_id


class ConcurrentUpdateError(StoreError):
    """The account changed between load and save."""


class PersistenceFailure(StoreError):
    """The database rejected a read or write."""


class AccountStore:
    """Read/write AccountState snapshots for one database."""

    def __init__(self, db: Database, max_retries: int = 3):
        self.db = db
        self.max_retries = max(1, max_retries)

    def load(self, account_id: str) -> AccountState:
        """Load the wallet, positions and full history of an account."""
        try:
            with self.db.get_session() as session:
                account = session.get(Account, account_id)
                if account is None:
                    raise AccountNotFound(account_id)

                position_rows = session.exec(
                    select(PositionRow)
                    .where(PositionRow.account_id == account_id)
                    .order_by(PositionRow.symbol)
                ).all()
                transaction_rows = session.exec(
                    select(TransactionRow)
                    .where(TransactionRow.account_id == account_id)
                    .order_by(TransactionRow.sequence, TransactionRow.timestamp)
                ).all()

                return AccountState(
                    wallet=Wallet(balance=account.balance, currency=account.currency),
                    positions=tuple(_to_position(row) for row in position_rows),
                    transactions=tuple(_to_transaction(row) for row in transaction_rows),
                    version=account.version,
                )
        except SQLAlchemyError as e:
            logger.exception("Failed to load account %s", account_id)
            raise PersistenceFailure(f"Failed to load account: {e}") from e

    def save(self, account_id: str, state: AccountState) -> AccountState:
        """
        Persist a snapshot loaded at `state.version`.

        Positions are replaced wholesale; transactions not yet stored are appended.

        Returns:
            The same snapshot stamped with the new version

        Raises:
            ConcurrentUpdateError if the account was saved by someone else since load
            AccountNotFound if the account does not exist
            PersistenceFailure on database errors
        """
        new_version = state.version + 1
        try:
            with self.db.get_session() as session:
                result = session.execute(
                    update(Account)
                    .where(Account.id == account_id, Account.version == state.version)
                    .values(
                        balance=state.wallet.balance,
                        currency=state.wallet.currency,
                        version=new_version,
                        updated_at=utcnow(),
                    )
                )
                if result.rowcount == 0:
                    if session.get(Account, account_id) is None:
                        raise AccountNotFound(account_id)
                    raise ConcurrentUpdateError(
                        f"Account {account_id} was modified since version {state.version}"
                    )

                session.execute(delete(PositionRow).where(PositionRow.account_id == account_id))
                for pos in state.positions:
                    session.add(
                        PositionRow(
                            account_id=account_id,
                            symbol=pos.symbol,
                            quantity=pos.quantity,
                            average_price=pos.average_price,
                            total_investment=pos.total_investment,
                            current_value=pos.current_value,
                        )
                    )

                stored_ids = set(
                    session.exec(
                        select(TransactionRow.id).where(TransactionRow.account_id == account_id)
                    ).all()
                )
                for seq, tx in enumerate(state.transactions):
                    if tx.id in stored_ids:
                        continue
                    session.add(
                        TransactionRow(
                            id=tx.id,
                            account_id=account_id,
                            sequence=seq,
                            symbol=tx.symbol,
                            type=tx.type.value,
                            quantity=tx.quantity,
                            price=tx.price,
                            total_amount=tx.total_amount,
                            timestamp=tx.timestamp,
                        )
                    )

                session.commit()
        except SQLAlchemyError as e:
            logger.exception("Failed to save account %s", account_id)
            raise PersistenceFailure(f"Failed to save account: {e}") from e

        return AccountState(
            wallet=state.wallet,
            positions=state.positions,
            transactions=state.transactions,
            version=new_version,
        )

    def update(
        self,
        account_id: str,
        mutator: Callable[[AccountState], AccountState],
    ) -> AccountState:
        """
        Serialized read-modify-write for one account.

        Exceptions raised by `mutator` propagate without a retry; only version
        conflicts are retried.
        """
        for attempt in range(1, self.max_retries + 1):
            state = self.load(account_id)
            new_state = mutator(state)
            try:
                return self.save(account_id, new_state)
            except ConcurrentUpdateError:
                logger.warning(
                    "Version conflict on account %s (attempt %d/%d)",
                    account_id, attempt, self.max_retries,
                )

        raise ConcurrentUpdateError(
            f"Account {account_id} kept changing; gave up after {self.max_retries} attempts"
        )


def _to_position(row: PositionRow) -> Position:
    return Position(
        symbol=row.symbol,
        quantity=row.quantity,
        average_price=row.average_price,
        total_investment=row.total_investment,
        current_value=row.current_value,
    )


def _to_transaction(row: TransactionRow) -> Transaction:
    return Transaction(
        id=row.id,
        symbol=row.symbol,
        type=TradeType(row.type),
        quantity=row.quantity,
        price=row.price,
        total_amount=row.total_amount,
        timestamp=_as_utc(row.timestamp),
    )


def _as_utc(value: datetime) -> datetime:
    # SQLite drops the offset; stored values are always UTC
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value.astimezone(timezone.utc)
