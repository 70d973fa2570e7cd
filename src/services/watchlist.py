# src/services/watchlist.py
"""Per-account watchlist of symbols."""

from typing import List

from sqlmodel import Session, select

from src.db.models import WatchlistItem


class WatchlistService:

    @staticmethod
    def list_symbols(session: Session, account_id: str) -> List[str]:
        stmt = (
            select(WatchlistItem.symbol)
            .where(WatchlistItem.account_id == account_id)
            .order_by(WatchlistItem.added_at, WatchlistItem.symbol)
        )
        return list(session.exec(stmt).all())

    @staticmethod
    def add_symbol(session: Session, account_id: str, symbol: str) -> bool:
        """Add a symbol. Returns False if it was blank or already listed."""
        symbol = symbol.strip().upper()
        if not symbol:
            return False

        stmt = select(WatchlistItem).where(
            WatchlistItem.account_id == account_id,
            WatchlistItem.symbol == symbol,
        )
        if session.exec(stmt).first():
            return False

        session.add(WatchlistItem(account_id=account_id, symbol=symbol))
        session.commit()
        return True

    @staticmethod
    def remove_symbol(session: Session, account_id: str, symbol: str) -> bool:
        stmt = select(WatchlistItem).where(
            WatchlistItem.account_id == account_id,
            WatchlistItem.symbol == symbol.strip().upper(),
        )
        item = session.exec(stmt).first()
        if not item:
            return False

        session.delete(item)
        session.commit()
        return True
