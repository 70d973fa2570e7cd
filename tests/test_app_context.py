# tests/test_app_context.py
from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock

from src.db.store import AccountNotFound, PersistenceFailure
from src.ui.helpers import current_context


class _BrokenStore:
    def __init__(self, error):
        self.error = error

    def load(self, account_id):
        raise self.error


def test_load_account_state_returns_snapshot(store, account_id, monkeypatch):
    st = MagicMock()
    monkeypatch.setattr(current_context, "st", st)

    state = current_context.load_account_state(SimpleNamespace(store=store), account_id)

    assert state.wallet.balance == 10000
    st.error.assert_not_called()


def test_load_account_state_shows_error_instead_of_raising(monkeypatch):
    for error in [PersistenceFailure("database is locked"), AccountNotFound("gone")]:
        st = MagicMock()
        monkeypatch.setattr(current_context, "st", st)

        result = current_context.load_account_state(SimpleNamespace(store=_BrokenStore(error)), "gone")

        assert result is None
        st.error.assert_called_once()
        assert str(error) in st.error.call_args.args[0]
        st.stop.assert_called_once()
