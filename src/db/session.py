# src/db/session.py
"""Database handle: engine construction, table creation and sessions."""

from pathlib import Path
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

# Import registers the tables on SQLModel.metadata
from src.db import models  # noqa: F401
from src.logging_utils import get_logger

logger = get_logger(__name__)


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine; SQLite files get their parent directory created."""
    connect_args = {}
    kwargs = {}

    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            # Single shared connection so every session sees the same in-memory DB
            kwargs["poolclass"] = StaticPool
        else:
            db_path = database_url.replace("sqlite:///", "")
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    return create_engine(database_url, connect_args=connect_args, echo=echo, **kwargs)


class Database:
    """
    Owns the engine for the lifetime of the process.
    Open once at startup, pass it to whatever needs sessions, close at shutdown.
    """

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.echo = echo
        self._engine: Optional[Engine] = None

    @classmethod
    def from_engine(cls, engine: Engine) -> "Database":
        db = cls(str(engine.url))
        db._engine = engine
        return db

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not open")
        return self._engine

    def open(self) -> "Database":
        """Create the engine and any missing tables."""
        if self._engine is None:
            self._engine = create_db_engine(self.database_url, echo=self.echo)
        SQLModel.metadata.create_all(self._engine)
        logger.info("Database opened: %s", self._engine.url.render_as_string(hide_password=True))
        return self

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.info("Database closed")

    def get_session(self) -> Session:
        """Get a new database session."""
        return Session(self.engine)

    def __enter__(self) -> "Database":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
