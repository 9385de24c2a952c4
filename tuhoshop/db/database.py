"""Engine and session factory."""
from __future__ import annotations

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tuhoshop.core.exceptions import DatabaseException

from .models import Base

logger = logging.getLogger(__name__)


class Database:
    """Owns the process-wide engine (and its connection pool)."""

    def __init__(self, database_url: str, echo: bool = False) -> None:
        self.database_url = database_url
        self.engine: Engine = self._create_engine(database_url, echo)
        self.session_factory: sessionmaker[Session] = sessionmaker(
            bind=self.engine, expire_on_commit=False
        )

    @staticmethod
    def _create_engine(database_url: str, echo: bool) -> Engine:
        if database_url.startswith("sqlite"):
            kwargs: dict = {"connect_args": {"check_same_thread": False}}
            # In-memory databases exist per connection; share one across threads
            if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
                kwargs["poolclass"] = StaticPool
            return create_engine(database_url, echo=echo, **kwargs)
        return create_engine(database_url, echo=echo, pool_pre_ping=True, pool_size=10)

    def init_schema(self) -> None:
        """Create missing tables."""
        try:
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise DatabaseException(f"Failed to initialize schema: {e}") from e

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    def close(self) -> None:
        self.engine.dispose()


def create_database(database_url: str, echo: bool = False) -> Database:
    """Build the database handle and make sure the tables exist."""
    db = Database(database_url, echo=echo)
    db.init_schema()
    logger.info("Using database %s", db.engine.url.render_as_string(hide_password=True))
    return db
