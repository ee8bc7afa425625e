"""
db/session.py

Explicit storage-client lifecycle: one ``Database`` value owns the engine and
session factory. The application opens it at startup and disposes it at
shutdown; nothing here is created at import time.
"""

from __future__ import annotations

import logging
from collections.abc import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db.config import DatabaseSettings, load_database_settings

logger = logging.getLogger(__name__)


def create_db_engine(settings: DatabaseSettings) -> Engine:
    """
    Create a PostgreSQL engine whose connections enforce a statement timeout.
    """

    return create_engine(
        settings.url,
        echo=settings.echo,
        pool_pre_ping=True,
        pool_recycle=settings.pool_recycle_seconds,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_timeout=settings.pool_timeout_seconds,
        connect_args={
            "connect_timeout": settings.connect_timeout_seconds,
            "options": f"-c statement_timeout={settings.statement_timeout_ms}",
        },
    )


class Database:
    """
    Long-lived storage client handle.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_factory = sessionmaker(
            bind=engine,
            class_=Session,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: DatabaseSettings | None = None) -> Database:
        return cls(create_db_engine(settings or load_database_settings()))

    @property
    def engine(self) -> Engine:
        return self._engine

    def session(self) -> Session:
        return self._session_factory()

    def sessions(self) -> Generator[Session, None, None]:
        """Yield one session and guarantee it is closed afterwards."""
        db = self.session()
        try:
            yield db
        finally:
            db.close()

    def ping(self) -> None:
        """Run SELECT 1. Raises RuntimeError if the DB is unreachable."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except Exception as exc:
            raise RuntimeError("Database unavailable.") from exc

    def close(self) -> None:
        self._engine.dispose()
        logger.info("Database engine disposed")
