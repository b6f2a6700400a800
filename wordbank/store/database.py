"""
Database - Record Store Engine and Transactions

Owns the SQLAlchemy engine for the record store and hands out one
transaction per repository operation.

This module handles ONLY database plumbing.
Record mapping and queries live in the repositories.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from loguru import logger
from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from wordbank.config import get_database_url
from wordbank.errors import StorageError, WordbankError
from wordbank.store.models import Base


def _is_memory_sqlite(url: str) -> bool:
    return url.startswith("sqlite") and (":memory:" in url or url.rstrip("/") in ("sqlite:", "sqlite://"))


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create the SQLAlchemy engine for a connection string.

    In-memory SQLite shares one connection so every session sees the same
    database. Server databases use a small connection pool.

    Args:
        database_url: SQLAlchemy connection string
        echo: Log SQL statements

    Returns:
        SQLAlchemy Engine instance
    """
    if _is_memory_sqlite(database_url):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=echo,
        )
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=echo,
        )
    return create_engine(
        database_url,
        pool_size=5,           # Keep 5 connections open
        max_overflow=10,       # Allow up to 10 extra connections
        pool_pre_ping=True,    # Verify connections before use
        echo=echo,
    )


class RecordStore:
    """
    Transactional store holding every record table.

    Construct once at application start, share it with the repositories
    and call dispose() at application stop.
    """

    def __init__(self, database_url: Optional[str] = None, echo: bool = False):
        self.database_url = database_url or get_database_url()
        try:
            self.engine = build_engine(self.database_url, echo=echo)
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not open record store: {exc}") from exc
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """
        Run one atomic unit of work.

        Commits on success and rolls back on any failure. Domain errors
        propagate unchanged; driver failures surface as StorageError.
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except WordbankError:
            session.rollback()
            raise
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error(f"Record store failure: {exc}")
            raise StorageError(str(exc)) from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_db(self) -> None:
        """
        Initialize database schema if tables don't exist.

        Safe to call multiple times - only creates missing tables.
        """
        try:
            existing_tables = set(inspect(self.engine).get_table_names())
            missing = [t for t in Base.metadata.sorted_tables if t.name not in existing_tables]
            if missing:
                Base.metadata.create_all(self.engine, tables=missing)
                logger.debug(f"Created tables: {', '.join(t.name for t in missing)}")
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not initialize schema: {exc}") from exc

    def reset_db(self) -> None:
        """
        DANGEROUS: Delete all data and recreate tables.

        Only use this for testing or when you want to start fresh.
        All words and review history will be lost!
        """
        try:
            Base.metadata.drop_all(self.engine)
        except SQLAlchemyError as exc:
            raise StorageError(f"Could not drop tables: {exc}") from exc
        logger.warning(f"All tables dropped ({self.database_url})")
        self.init_db()

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()
