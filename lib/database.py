# =============================================================================
# lib/database.py - SQLAlchemy Database Client
# =============================================================================
# This module wraps the SQLAlchemy engine and session factory behind a small
# client object with an explicit connect/disconnect lifecycle:
# - connect(): create tables and verify connectivity
# - disconnect(): dispose of the connection pool
# - ping(): lightweight "SELECT 1" used by readiness checks
# - session(): transactional session scope (commit on success, rollback on error)
#
# Entities declare themselves on `Base` and are created on connect().
#
# Usage:
#   from lib.database import DatabaseClient
#   db = DatabaseClient("sqlite:///./quickapi.db")
#   db.connect()
#   with db.session() as session:
#       session.add(entity)
# =============================================================================

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Set up logging for this module
logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM entities."""


class DatabaseClientError(Exception):
    """
    Error during database lifecycle operations.

    Provides actionable error messages:
    "Errors should tell HOW to fix, not just WHAT failed."
    """

    def __init__(
        self,
        message: str,
        code: str = "DATABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class DatabaseClient:
    """
    Owns the engine and session factory for one database URL.

    SQLite URLs get `check_same_thread=False` so sessions can be used from
    the threadpool, and in-memory URLs share a single connection so every
    session sees the same database.

    Example:
        db = DatabaseClient("sqlite://")
        db.connect()
        assert db.ping()
        db.disconnect()
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self._connected = False

        kwargs: dict[str, Any] = {"echo": echo}
        if url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool

        self.engine: Engine = create_engine(url, **kwargs)
        self._session_factory = sessionmaker(
            bind=self.engine,
            expire_on_commit=False,
        )

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def connect(self) -> None:
        """
        Create tables for all registered entities and verify the connection.

        Raises:
            DatabaseClientError: If the database cannot be reached
        """
        try:
            Base.metadata.create_all(self.engine)
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise DatabaseClientError(
                message=f"Failed to connect to database: {e}",
                code="CONNECT_FAILED",
                suggestion="Check DATABASE_URL in your .env file",
                details={"url": self.engine.url.render_as_string(hide_password=True)},
            ) from e

        self._connected = True
        logger.info(f"Database connected: {self.engine.url.render_as_string(hide_password=True)}")

    def disconnect(self) -> None:
        """Dispose of pooled connections."""
        self.engine.dispose()
        self._connected = False
        logger.info("Database connection pool disposed")

    def ping(self) -> bool:
        """
        Run a minimal connectivity check.

        Returns:
            True if "SELECT 1" succeeds, False otherwise
        """
        if not self._connected:
            return False
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database ping failed: {e}")
            return False

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    @contextmanager
    def session(self) -> Iterator[Session]:
        """
        Provide a transactional scope around a series of operations.

        Commits when the block exits normally and rolls back on any error.
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
