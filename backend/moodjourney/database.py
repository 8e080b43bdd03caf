"""
MoodJourney Backend — Database Gateway
=======================================

What:  The persistence gateway: async SQLAlchemy engine, session factory,
       table auto-creation and the FastAPI session dependency.
Why:   One object owns the connection handle for the whole process. It is
       built and connected once at startup, stored on `app.state`, and handed
       to request handlers through dependency injection instead of living in
       a module-level global.
How:   `Database.from_settings()` validates configuration and builds the
       engine; `connect()` opens a connection and creates the `users` and
       `mood_entries` tables if absent; `get_db_session()` yields one
       session per request.

Failure Policy:
    Missing configuration, an unreachable database and a failed table
    creation all raise FatalStartupError. Nothing is retried.
"""

import logging
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from moodjourney.config import Settings
from moodjourney.exceptions import FatalStartupError, InternalError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Every model registers its table on `Base.metadata`, which `connect()`
    uses to create the schema.
    """
    pass


class Database:
    """
    Owns the async engine and hands out sessions.

    Attributes:
        url:              SQLAlchemy URL the engine was built from
        engine:           AsyncEngine (connection handle shared by all requests)
        session_factory:  async_sessionmaker producing per-request sessions
    """

    def __init__(
        self,
        url: str,
        connect_args: Optional[Dict[str, Any]] = None,
        echo: bool = False,
    ):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(
            url,
            connect_args=connect_args or {},
            echo=echo,
        )
        # expire_on_commit=False: records stay readable after commit so the
        # response can be serialized without another round trip
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self.connected = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """
        Build the gateway from application settings.

        Raises:
            FatalStartupError: a required DB_* variable is missing.
        """
        settings.validate_required()
        return cls(
            settings.sqlalchemy_url,
            connect_args=settings.connect_args,
            echo=settings.sql_echo,
        )

    async def connect(self) -> None:
        """
        Open a connection and make sure both tables exist.

        Idempotent: `create_all` skips existing tables, and a second call on
        a connected gateway does nothing.

        Raises:
            FatalStartupError: the database is unreachable or the schema
                could not be created.
        """
        if self.connected:
            return

        # Register User and MoodEntry on Base.metadata
        from moodjourney import models  # noqa: F401

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except Exception as e:
            logger.error("Failed to connect to database or create tables: %s", str(e))
            raise FatalStartupError(
                message="Database connection or migration failed",
                context={"error_type": type(e).__name__},
            ) from e

        self.connected = True
        logger.info("Database connected and schema ensured")

    def session(self) -> AsyncSession:
        """New session bound to the gateway's engine."""
        return self.session_factory()

    async def dispose(self) -> None:
        """Close all pooled connections."""
        await self.engine.dispose()
        self.connected = False


# ── Dependencies ──────────────────────────────────────────────────────────
def get_database(request: Request) -> Database:
    """Returns the gateway attached to the running application."""
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise InternalError(message="Database is not initialized")
    return database


async def get_db_session(
    database: Database = Depends(get_database),
) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the gateway
        2. Yields it to the route handler
        3. On success: commits anything the handler left pending
        4. On error: rolls back and re-raises for the exception handlers
        5. Always: closes the session (returns connection to pool)
    """
    async with database.session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
