"""
AuthGate Backend — Database Session Management
===============================================

What:  Async SQLAlchemy engine, session factory, and FastAPI dependency.
Why:   Centralizes all database connection logic in one place.
How:   `Database` owns an async engine with connection pooling and a session
       factory. The application factory builds one per process and stores it on
       `app.state.database`; `get_db_session` hands out a session per request
       that rolls back on error.
Who:   Route handlers via FastAPI's dependency injection; Alembic via Base.

Connection Pooling Strategy (PostgreSQL):
    pool_size / max_overflow come from settings; pool_pre_ping catches stale
    connections after the managed service restarts or the dev proxy drops them.
    SQLite URLs (tests) use the driver's default pool, which rejects sizing args.
"""

import logging
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from authgate.config import Settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object so Alembic's --autogenerate sees every table.
    """
    pass


class Database:
    """
    Engine + session factory pair for one process.

    Attributes:
        engine:           The pooled async engine
        session_factory:  Builds AsyncSession instances bound to the engine
    """

    def __init__(self, settings: Settings):
        self.url = make_url(settings.database_url)
        engine_kwargs = {
            "pool_pre_ping": settings.db_pool_pre_ping,
            # Echo SQL only when debugging; it is very noisy.
            "echo": settings.log_level == "DEBUG",
        }
        if self.url.get_backend_name() == "postgresql":
            engine_kwargs.update(
                pool_size=settings.db_pool_size,
                max_overflow=settings.db_max_overflow,
                pool_recycle=3600,
            )

        self.engine: AsyncEngine = create_async_engine(settings.database_url, **engine_kwargs)
        # expire_on_commit=False: returned records stay readable after commit
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        logger.info(
            "Database configured: backend=%s host=%s database=%s",
            self.url.get_backend_name(),
            self.url.host or "-",
            self.url.database,
        )

    async def ping(self) -> bool:
        """Runs SELECT 1; returns False instead of raising when the store is unreachable."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Database ping failed: %s", str(e))
            return False

    async def create_all(self) -> None:
        """Creates every table known to Base.metadata (tests and local bootstrap)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Closes all pooled connections. Called during application shutdown."""
        await self.engine.dispose()


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the process-wide factory
        2. Yields it to the route handler
        3. On error: rolls back so partial writes are discarded
        4. Always: closes the session (returns connection to pool)

    Services commit their own writes, so nothing is committed here.
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
