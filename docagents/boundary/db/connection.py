"""
Database connection management.

Builds the async engine and session factory from settings, and creates
the schema under a Postgres advisory lock so that concurrently starting
processes do not race each other.

Dependencies: sqlalchemy, asyncpg, docagents.configs
System role: Database connection lifecycle management
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from docagents.boundary.db.base import Base
from docagents.boundary.db import models as _models  # noqa: F401  registers tables
from docagents.configs.database import DatabaseSettings

logger = logging.getLogger(__name__)

# Arbitrary application-wide key for pg_advisory_xact_lock
MIGRATION_LOCK_KEY = 7_204_118_553


def build_async_engine(settings: DatabaseSettings) -> AsyncEngine:
    """
    Create async SQLAlchemy engine with connection pooling.

    pool_pre_ping=True verifies connections before use to detect
    stale/broken connections early.

    Args:
        settings: Database settings

    Returns:
        AsyncEngine: Configured async SQLAlchemy engine
    """
    return create_async_engine(
        settings.async_database_url,
        echo=settings.echo_sql,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
        pool_timeout=settings.pool_timeout,
        pool_pre_ping=True,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Create async session factory bound to the engine.

    Returns:
        async_sessionmaker: Factory with autoflush disabled and no expiry on commit
    """
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create the pgvector extension and all tables if missing.

    Runs in one transaction holding an advisory lock, released on commit.
    """
    async with engine.begin() as conn:
        await conn.execute(
            text("SELECT pg_advisory_xact_lock(:key)"),
            {"key": MIGRATION_LOCK_KEY},
        )
        await conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"{__name__}:create_tables - Schema ready")
