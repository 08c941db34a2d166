"""Database engine and session factory construction"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool, NullPool

from spirit.db.models import Base


def build_engine(database_url: str, debug: bool = False) -> AsyncEngine:
    """Create the async engine for `database_url`."""
    if database_url.startswith("sqlite"):
        # SQLite for development and tests
        return create_async_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=debug,
        )

    # Supabase / PgBouncer
    # - NullPool: no local pooling, PgBouncer handles it
    # - statement_cache_size=0 and unnamed prepared statements keep asyncpg
    #   compatible with PgBouncer's transaction mode
    # - pool_pre_ping: detect stale connections after cold starts
    sep = "&" if "?" in database_url else "?"
    return create_async_engine(
        f"{database_url}{sep}prepared_statement_cache_size=0",
        echo=debug,
        poolclass=NullPool,
        pool_pre_ping=True,
        connect_args={
            "statement_cache_size": 0,
            "prepared_statement_name_func": lambda: "",
            "command_timeout": 30,
        },
    )


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """Create missing tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_db(engine: AsyncEngine) -> None:
    """Drop all database tables (for testing)"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
