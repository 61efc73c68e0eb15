"""Async database engine and session factory.

Postgres (asyncpg) in production; SQLite (aiosqlite) for local runs and
the test suite.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from forvaltaren.core.config import get_settings


def engine_options(database_url: str) -> dict[str, Any]:
    """Engine keyword arguments for ``database_url``'s backend."""
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            # One shared connection, or every checkout sees an empty database
            options["poolclass"] = StaticPool
        return options
    return {"pool_size": 20, "max_overflow": 10, "pool_pre_ping": True}


def make_engine(database_url: str) -> AsyncEngine:
    return create_async_engine(database_url, echo=False, **engine_options(database_url))


engine = make_engine(get_settings().database_url)

async_session_factory = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields one async session per request."""
    async with async_session_factory() as session:
        yield session


async def init_db(bind: AsyncEngine | None = None) -> None:
    """Create missing tables; production schemas come from Alembic."""
    import forvaltaren.models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
