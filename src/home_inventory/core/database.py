"""Database engine and session handling (SQLAlchemy 2.0 async)."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from .config import DATABASE_URL, DB_ECHO, DB_MAX_OVERFLOW, DB_POOL_SIZE

# Naming convention for constraints (helps with migrations)
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    metadata = MetaData(naming_convention=convention)


def engine_options(url: str) -> dict[str, Any]:
    """Pool settings for the given URL; SQLite manages its own pool."""
    options: dict[str, Any] = {"echo": DB_ECHO}
    if not url.startswith("sqlite"):
        options.update(
            pool_pre_ping=True,
            pool_size=DB_POOL_SIZE,
            max_overflow=DB_MAX_OVERFLOW,
        )
    return options


engine = create_async_engine(DATABASE_URL, **engine_options(DATABASE_URL))

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency for getting an async database session.
    Use with FastAPI's Depends(). The session, and the pooled connection
    behind it, is released when the request finishes or fails.
    """
    async with async_session_maker() as session:
        yield session


async def init_db() -> None:
    """
    Create all tables.
    Development convenience; the CRUD service owns schema migrations.
    """
    # Import models so they register on Base.metadata
    from ..features.auth import models as _auth_models  # noqa: F401
    from ..features.inventory import models as _inventory_models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections."""
    await engine.dispose()
