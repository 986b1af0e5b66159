"""Database configuration and connection management."""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from messenger.config import Settings


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""

    pass


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine; the client holds exactly one connection."""
    return create_async_engine(
        settings.database_url,
        echo=settings.sql_debug,
        pool_size=1,
        max_overflow=0,
        future=True,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory bound to the engine."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def check_connection(session: AsyncSession) -> bool:
    """Issue ``SELECT 1`` to make sure the server is reachable."""
    result = await session.execute(text("SELECT 1"))
    return result.scalar() == 1


async def close_engine(engine: AsyncEngine) -> None:
    """Close database connections on shutdown."""
    await engine.dispose()
