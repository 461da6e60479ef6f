"""
Database Configuration

Async SQLAlchemy engine, session factory and the FastAPI session dependency.
"""

from collections.abc import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from app.core.config import settings

Base = declarative_base()


def get_database_url() -> str:
    """Return the database URL with an async driver."""
    db_url = settings.database_url
    if db_url.startswith("postgresql://"):
        db_url = db_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return db_url


def _create_engine():
    db_url = get_database_url()
    if "sqlite" in db_url:
        # SQLite requires NullPool for thread safety
        return create_async_engine(
            db_url,
            echo=settings.database_echo,
            connect_args={"check_same_thread": False},
            poolclass=NullPool,
        )
    return create_async_engine(
        db_url,
        echo=settings.database_echo,
        pool_pre_ping=True,
    )


engine = _create_engine()

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that yields a database session.

    Commits when the request handler finishes without error and rolls back
    otherwise.
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Verify database connectivity on startup."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def close_db() -> None:
    """Dispose of the engine's connection pool."""
    await engine.dispose()
