"""
Shared fixtures: a real SQLite database for repository tests.
"""

from collections.abc import AsyncGenerator

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.database import Base

# Every model must be imported so relationships resolve and tables exist
from app.modules.admin import models as admin_models  # noqa: F401
from app.modules.concerns import models as concern_models  # noqa: F401
from app.modules.email_config import models as email_config_models  # noqa: F401
from app.modules.reports import models as report_models  # noqa: F401
from app.modules.schools import models as school_models  # noqa: F401
from app.modules.users import models as user_models  # noqa: F401


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """SQLite database file with every table created."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test."""
    async with session_maker() as session:
        yield session
        await session.rollback()
