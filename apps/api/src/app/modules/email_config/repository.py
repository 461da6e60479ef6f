"""
Email Configuration Repository

Database operations for user and school SMTP configurations.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import SchoolEmailConfig, UserEmailConfig

EmailConfigModel = UserEmailConfig | SchoolEmailConfig


async def get_user_config(db: AsyncSession, user_id: str) -> UserEmailConfig | None:
    result = await db.execute(
        select(UserEmailConfig).where(UserEmailConfig.user_id == str(user_id))
    )
    return result.scalar_one_or_none()


async def get_active_user_config(db: AsyncSession, user_id: str) -> UserEmailConfig | None:
    result = await db.execute(
        select(UserEmailConfig).where(
            UserEmailConfig.user_id == str(user_id),
            UserEmailConfig.is_active == True,  # noqa: E712
        )
    )
    return result.scalar_one_or_none()


async def get_school_config(db: AsyncSession, school_id: str) -> SchoolEmailConfig | None:
    result = await db.execute(
        select(SchoolEmailConfig).where(SchoolEmailConfig.school_id == str(school_id))
    )
    return result.scalar_one_or_none()


async def get_active_school_config(db: AsyncSession, school_id: str) -> SchoolEmailConfig | None:
    result = await db.execute(
        select(SchoolEmailConfig).where(
            SchoolEmailConfig.school_id == str(school_id),
            SchoolEmailConfig.is_active == True,  # noqa: E712
        )
    )
    return result.scalar_one_or_none()


async def create_user_config(db: AsyncSession, *, user_id: str, **fields: Any) -> UserEmailConfig:
    config = UserEmailConfig(user_id=str(user_id), **fields)
    db.add(config)
    await db.flush()
    await db.refresh(config)
    return config


async def create_school_config(
    db: AsyncSession,
    *,
    school_id: str,
    configured_by: str | None,
    **fields: Any,
) -> SchoolEmailConfig:
    config = SchoolEmailConfig(school_id=str(school_id), configured_by=configured_by, **fields)
    db.add(config)
    await db.flush()
    await db.refresh(config)
    return config


async def update_config(db: AsyncSession, config: EmailConfigModel, **fields: Any) -> EmailConfigModel:
    for name, value in fields.items():
        setattr(config, name, value)
    await db.flush()
    await db.refresh(config)
    return config


async def record_test_result(db: AsyncSession, config: EmailConfigModel, success: bool) -> None:
    config.test_status = "success" if success else "failed"
    config.last_tested_at = datetime.now(UTC)
    await db.flush()


async def delete_config(db: AsyncSession, config: EmailConfigModel) -> None:
    await db.delete(config)
    await db.flush()
