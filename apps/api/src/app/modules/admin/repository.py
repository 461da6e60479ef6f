"""
Admin Repository

Database operations for the admin audit log and AI provider API keys.
"""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import DEFAULT_API_KEY_MAX_USAGE, AdminLog, ApiKey

# ============================================================================
# Admin log
# ============================================================================


async def create_log(
    db: AsyncSession,
    *,
    admin_id: str | UUID | None,
    action: str,
    target_user_id: str | None = None,
    target_school_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> AdminLog:
    """Record an administrator action."""
    log = AdminLog(
        admin_id=str(admin_id) if admin_id else None,
        action=action,
        target_user_id=target_user_id,
        target_school_id=target_school_id,
        details=details,
    )
    db.add(log)
    await db.flush()
    return log


async def list_recent_logs(db: AsyncSession, limit: int = 50) -> list[AdminLog]:
    """Most recent admin actions, newest first."""
    result = await db.execute(
        select(AdminLog).order_by(AdminLog.created_at.desc()).limit(limit)
    )
    return list(result.scalars().all())


# ============================================================================
# API keys
# ============================================================================


async def list_api_keys(db: AsyncSession) -> list[ApiKey]:
    result = await db.execute(select(ApiKey).order_by(ApiKey.created_at.desc()))
    return list(result.scalars().all())


async def get_api_key(db: AsyncSession, key_id: str | UUID) -> ApiKey | None:
    return await db.get(ApiKey, str(key_id))


async def get_active_api_key(db: AsyncSession, provider: str) -> ApiKey | None:
    """Oldest active key for a provider."""
    result = await db.execute(
        select(ApiKey)
        .where(ApiKey.provider == provider, ApiKey.is_active == True)  # noqa: E712
        .order_by(ApiKey.created_at.asc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def create_api_key(
    db: AsyncSession,
    *,
    name: str,
    api_key: str,
    provider: str = "deepseek",
    description: str | None = None,
    max_usage: int = DEFAULT_API_KEY_MAX_USAGE,
    created_by: str | UUID | None = None,
) -> ApiKey:
    key = ApiKey(
        name=name,
        provider=provider,
        api_key=api_key,
        description=description,
        max_usage=max_usage,
        is_active=True,
        usage_count=0,
        created_by=str(created_by) if created_by else None,
    )
    db.add(key)
    await db.flush()
    await db.refresh(key)
    return key


async def update_api_key(db: AsyncSession, key: ApiKey, **fields: Any) -> ApiKey:
    for name, value in fields.items():
        setattr(key, name, value)
    await db.flush()
    await db.refresh(key)
    return key


async def delete_api_key(db: AsyncSession, key: ApiKey) -> None:
    await db.delete(key)
    await db.flush()


async def record_api_key_usage(db: AsyncSession, key_id: str | UUID) -> None:
    """Increment a key's usage count and stamp last_used_at."""
    await db.execute(
        update(ApiKey)
        .where(ApiKey.id == str(key_id))
        .values(usage_count=ApiKey.usage_count + 1, last_used_at=datetime.now(UTC))
    )
