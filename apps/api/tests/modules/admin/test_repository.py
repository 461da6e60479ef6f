"""
Repository tests for admin data against a real SQLite database.
"""

from datetime import UTC, datetime, timedelta

import pytest

from app.modules.admin import repository

BASE_TIME = datetime(2025, 1, 1, tzinfo=UTC)


async def create_key(db, name: str, *, provider: str = "deepseek", active: bool = True, age_days: int = 0):
    key = await repository.create_api_key(db, name=name, api_key=f"encrypted-{name}", provider=provider)
    key.is_active = active
    key.created_at = BASE_TIME - timedelta(days=age_days)
    await db.flush()
    return key


class TestGetActiveApiKey:
    """Tests for get_active_api_key."""

    @pytest.mark.asyncio
    async def test_oldest_active_key_for_provider(self, db_session):
        await create_key(db_session, "newest", age_days=1)
        oldest = await create_key(db_session, "oldest", age_days=30)
        await create_key(db_session, "retired", active=False, age_days=90)
        await create_key(db_session, "other-provider", provider="openai", age_days=60)

        key = await repository.get_active_api_key(db_session, "deepseek")

        assert key is not None
        assert key.id == oldest.id

    @pytest.mark.asyncio
    async def test_none_when_all_inactive(self, db_session):
        await create_key(db_session, "retired", active=False)

        assert await repository.get_active_api_key(db_session, "deepseek") is None


class TestRecordApiKeyUsage:
    """Tests for record_api_key_usage."""

    @pytest.mark.asyncio
    async def test_increments_and_stamps(self, db_session):
        key = await create_key(db_session, "primary")

        await repository.record_api_key_usage(db_session, key.id)
        await repository.record_api_key_usage(db_session, key.id)
        await db_session.refresh(key)

        assert key.usage_count == 2
        assert key.last_used_at is not None


class TestAdminLog:
    """Tests for the admin audit log."""

    @pytest.mark.asyncio
    async def test_recent_logs_newest_first(self, db_session):
        for offset, action in [(0, "create_teacher"), (2, "bulk_csv_upload"), (1, "delete_teachers")]:
            log = await repository.create_log(
                db_session, admin_id=None, action=action, details={"offset": offset}
            )
            log.created_at = BASE_TIME + timedelta(hours=offset)
        await db_session.flush()

        logs = await repository.list_recent_logs(db_session, limit=2)

        assert [log.action for log in logs] == ["bulk_csv_upload", "delete_teachers"]
        assert logs[0].details == {"offset": 2}
