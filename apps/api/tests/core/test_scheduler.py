"""
Unit tests for the background job registry.
"""

from unittest.mock import AsyncMock

import pytest
from apscheduler.triggers.interval import IntervalTrigger

from app.core.scheduler import (
    clear_registry,
    list_registered_jobs,
    pause_job,
    register_job,
    trigger_job_manually,
)


@pytest.fixture(autouse=True)
def empty_registry():
    clear_registry()
    yield
    clear_registry()


class TestRegistry:
    """Tests for job registration without a running scheduler."""

    def test_register_lists_job(self):
        register_job("sample_job", AsyncMock(), IntervalTrigger(minutes=5))
        jobs = list_registered_jobs()
        assert jobs == [{"job_id": "sample_job", "registered": True}]

    def test_pause_unknown_job(self):
        assert pause_job("missing") is False


class TestTriggerJobManually:
    """Tests for manual execution."""

    @pytest.mark.asyncio
    async def test_runs_registered_job(self):
        func = AsyncMock()
        register_job("sample_job", func, IntervalTrigger(minutes=5))

        result = await trigger_job_manually("sample_job")

        func.assert_awaited_once()
        assert result["status"] == "success"
        assert result["job_id"] == "sample_job"

    @pytest.mark.asyncio
    async def test_reports_job_failure(self):
        func = AsyncMock(side_effect=RuntimeError("boom"))
        register_job("failing_job", func, IntervalTrigger(minutes=5))

        result = await trigger_job_manually("failing_job")

        assert result["status"] == "error"
        assert result["error"] == "boom"

    @pytest.mark.asyncio
    async def test_unknown_job_raises(self):
        with pytest.raises(ValueError):
            await trigger_job_manually("missing")
