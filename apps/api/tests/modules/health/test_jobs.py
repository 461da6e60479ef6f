"""
Unit tests for the health monitor job.
"""

import logging
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, patch

import pytest

from app.modules.health import jobs

JOBS = "app.modules.health.jobs"


@asynccontextmanager
async def fake_session():
    yield AsyncMock()


def _health(memory: float, cpu: float, connected: bool = True) -> dict:
    database = {"connected": True} if connected else {"connected": False, "error": "refused"}
    return {
        "status": "healthy" if connected else "error",
        "database": database,
        "system": {"memory": {"percentage": memory}, "cpu": {"usage": cpu}},
    }


class TestRunHealthMonitor:
    """Tests for run_health_monitor."""

    @pytest.mark.asyncio
    async def test_quiet_when_healthy(self, caplog):
        with patch(f"{JOBS}.async_session_maker", fake_session), \
             patch(f"{JOBS}.service.get_system_health", AsyncMock(return_value=_health(40, 10))):
            with caplog.at_level(logging.WARNING, logger=JOBS):
                result = await jobs.run_health_monitor()

        assert result == {"status": "healthy", "memory": 40, "cpu": 10}
        assert caplog.records == []

    @pytest.mark.asyncio
    async def test_warns_on_high_usage(self, caplog):
        with patch(f"{JOBS}.async_session_maker", fake_session), \
             patch(f"{JOBS}.service.get_system_health", AsyncMock(return_value=_health(91.5, 85))):
            with caplog.at_level(logging.WARNING, logger=JOBS):
                await jobs.run_health_monitor()

        messages = [r.getMessage() for r in caplog.records]
        assert "High memory usage: 91.5%" in messages
        assert "High CPU usage: 85%" in messages

    @pytest.mark.asyncio
    async def test_errors_when_database_down(self, caplog):
        with patch(f"{JOBS}.async_session_maker", fake_session), \
             patch(f"{JOBS}.service.get_system_health", AsyncMock(return_value=_health(10, 10, connected=False))):
            with caplog.at_level(logging.WARNING, logger=JOBS):
                result = await jobs.run_health_monitor()

        assert result["status"] == "error"
        assert any(r.levelno == logging.ERROR and "refused" in r.getMessage() for r in caplog.records)


def test_register_health_jobs():
    with patch(f"{JOBS}.register_job") as register:
        jobs.register_health_jobs()

    kwargs = register.call_args.kwargs
    assert kwargs["job_id"] == "health_monitor"
    assert kwargs["func"] is jobs.run_health_monitor
