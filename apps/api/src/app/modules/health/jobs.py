"""
Health Background Jobs

Periodic health monitor: every ``health_monitor_interval_minutes`` the
system snapshot is taken and problems are logged (memory or CPU above 80%
as warnings, an unreachable database as an error).
"""

import logging
from typing import Any

from apscheduler.triggers.interval import IntervalTrigger

from app.core.config import settings
from app.core.database import async_session_maker
from app.core.scheduler import register_job
from app.modules.health import service

logger = logging.getLogger(__name__)

JOB_ID_HEALTH_MONITOR = "health_monitor"
USAGE_WARNING_THRESHOLD = 80


async def run_health_monitor() -> dict[str, Any]:
    async with async_session_maker() as db:
        health = await service.get_system_health(db)

    memory = health["system"]["memory"]["percentage"]
    cpu = health["system"]["cpu"]["usage"]

    if memory > USAGE_WARNING_THRESHOLD:
        logger.warning(f"High memory usage: {memory}%")
    if cpu > USAGE_WARNING_THRESHOLD:
        logger.warning(f"High CPU usage: {cpu}%")
    if not health["database"]["connected"]:
        logger.error(f"Database connection failed: {health['database'].get('error')}")

    return {"status": health["status"], "memory": memory, "cpu": cpu}


def register_health_jobs() -> None:
    """Register the health background jobs with the scheduler."""
    minutes = settings.health_monitor_interval_minutes
    register_job(
        job_id=JOB_ID_HEALTH_MONITOR,
        func=run_health_monitor,
        trigger=IntervalTrigger(minutes=minutes),
    )
    logger.info(f"Registered job: {JOB_ID_HEALTH_MONITOR} (every {minutes} minutes)")
