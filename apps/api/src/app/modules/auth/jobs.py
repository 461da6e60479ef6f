"""
Auth Background Jobs

Periodic sweep of expired password reset tokens from the in-memory store.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from apscheduler.triggers.interval import IntervalTrigger

from app.core.config import settings
from app.core.scheduler import register_job
from app.modules.auth import service

logger = logging.getLogger(__name__)

JOB_ID_SWEEP_RESET_TOKENS = "auth_sweep_reset_tokens"


async def sweep_reset_tokens() -> dict[str, Any]:
    removed = service.sweep_expired_tokens()
    return {
        "removed": removed,
        "remaining": len(service.reset_token_store),
        "executed_at": datetime.now(UTC).isoformat(),
    }


def register_auth_jobs() -> None:
    """Register the auth background jobs with the scheduler."""
    minutes = settings.password_reset_sweep_minutes
    register_job(
        job_id=JOB_ID_SWEEP_RESET_TOKENS,
        func=sweep_reset_tokens,
        trigger=IntervalTrigger(minutes=minutes),
    )
    logger.info(f"Registered job: {JOB_ID_SWEEP_RESET_TOKENS} (interval: {minutes} minutes)")
