"""
Users Background Jobs

Monthly support request reset: on the first day of each month at 00:05 UTC
every user's ``support_requests_used`` goes back to zero. Running the job
twice in a month is harmless.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from apscheduler.triggers.cron import CronTrigger

from app.core.database import async_session_maker
from app.core.scheduler import register_job
from app.modules.users import service

logger = logging.getLogger(__name__)

JOB_ID_RESET_MONTHLY_USAGE = "users_reset_monthly_usage"


async def reset_monthly_usage() -> dict[str, Any]:
    """Reset support request usage for all users."""
    logger.info("Starting monthly support request reset job")

    async with async_session_maker() as db:
        count = await service.reset_monthly_usage(db)
        await db.commit()

    result = {
        "reset_users": count,
        "executed_at": datetime.now(UTC).isoformat(),
    }
    logger.info(f"Monthly support request reset completed. Users reset: {count}")
    return result


def register_user_jobs() -> None:
    """Register the users background jobs with the scheduler."""
    register_job(
        job_id=JOB_ID_RESET_MONTHLY_USAGE,
        func=reset_monthly_usage,
        trigger=CronTrigger(day=1, hour=0, minute=5, timezone="UTC"),
    )
    logger.info(f"Registered job: {JOB_ID_RESET_MONTHLY_USAGE} (cron: day 1, 00:05 UTC)")
