"""
Health Service

System health snapshots for the health endpoints and the monitor job.

The basic snapshot pings the database and reads memory, CPU and disk usage
with psutil. The detailed snapshot adds the state of the AI, email and PDF
services, table counts and request metrics collected by the HTTP
middleware in main.py.
"""

import logging
import os
import threading
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import psutil
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.modules.concerns.models import Concern, Intervention
from app.modules.users.models import User

logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()
METRICS_WINDOW_SECONDS = 60


@dataclass
class RequestMetrics:
    """
    Process-wide request counters.

    Response times are in milliseconds. Requests-per-minute counts the
    requests seen in the last 60 seconds.
    """

    request_count: int = 0
    error_count: int = 0
    response_time_sum: float = 0.0
    _recent: list[float] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def track(self, response_time_ms: float, is_error: bool = False, now: float | None = None) -> None:
        now = time.monotonic() if now is None else now
        with self._lock:
            self.request_count += 1
            self.response_time_sum += response_time_ms
            if is_error:
                self.error_count += 1
            self._recent.append(now)
            cutoff = now - METRICS_WINDOW_SECONDS
            while self._recent and self._recent[0] < cutoff:
                self._recent.pop(0)

    def snapshot(self, now: float | None = None) -> dict[str, float]:
        now = time.monotonic() if now is None else now
        with self._lock:
            cutoff = now - METRICS_WINDOW_SECONDS
            recent = sum(1 for t in self._recent if t >= cutoff)
            average = self.response_time_sum / self.request_count if self.request_count else 0.0
            error_rate = self.error_count / self.request_count * 100 if self.request_count else 0.0
        return {
            "average_response_time": round(average, 2),
            "requests_per_minute": recent,
            "error_rate": round(error_rate, 2),
        }

    def reset(self) -> None:
        with self._lock:
            self.request_count = 0
            self.error_count = 0
            self.response_time_sum = 0.0
            self._recent.clear()


request_metrics = RequestMetrics()


def track_request(response_time_ms: float, is_error: bool = False) -> None:
    request_metrics.track(response_time_ms, is_error)


async def check_database(db: AsyncSession) -> dict[str, Any]:
    """Ping the database and time the round trip."""
    started = time.perf_counter()
    try:
        await db.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Database health check failed: {e}")
        return {"connected": False, "error": str(e)}
    return {
        "connected": True,
        "response_time_ms": round((time.perf_counter() - started) * 1000, 2),
    }


def system_usage() -> dict[str, Any]:
    memory = psutil.virtual_memory()
    disk = psutil.disk_usage(os.path.abspath(os.sep))
    return {
        "memory": {
            "used": memory.used,
            "total": memory.total,
            "percentage": memory.percent,
        },
        "cpu": {"usage": psutil.cpu_percent(interval=None)},
        "disk": {
            "available": disk.free,
            "total": disk.total,
            "percentage": disk.percent,
        },
    }


async def get_system_health(db: AsyncSession) -> dict[str, Any]:
    database = await check_database(db)
    return {
        "status": "healthy" if database["connected"] else "error",
        "timestamp": datetime.now(UTC).isoformat(),
        "uptime": int(time.monotonic() - STARTED_AT),
        "database": database,
        "system": system_usage(),
    }


def check_reports_directory(reports_dir: str | None = None) -> dict[str, Any]:
    """Whether PDFs can be written to the reports directory."""
    directory = Path(reports_dir or settings.reports_dir)
    writable = False
    try:
        directory.mkdir(parents=True, exist_ok=True)
        marker = directory / "health-check.tmp"
        marker.write_text("health check")
        marker.unlink()
        writable = True
    except OSError as e:
        logger.warning(f"Reports directory {directory} is not writable: {e}")
    return {
        "available": writable,
        "reports_directory": str(directory.resolve()),
        "writable": writable,
    }


async def _table_counts(db: AsyncSession) -> dict[str, int]:
    counts = {}
    for name, model in (("users", User), ("concerns", Concern), ("interventions", Intervention)):
        result = await db.execute(select(func.count(model.id)))
        counts[name] = result.scalar_one()
    return counts


async def get_detailed_system_health(db: AsyncSession) -> dict[str, Any]:
    health = await get_system_health(db)

    health["services"] = {
        "ai": {
            "available": bool(settings.deepseek_api_key),
            "last_check": datetime.now(UTC).isoformat(),
        },
        "email": {"configured": settings.smtp_configured},
        "pdf": check_reports_directory(),
    }

    if health["database"]["connected"]:
        try:
            health["database"]["table_stats"] = await _table_counts(db)
        except SQLAlchemyError as e:
            logger.error(f"Failed to collect table statistics: {e}")
            health["database"]["table_stats"] = {"users": 0, "concerns": 0, "interventions": 0}

    health["performance"] = request_metrics.snapshot()
    return health
