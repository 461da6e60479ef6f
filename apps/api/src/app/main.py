"""
Concern2Care API - Main Application Entry Point

This module initializes and configures the FastAPI application including:
- Logging
- Database and Redis connections
- Background job scheduler
- CORS and request metrics middleware
- API routing
- Health check endpoints
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from redis.exceptions import RedisError

from app.api import api_router
from app.core.config import settings
from app.core.database import async_session_maker, close_db, init_db
from app.core.logging import configure_logging
from app.core.redis import close_redis, get_redis_client, init_redis
from app.core.scheduler import (
    list_registered_jobs,
    pause_job,
    resume_job,
    start_scheduler,
    stop_scheduler,
    trigger_job_manually,
)
from app.modules.auth.jobs import register_auth_jobs
from app.modules.health.jobs import register_health_jobs
from app.modules.health.service import track_request
from app.modules.users.jobs import register_user_jobs

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events including:
    - Redis connection
    - Database connection
    - Background job scheduler
    """
    # Startup
    print(f"Starting Concern2Care API in {settings.python_env} mode...")

    # Initialize Redis
    try:
        client = await init_redis()
        print("[OK] Redis connected" if client else "[WARN] Redis unavailable, using in-memory rate limits")
    except Exception as e:
        print(f"[FAIL] Redis connection failed: {e}")
        if settings.is_production:
            raise

    # Initialize Database
    try:
        await init_db()
        print("[OK] Database connected")
    except Exception as e:
        print(f"[FAIL] Database connection failed: {e}")
        if settings.is_production:
            raise

    # Initialize Background Job Scheduler
    try:
        # Register jobs before starting the scheduler
        register_auth_jobs()
        register_user_jobs()
        register_health_jobs()

        await start_scheduler()
        print("[OK] Background scheduler started")
    except Exception as e:
        print(f"[FAIL] Background scheduler failed to start: {e}")
        if settings.is_production:
            raise

    yield  # Application runs here

    # Shutdown
    print("Shutting down Concern2Care API...")

    # Stop the scheduler first (wait for running jobs)
    await stop_scheduler()
    print("[OK] Background scheduler stopped")

    await close_redis()
    await close_db()
    print("[OK] Cleanup complete")


app = FastAPI(
    title="Concern2Care API",
    description="Student concern documentation with AI-assisted intervention planning",
    version="0.1.0",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

app.include_router(api_router, prefix="/api/v1")

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def record_request_metrics(request: Request, call_next):
    """Feed response times and server errors into the health metrics."""
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        track_request((time.perf_counter() - started) * 1000, is_error=True)
        raise
    track_request((time.perf_counter() - started) * 1000, is_error=response.status_code >= 500)
    return response


@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """Root endpoint - API welcome message."""
    return {
        "message": "Welcome to Concern2Care API",
        "status": "running",
        "environment": settings.python_env,
    }


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for container orchestration."""
    return {"status": "healthy"}


@app.get("/ready", tags=["Health"])
async def readiness_check() -> dict[str, str]:
    """Readiness check endpoint."""
    return {"status": "ready"}


# ============================================
# Debug Endpoints (development only)
# ============================================


def _require_development() -> None:
    if not settings.is_development:
        raise HTTPException(status_code=404, detail="Not Found")


@app.get("/debug/db", tags=["Debug"])
async def debug_db():
    """Test database connection."""
    _require_development()
    try:
        async with async_session_maker() as session:
            result = await session.execute(text("SELECT 1"))
            return {"database": "connected", "result": result.scalar()}
    except (SQLAlchemyError, OSError) as e:
        return {"database": "error", "message": str(e)}


@app.get("/debug/redis", tags=["Debug"])
async def debug_redis():
    """Test Redis connection."""
    _require_development()
    client = get_redis_client()
    if client is None:
        return {"redis": "not initialized"}
    try:
        await client.ping()
        return {"redis": "connected"}
    except (RedisError, OSError) as e:
        return {"redis": "error", "message": str(e)}


@app.get("/debug/jobs", tags=["Debug"])
async def list_jobs():
    """
    List all registered background jobs and their status.

    Returns:
        List of job information including next run time and pause status.
    """
    _require_development()
    return {"jobs": list_registered_jobs()}


@app.post("/debug/jobs/{job_id}/trigger", tags=["Debug"])
async def trigger_job(job_id: str):
    """
    Manually trigger a background job.

    Args:
        job_id: The ID of the job to trigger. Available jobs:
            - auth_sweep_reset_tokens
            - users_reset_monthly_usage
            - health_monitor

    Raises:
        HTTPException 400: If job_id is not found.
    """
    _require_development()
    try:
        return await trigger_job_manually(job_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@app.post("/debug/jobs/{job_id}/pause", tags=["Debug"])
async def pause_job_endpoint(job_id: str):
    """Pause a scheduled background job."""
    _require_development()
    return {"job_id": job_id, "paused": pause_job(job_id)}


@app.post("/debug/jobs/{job_id}/resume", tags=["Debug"])
async def resume_job_endpoint(job_id: str):
    """Resume a paused background job."""
    _require_development()
    return {"job_id": job_id, "resumed": resume_job(job_id)}
