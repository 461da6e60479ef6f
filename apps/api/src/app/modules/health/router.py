"""Health router - system and detailed health snapshots."""

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_admin_user
from app.core.database import get_db
from app.modules.health import service

router = APIRouter()


@router.get("/system")
async def system_health(db: AsyncSession = Depends(get_db)) -> dict[str, Any]:
    """Database connectivity and resource usage."""
    return await service.get_system_health(db)


@router.get("/detailed")
async def detailed_health(
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """System health plus service status, table counts and request metrics."""
    return await service.get_detailed_system_health(db)
