"""Email configuration router."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_admin_user, get_current_user
from app.core.database import get_db
from app.core.rate_limit import rate_limit
from app.modules.email_config import service
from app.modules.email_config.models import SchoolEmailConfig, UserEmailConfig
from app.modules.email_config.schemas import (
    EmailConfigResponse,
    EmailConfigUpdate,
    EmailStatusResponse,
    EmailTestRequest,
    EmailTestResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _handle_service_error(e: service.EmailConfigServiceError) -> HTTPException:
    return HTTPException(
        status_code=e.status_code,
        detail={"error": e.error_code, "message": e.message},
    )


def _to_response(config: UserEmailConfig | SchoolEmailConfig) -> EmailConfigResponse:
    return EmailConfigResponse(
        id=str(config.id),
        smtp_host=config.smtp_host,
        smtp_port=config.smtp_port,
        smtp_secure=config.smtp_secure,
        smtp_user=config.smtp_user,
        from_address=config.from_address,
        from_name=config.from_name,
        is_active=config.is_active,
        test_status=config.test_status,
        last_tested_at=config.last_tested_at,
        has_password=bool(config.smtp_password),
        updated_at=config.updated_at,
    )


# ============================================================================
# Personal configuration
# ============================================================================


@router.get("/me", response_model=EmailConfigResponse)
async def get_my_config(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> EmailConfigResponse:
    try:
        config = await service.get_user_config(db, str(user.id))
    except service.EmailConfigServiceError as e:
        raise _handle_service_error(e) from e
    return _to_response(config)


@router.put("/me", response_model=EmailConfigResponse)
async def save_my_config(
    data: EmailConfigUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> EmailConfigResponse:
    try:
        config = await service.save_user_config(db, str(user.id), data)
    except service.EmailConfigServiceError as e:
        raise _handle_service_error(e) from e
    return _to_response(config)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_my_config(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        await service.delete_user_config(db, str(user.id))
    except service.EmailConfigServiceError as e:
        raise _handle_service_error(e) from e


@router.post("/me/test", response_model=EmailTestResponse)
@rate_limit(limit=5, window_seconds=300)
async def test_my_config(
    request: Request,
    data: EmailTestRequest,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> EmailTestResponse:
    """Send a test email through the personal configuration."""
    try:
        result = await service.send_user_config_test(db, str(user.id), str(data.test_email))
    except service.EmailConfigServiceError as e:
        raise _handle_service_error(e) from e
    return EmailTestResponse(**result)


@router.get("/status", response_model=EmailStatusResponse)
async def get_status(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> EmailStatusResponse:
    """Which configuration (if any) sends mail for the current user."""
    result = await service.get_email_status(db, user_id=str(user.id), school_id=user.school_id)
    return EmailStatusResponse(**result)


# ============================================================================
# School configuration (admins)
# ============================================================================


@router.get("/schools/{school_id}", response_model=EmailConfigResponse)
async def get_school_config(
    school_id: str,
    user: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> EmailConfigResponse:
    try:
        config = await service.get_school_config(db, user, school_id)
    except service.EmailConfigServiceError as e:
        raise _handle_service_error(e) from e
    return _to_response(config)


@router.put("/schools/{school_id}", response_model=EmailConfigResponse)
async def save_school_config(
    school_id: str,
    data: EmailConfigUpdate,
    user: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> EmailConfigResponse:
    try:
        config = await service.save_school_config(db, user, school_id, data)
    except service.EmailConfigServiceError as e:
        raise _handle_service_error(e) from e
    return _to_response(config)


@router.delete("/schools/{school_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_school_config(
    school_id: str,
    user: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        await service.delete_school_config(db, user, school_id)
    except service.EmailConfigServiceError as e:
        raise _handle_service_error(e) from e


@router.post("/schools/{school_id}/test", response_model=EmailTestResponse)
@rate_limit(limit=5, window_seconds=300)
async def test_school_config(
    request: Request,
    school_id: str,
    data: EmailTestRequest,
    user: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> EmailTestResponse:
    """Send a test email through the school configuration."""
    try:
        result = await service.send_school_config_test(db, user, school_id, str(data.test_email))
    except service.EmailConfigServiceError as e:
        raise _handle_service_error(e) from e
    return EmailTestResponse(**result)
