"""Authentication router."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_user
from app.core.database import get_db
from app.core.rate_limit import rate_limit
from app.modules.auth import service
from app.modules.auth.schemas import (
    LoginRequest,
    LoginResponse,
    MeResponse,
    PasswordResetConfirm,
    PasswordResetRequest,
    PasswordResetResponse,
)
from app.modules.users.repository import UserRepository
from app.modules.users.schemas import UsageStatusResponse, UserProfile
from app.modules.users.service import check_usage_limit

logger = logging.getLogger(__name__)

router = APIRouter()


def _handle_service_error(e: service.AuthServiceError) -> HTTPException:
    return HTTPException(
        status_code=e.status_code,
        detail={"error": e.error_code, "message": e.message},
    )


@router.post("/login", response_model=LoginResponse)
@rate_limit(limit=10, window_seconds=300)
async def login(
    request: Request,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """
    Authenticate user and return JWT tokens.

    Raises:
        HTTPException 401: Invalid credentials
        HTTPException 403: Account inactive
        HTTPException 429: Too many attempts
    """
    try:
        user, access_token, refresh_token = await service.authenticate(
            db, credentials.email, credentials.password
        )
    except service.AuthServiceError as e:
        raise _handle_service_error(e) from e

    return LoginResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="bearer",
        user=UserProfile.from_user(user),
    )


@router.get("/me", response_model=MeResponse)
async def me(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> MeResponse:
    """Return the current user's profile and monthly usage."""
    account = await UserRepository.get_by_id(db, user.id)
    if account is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"error": "USER_NOT_FOUND", "message": "User not found"},
        )

    return MeResponse(
        user=UserProfile.from_user(account),
        usage=UsageStatusResponse.from_status(check_usage_limit(account)),
    )


@router.post("/password-reset/request", response_model=PasswordResetResponse)
@rate_limit(limit=5, window_seconds=900)
async def request_password_reset(
    request: Request,
    data: PasswordResetRequest,
    db: AsyncSession = Depends(get_db),
) -> PasswordResetResponse:
    """Email a password reset link. Always succeeds for unknown addresses."""
    success, message = await service.initiate_password_reset(db, data.email)
    return PasswordResetResponse(success=success, message=message)


@router.post("/password-reset/confirm", response_model=PasswordResetResponse)
async def confirm_password_reset(
    data: PasswordResetConfirm,
    db: AsyncSession = Depends(get_db),
) -> PasswordResetResponse:
    """Set a new password using a reset token."""
    success, message = await service.confirm_password_reset(db, data.token, data.new_password)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "PASSWORD_RESET_FAILED", "message": message},
        )
    return PasswordResetResponse(success=True, message=message)
