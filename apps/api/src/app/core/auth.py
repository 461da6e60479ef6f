"""
Authentication and Authorization Module

Provides authentication dependencies for FastAPI endpoints.
JWT access tokens are validated with the helpers in security.py and turned
into a CurrentUser; role checks are layered on top.

Roles:
- teacher: documents concerns, manages own email settings
- school_admin: manages teachers and email settings of their own school
- platform_admin: manages everything, including AI provider API keys

SECURITY NOTE:
- Development mode auth bypass is ONLY enabled when PYTHON_ENV=development
- Production environments MUST set PYTHON_ENV=production to disable test tokens
"""

import logging
import os
from dataclasses import dataclass
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import settings
from app.core.security import decode_token

logger = logging.getLogger(__name__)

ROLE_TEACHER = "teacher"
ROLE_SCHOOL_ADMIN = "school_admin"
ROLE_PLATFORM_ADMIN = "platform_admin"
ADMIN_ROLES = frozenset({ROLE_SCHOOL_ADMIN, ROLE_PLATFORM_ADMIN})

# Security scheme for OpenAPI documentation
security = HTTPBearer(
    auto_error=True,
    description="JWT Bearer token for authentication",
)


@dataclass
class CurrentUser:
    """
    Represents an authenticated user.

    Populated from JWT claims after token validation.

    Attributes:
        id: User's unique identifier
        email: User's email address
        role: teacher, school_admin or platform_admin
        name: Display name (optional)
        school_id: School the user belongs to (None for platform admins)
    """

    id: UUID
    email: str
    role: str
    name: str | None = None
    school_id: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES

    @property
    def is_platform_admin(self) -> bool:
        return self.role == ROLE_PLATFORM_ADMIN

    def can_manage_school(self, school_id: str | None) -> bool:
        """Platform admins manage every school, school admins only their own."""
        if self.is_platform_admin:
            return True
        return self.role == ROLE_SCHOOL_ADMIN and school_id is not None and self.school_id == school_id

    def __str__(self) -> str:
        return f"CurrentUser(id={self.id}, email={self.email}, role={self.role})"


def _is_dev_mode_safe() -> bool:
    """
    Check if development mode is safe to enable.

    Requires PYTHON_ENV=development in settings and the raw environment
    variable must not name production or staging.
    """
    env_var = os.getenv("PYTHON_ENV", "").lower()

    is_safe = (
        settings.is_development
        and not settings.is_production
        and env_var != "production"
        and env_var != "staging"
    )

    if is_safe:
        logger.warning(
            "SECURITY: Development auth mode is ENABLED. This MUST NOT be used in production!"
        )

    return is_safe


# Development mode flag - allows test tokens for LOCAL testing ONLY
_DEVELOPMENT_MODE = _is_dev_mode_safe()

_DEV_USERS = {
    "dev-admin-token": CurrentUser(
        id=UUID("00000000-0000-0000-0000-000000000001"),
        email="admin@concern2care.dev",
        role=ROLE_PLATFORM_ADMIN,
        name="Development Admin",
    ),
    "dev-teacher-token": CurrentUser(
        id=UUID("00000000-0000-0000-0000-000000000002"),
        email="teacher@concern2care.dev",
        role=ROLE_TEACHER,
        name="Development Teacher",
    ),
}


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def _validate_jwt_token(token: str) -> CurrentUser:
    """
    Validate a JWT and extract the user claims.

    Raises:
        HTTPException 401: If token is invalid, expired or not an access token
    """
    if _DEVELOPMENT_MODE and token in _DEV_USERS:
        logger.debug("Development mode: Using test token")
        return _DEV_USERS[token]

    payload = decode_token(token)

    if payload is None:
        logger.warning("Invalid or expired JWT token")
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")

    token_type = payload.get("type", "access")
    if token_type != "access":
        logger.warning(f"Invalid token type: {token_type}")
        raise _unauthorized("INVALID_TOKEN_TYPE", "This endpoint requires an access token.")

    try:
        user_id_str = payload.get("sub")
        if not user_id_str:
            raise ValueError("Missing 'sub' claim in token")

        return CurrentUser(
            id=UUID(user_id_str),
            email=payload.get("email", ""),
            role=payload.get("role", ""),
            name=payload.get("name"),
            school_id=payload.get("school_id"),
        )
    except (ValueError, KeyError) as e:
        logger.warning(f"Invalid token claims: {e}")
        raise _unauthorized(
            "INVALID_TOKEN_CLAIMS", "Token contains invalid or missing claims."
        ) from e


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> CurrentUser:
    """
    FastAPI dependency returning the authenticated user.

    Raises:
        HTTPException 401: If token is missing, invalid, or expired
    """
    user = await _validate_jwt_token(credentials.credentials)
    logger.debug(f"Authenticated user: {user.id} ({user.role})")
    return user


async def get_current_admin_user(
    user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """
    FastAPI dependency for school-admin or platform-admin endpoints.

    Raises:
        HTTPException 403: If the user is not an administrator
    """
    if not user.is_admin:
        logger.warning(
            f"Access denied: User {user.id} has role '{user.role}', but an admin role is required"
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "ADMIN_ACCESS_REQUIRED",
                "message": "Administrator access is required for this endpoint.",
            },
        )
    return user


async def get_platform_admin_user(
    user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """
    FastAPI dependency for platform-admin-only endpoints.

    Raises:
        HTTPException 403: If the user is not a platform admin
    """
    if not user.is_platform_admin:
        logger.warning(f"Access denied: User {user.id} is not a platform admin")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "PLATFORM_ADMIN_REQUIRED",
                "message": "Platform admin access is required for this endpoint.",
            },
        )
    return user


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(HTTPBearer(auto_error=False)),
) -> CurrentUser | None:
    """Return the user if a valid token is provided, otherwise None."""
    if not credentials:
        return None

    try:
        return await get_current_user(credentials)
    except HTTPException:
        return None


__all__ = [
    "ADMIN_ROLES",
    "CurrentUser",
    "ROLE_PLATFORM_ADMIN",
    "ROLE_SCHOOL_ADMIN",
    "ROLE_TEACHER",
    "get_current_admin_user",
    "get_current_user",
    "get_optional_user",
    "get_platform_admin_user",
]
