"""
Authentication Service Layer

Login and the password reset flow.

Password reset tokens live in process memory (PasswordResetTokenStore), keyed
by the SHA-256 hash of the token so the plain token only ever exists in the
emailed link. Tokens expire after ``password_reset_token_ttl_minutes``; the
auth job sweeps expired entries periodically. Tokens do not survive a restart
and are not shared between worker processes.
"""

import hashlib
import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.email import send_password_reset_confirmation, send_password_reset_email
from app.core.security import (
    create_access_token,
    create_refresh_token,
    hash_password,
    verify_password,
)
from app.modules.email_config.service import get_email_configuration
from app.modules.users.models import User, UserRole
from app.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32
MIN_PASSWORD_LENGTH = 8

MSG_RESET_GENERIC = "If an account with that email exists, a password reset link has been sent."
MSG_RESET_SENT = "Password reset instructions have been sent to your email address."
MSG_EMAIL_NOT_CONFIGURED = (
    "Email service not configured. Please configure email settings in the Admin panel "
    "under School Settings."
)
MSG_TOKEN_AND_PASSWORD_REQUIRED = "Token and new password are required."
MSG_PASSWORD_TOO_SHORT = f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
MSG_INVALID_TOKEN = "Invalid or expired reset token."
MSG_TOKEN_EXPIRED = "Reset token has expired. Please request a new password reset."
MSG_RESET_COMPLETE = (
    "Password has been reset successfully. You can now log in with your new password."
)


class AuthServiceError(Exception):
    """Base exception for authentication errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class InvalidCredentialsError(AuthServiceError):
    def __init__(self):
        super().__init__(
            message="Invalid email or password.",
            error_code="INVALID_CREDENTIALS",
            status_code=401,
        )


class AccountInactiveError(AuthServiceError):
    def __init__(self):
        super().__init__(
            message="Your account has been deactivated.",
            error_code="ACCOUNT_INACTIVE",
            status_code=403,
        )


def _hash_token(token: str) -> str:
    """SHA-256 hex digest of a reset token."""
    return hashlib.sha256(token.encode()).hexdigest()


@dataclass
class ResetTokenEntry:
    email: str
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        return (now or datetime.now(UTC)) > self.expires_at


class PasswordResetTokenStore:
    """In-memory map of hashed reset token -> (email, expiry)."""

    def __init__(self, ttl: timedelta | None = None):
        self._ttl = ttl
        self._entries: dict[str, ResetTokenEntry] = {}
        self._lock = threading.Lock()

    @property
    def ttl(self) -> timedelta:
        return self._ttl or timedelta(minutes=settings.password_reset_token_ttl_minutes)

    def issue(self, email: str, now: datetime | None = None) -> str:
        """Create a token for an email address and return the plain token."""
        token = secrets.token_hex(TOKEN_BYTES)
        expires_at = (now or datetime.now(UTC)) + self.ttl
        with self._lock:
            self._entries[_hash_token(token)] = ResetTokenEntry(email=email, expires_at=expires_at)
        return token

    def get(self, token: str) -> ResetTokenEntry | None:
        with self._lock:
            return self._entries.get(_hash_token(token))

    def remove(self, token: str) -> None:
        with self._lock:
            self._entries.pop(_hash_token(token), None)

    def sweep(self, now: datetime | None = None) -> int:
        """Drop expired tokens. Returns how many were removed."""
        now = now or datetime.now(UTC)
        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


reset_token_store = PasswordResetTokenStore()


# ============================================================================
# Login
# ============================================================================


def build_token_claims(user: User) -> dict[str, str | None]:
    """Claims embedded in access tokens (read back by app.core.auth)."""
    return {
        "email": user.email,
        "role": user.role.value,
        "name": user.full_name,
        "school_id": str(user.school_id) if user.school_id else None,
    }


async def authenticate(db: AsyncSession, email: str, password: str) -> tuple[User, str, str]:
    """
    Verify credentials and issue tokens.

    Returns:
        (user, access_token, refresh_token)

    Raises:
        InvalidCredentialsError: Unknown email or wrong password
        AccountInactiveError: The account is deactivated
    """
    user = await UserRepository.get_by_email(db, email)

    if user is None:
        logger.warning("Login attempt for unknown email")
        raise InvalidCredentialsError()

    if not verify_password(password, user.password_hash):
        logger.warning(f"Invalid password for user {user.id}")
        raise InvalidCredentialsError()

    if not user.is_active:
        logger.warning(f"Login attempt for inactive account {user.id}")
        raise AccountInactiveError()

    user = await UserRepository.update_fields(db, user, last_login_at=datetime.now(UTC))

    access_token = create_access_token(
        subject=str(user.id),
        additional_claims=build_token_claims(user),
    )
    refresh_token = create_refresh_token(subject=str(user.id))

    logger.info(f"User logged in: {user.id} (role: {user.role.value})")
    return user, access_token, refresh_token


# ============================================================================
# Password reset
# ============================================================================


def build_reset_link(token: str) -> str:
    return f"{settings.frontend_url}/reset-password?token={token}"


async def initiate_password_reset(
    db: AsyncSession,
    email: str,
    store: PasswordResetTokenStore = reset_token_store,
) -> tuple[bool, str]:
    """
    Start a password reset.

    Unknown addresses get the same generic success message as known ones.

    Returns:
        (success, message)
    """
    user = await UserRepository.get_by_email(db, email)
    if user is None:
        logger.info("Password reset requested for unknown email")
        return True, MSG_RESET_GENERIC

    token = store.issue(user.email)
    email_config = await get_email_configuration(
        db, user_id=str(user.id), school_id=user.school_id
    )

    sent = await send_password_reset_email(
        to_email=user.email,
        user_name=user.first_name or "User",
        reset_link=build_reset_link(token),
        config=email_config,
    )
    if not sent:
        store.remove(token)
        logger.error(f"Password reset email could not be sent to user {user.id}")
        return False, MSG_EMAIL_NOT_CONFIGURED

    logger.info(f"Password reset token issued for user {user.id}")
    return True, MSG_RESET_SENT


async def confirm_password_reset(
    db: AsyncSession,
    token: str,
    new_password: str,
    store: PasswordResetTokenStore = reset_token_store,
) -> tuple[bool, str]:
    """
    Complete a password reset.

    When the account behind the token no longer exists, a teacher account is
    created for that address with the new password.

    Returns:
        (success, message)
    """
    if not token or not new_password:
        return False, MSG_TOKEN_AND_PASSWORD_REQUIRED

    if len(new_password) < MIN_PASSWORD_LENGTH:
        return False, MSG_PASSWORD_TOO_SHORT

    entry = store.get(token)
    if entry is None:
        return False, MSG_INVALID_TOKEN

    if entry.is_expired():
        store.remove(token)
        return False, MSG_TOKEN_EXPIRED

    password_hash = hash_password(new_password)
    user = await UserRepository.get_by_email(db, entry.email)

    if user is None:
        user = await UserRepository.create(
            db,
            email=entry.email,
            password_hash=password_hash,
            first_name="New",
            last_name="User",
            role=UserRole.TEACHER,
            support_requests_limit=settings.default_support_requests_limit,
        )
        logger.info(f"Created account {user.id} during password reset")
    else:
        user = await UserRepository.update_fields(
            db,
            user,
            password_hash=password_hash,
            must_change_password=False,
        )
        logger.info(f"Password reset for user {user.id}")

    store.remove(token)

    email_config = await get_email_configuration(
        db, user_id=str(user.id), school_id=user.school_id
    )
    confirmed = await send_password_reset_confirmation(
        to_email=user.email,
        user_name=user.first_name or "User",
        config=email_config,
    )
    if not confirmed:
        logger.warning(f"Password reset confirmation email not sent to user {user.id}")

    return True, MSG_RESET_COMPLETE


def sweep_expired_tokens(store: PasswordResetTokenStore = reset_token_store) -> int:
    removed = store.sweep()
    if removed:
        logger.info(f"Removed {removed} expired password reset token(s)")
    return removed
