"""
Email Configuration Service Layer

Resolves which SMTP account sends mail on a user's behalf and manages the
stored configurations.

Resolution order:
1. The user's own active configuration
2. The active configuration of the user's school
3. The system SMTP account from settings
4. None (callers decide whether that is an error)
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser
from app.core.email import (
    DEFAULT_FROM_NAME,
    EmailConfiguration,
    EmailDeliveryError,
    EmailMessage,
    deliver_email,
    get_system_email_configuration,
    render_configuration_test_email,
)
from app.core.encryption import EncryptionError, decrypt_password, encrypt_password
from app.modules.email_config import repository
from app.modules.email_config.models import SchoolEmailConfig, UserEmailConfig
from app.modules.email_config.schemas import EmailConfigUpdate

logger = logging.getLogger(__name__)

TEST_EMAIL_SUBJECT = "Concern2Care Email Configuration Test"


class EmailConfigServiceError(Exception):
    """Base exception for email configuration errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class EmailConfigNotFoundError(EmailConfigServiceError):
    def __init__(self, message: str = "Email configuration not found"):
        super().__init__(message=message, error_code="EMAIL_CONFIG_NOT_FOUND", status_code=404)


class PasswordRequiredError(EmailConfigServiceError):
    def __init__(self):
        super().__init__(
            message="SMTP password is required for a new email configuration",
            error_code="SMTP_PASSWORD_REQUIRED",
            status_code=400,
        )


class SchoolAccessDeniedError(EmailConfigServiceError):
    def __init__(self):
        super().__init__(
            message="You can only manage email settings for your own school",
            error_code="SCHOOL_ACCESS_DENIED",
            status_code=403,
        )


class UndecryptableConfigError(EmailConfigServiceError):
    def __init__(self):
        super().__init__(
            message="Stored SMTP password could not be decrypted. Please save the configuration again.",
            error_code="EMAIL_CONFIG_UNREADABLE",
            status_code=500,
        )


def to_email_configuration(
    config: UserEmailConfig | SchoolEmailConfig,
    source: str,
) -> EmailConfiguration:
    """
    Build a sendable configuration from a stored one.

    Raises:
        EncryptionError: If the stored password cannot be decrypted
    """
    return EmailConfiguration(
        smtp_host=config.smtp_host,
        smtp_port=config.smtp_port,
        smtp_user=config.smtp_user,
        smtp_password=decrypt_password(config.smtp_password),
        smtp_secure=bool(config.smtp_secure),
        from_address=config.from_address or config.smtp_user,
        from_name=config.from_name or DEFAULT_FROM_NAME,
        source=source,
    )


async def get_email_configuration(
    db: AsyncSession,
    *,
    user_id: str,
    school_id: str | None,
) -> EmailConfiguration | None:
    """Resolve the SMTP account for a user (see module docstring for order)."""
    try:
        user_config = await repository.get_active_user_config(db, user_id)
        if user_config is not None:
            return to_email_configuration(user_config, "user")

        if school_id:
            school_config = await repository.get_active_school_config(db, school_id)
            if school_config is not None:
                return to_email_configuration(school_config, "school")
    except EncryptionError as e:
        logger.error(f"Could not decrypt email configuration for user {user_id}: {e}")
        return None

    return get_system_email_configuration()


async def get_email_status(
    db: AsyncSession,
    *,
    user_id: str,
    school_id: str | None,
) -> dict[str, bool | str]:
    user_config = await repository.get_active_user_config(db, user_id)
    school_config = (
        await repository.get_active_school_config(db, school_id) if school_id else None
    )

    has_personal_config = user_config is not None
    has_school_config = school_config is not None

    active_config = "none"
    if has_personal_config:
        active_config = "user"
    elif has_school_config:
        active_config = "school"

    return {
        "has_personal_config": has_personal_config,
        "has_school_config": has_school_config,
        "active_config": active_config,
        "status": "limited" if active_config == "none" else "active",
    }


def _config_fields(data: EmailConfigUpdate, require_password: bool) -> dict:
    fields = data.model_dump(exclude={"smtp_password"})
    if data.smtp_password:
        fields["smtp_password"] = encrypt_password(data.smtp_password)
    elif require_password:
        raise PasswordRequiredError()
    if fields.get("from_address") is not None:
        fields["from_address"] = str(fields["from_address"])
    return fields


def ensure_can_manage_school(user: CurrentUser, school_id: str) -> None:
    """
    Raises:
        SchoolAccessDeniedError: Unless platform admin or admin of that school
    """
    if not user.can_manage_school(school_id):
        logger.warning(f"User {user.id} denied access to school {school_id} email settings")
        raise SchoolAccessDeniedError()


# ============================================================================
# User configuration
# ============================================================================


async def save_user_config(
    db: AsyncSession,
    user_id: str,
    data: EmailConfigUpdate,
) -> UserEmailConfig:
    """Create or update the user's SMTP configuration."""
    existing = await repository.get_user_config(db, user_id)
    fields = _config_fields(data, require_password=existing is None)

    if existing is None:
        config = await repository.create_user_config(db, user_id=user_id, **fields)
        logger.info(f"Created email configuration for user {user_id}")
    else:
        # New settings have not been tested yet
        fields["test_status"] = None
        config = await repository.update_config(db, existing, **fields)
        logger.info(f"Updated email configuration for user {user_id}")
    return config


async def get_user_config(db: AsyncSession, user_id: str) -> UserEmailConfig:
    config = await repository.get_user_config(db, user_id)
    if config is None:
        raise EmailConfigNotFoundError()
    return config


async def delete_user_config(db: AsyncSession, user_id: str) -> None:
    config = await get_user_config(db, user_id)
    await repository.delete_config(db, config)
    logger.info(f"Deleted email configuration for user {user_id}")


# ============================================================================
# School configuration
# ============================================================================


async def save_school_config(
    db: AsyncSession,
    user: CurrentUser,
    school_id: str,
    data: EmailConfigUpdate,
) -> SchoolEmailConfig:
    """Create or update a school's SMTP configuration."""
    ensure_can_manage_school(user, school_id)

    existing = await repository.get_school_config(db, school_id)
    fields = _config_fields(data, require_password=existing is None)

    if existing is None:
        config = await repository.create_school_config(
            db, school_id=school_id, configured_by=str(user.id), **fields
        )
        logger.info(f"Created email configuration for school {school_id}")
    else:
        fields["test_status"] = None
        fields["configured_by"] = str(user.id)
        config = await repository.update_config(db, existing, **fields)
        logger.info(f"Updated email configuration for school {school_id}")
    return config


async def get_school_config(
    db: AsyncSession,
    user: CurrentUser,
    school_id: str,
) -> SchoolEmailConfig:
    ensure_can_manage_school(user, school_id)
    config = await repository.get_school_config(db, school_id)
    if config is None:
        raise EmailConfigNotFoundError("School email configuration not found")
    return config


async def delete_school_config(db: AsyncSession, user: CurrentUser, school_id: str) -> None:
    config = await get_school_config(db, user, school_id)
    await repository.delete_config(db, config)
    logger.info(f"Deleted email configuration for school {school_id}")


# ============================================================================
# Testing
# ============================================================================


async def send_configuration_test(config: EmailConfiguration, test_email: str) -> dict[str, bool | str]:
    """Send a test message through a configuration."""
    message = EmailMessage(
        to_emails=[test_email],
        subject=TEST_EMAIL_SUBJECT,
        html_content=render_configuration_test_email(config),
    )
    try:
        await deliver_email(config, message)
    except EmailDeliveryError as e:
        logger.warning(f"Email configuration test failed ({config.source}): {e}")
        return {"success": False, "message": str(e) or "Email test failed"}

    logger.info(f"Email configuration test succeeded ({config.source})")
    return {"success": True, "message": "Test email sent successfully"}


async def _send_stored_config_test(
    db: AsyncSession,
    stored: UserEmailConfig | SchoolEmailConfig,
    source: str,
    test_email: str,
) -> dict[str, bool | str]:
    try:
        config = to_email_configuration(stored, source)
    except EncryptionError as e:
        raise UndecryptableConfigError() from e

    result = await send_configuration_test(config, test_email)
    await repository.record_test_result(db, stored, bool(result["success"]))
    return result


async def send_user_config_test(db: AsyncSession, user_id: str, test_email: str) -> dict[str, bool | str]:
    stored = await get_user_config(db, user_id)
    return await _send_stored_config_test(db, stored, "user", test_email)


async def send_school_config_test(
    db: AsyncSession,
    user: CurrentUser,
    school_id: str,
    test_email: str,
) -> dict[str, bool | str]:
    stored = await get_school_config(db, user, school_id)
    return await _send_stored_config_test(db, stored, "school", test_email)
