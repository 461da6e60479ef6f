"""
Users Service Layer

Monthly support request quota.

Every concern a teacher submits consumes one support request. The monthly
allowance is ``support_requests_limit`` (20 when unset) plus any
``additional_requests`` granted by an administrator. Usage is reset on the
first of every month by the users job.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.admin import repository as admin_repository
from app.modules.users.models import User
from app.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

MIN_GRANT = 1
MAX_GRANT = 1000


class UserServiceError(Exception):
    """Base exception for user service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class UserNotFoundError(UserServiceError):
    def __init__(self, user_id: str | UUID | None = None):
        message = f"User {user_id} not found" if user_id else "User not found"
        super().__init__(message=message, error_code="USER_NOT_FOUND", status_code=404)


class InvalidGrantAmountError(UserServiceError):
    def __init__(self):
        super().__init__(
            message=f"Amount must be between {MIN_GRANT} and {MAX_GRANT}",
            error_code="INVALID_GRANT_AMOUNT",
            status_code=400,
        )


@dataclass
class UsageStatus:
    """Snapshot of a user's monthly support request quota."""

    can_create: bool
    used: int
    limit: int
    remaining: int

    def as_dict(self) -> dict[str, int | bool]:
        return {
            "can_create": self.can_create,
            "used": self.used,
            "limit": self.limit,
            "remaining": self.remaining,
        }


def check_usage_limit(user: User) -> UsageStatus:
    """Compute whether the user may submit another concern this month."""
    used = user.support_requests_used or 0
    limit = user.total_requests_limit
    return UsageStatus(
        can_create=used < limit,
        used=used,
        limit=limit,
        remaining=max(0, limit - used),
    )


async def increment_support_requests(db: AsyncSession, user_id: str | UUID) -> bool:
    """Consume one support request. Returns False when the monthly limit is already used up."""
    consumed = await UserRepository.increment_support_requests(db, user_id)
    if consumed:
        logger.debug(f"Support request consumed by user {user_id}")
    return consumed


async def grant_additional_requests(
    db: AsyncSession,
    *,
    user_id: str | UUID,
    amount: int,
    admin_id: str | UUID,
) -> User:
    """
    Grant extra support requests on top of the user's monthly limit.

    Raises:
        InvalidGrantAmountError: If amount is outside 1..1000
        UserNotFoundError: If the user does not exist
    """
    if amount < MIN_GRANT or amount > MAX_GRANT:
        raise InvalidGrantAmountError()

    user = await UserRepository.get_by_id(db, user_id)
    if user is None:
        raise UserNotFoundError(user_id)

    previous_total = user.additional_requests or 0
    new_total = previous_total + amount
    user = await UserRepository.update_fields(db, user, additional_requests=new_total)

    await admin_repository.create_log(
        db,
        admin_id=admin_id,
        action="grant_additional_requests",
        target_user_id=str(user.id),
        details={
            "amount": amount,
            "previous_total": previous_total,
            "new_total": new_total,
        },
    )

    logger.info(f"Granted {amount} additional requests to user {user.id} (total {new_total})")
    return user


async def reset_monthly_usage(db: AsyncSession) -> int:
    """Zero every user's monthly usage. Returns the number of users reset."""
    count = await UserRepository.reset_support_requests(db)
    logger.info(f"Monthly support request usage reset for {count} user(s)")
    return count
