"""
User Repository

Database operations for user management.
"""

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.users.models import DEFAULT_SUPPORT_REQUESTS_LIMIT, User, UserRole

logger = logging.getLogger(__name__)

# Columns that may be changed through update_fields()
UPDATABLE_FIELDS = frozenset(
    {
        "first_name",
        "last_name",
        "school_id",
        "is_active",
        "must_change_password",
        "password_hash",
        "primary_grade",
        "primary_subject",
        "teacher_type",
        "subscription_end_date",
        "support_requests_limit",
        "additional_requests",
        "last_login_at",
    }
)


class UserRepository:
    """Repository for user database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        role: UserRole = UserRole.TEACHER,
        school_id: str | None = None,
        is_active: bool = True,
        must_change_password: bool = False,
        primary_grade: str | None = None,
        primary_subject: str | None = None,
        teacher_type: str | None = None,
        subscription_end_date: datetime | None = None,
        support_requests_limit: int = DEFAULT_SUPPORT_REQUESTS_LIMIT,
    ) -> User:
        """
        Create a new user record.

        Args:
            db: Database session
            email: User's email address (stored lower-cased)
            password_hash: Hashed password
            first_name: User's first name
            last_name: User's last name
            role: User's role
            school_id: School ID (None for platform admins)
            is_active: Whether user is active
            must_change_password: Whether user must change password on next login
            primary_grade: Grade the teacher mainly teaches (optional)
            primary_subject: Subject the teacher mainly teaches (optional)
            teacher_type: Classroom, specialist, ... (optional)
            subscription_end_date: When access expires (optional)
            support_requests_limit: Monthly support request allowance

        Returns:
            Created User instance
        """
        user = User(
            email=email.strip().lower(),
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            role=role,
            school_id=school_id,
            is_active=is_active,
            must_change_password=must_change_password,
            primary_grade=primary_grade,
            primary_subject=primary_subject,
            teacher_type=teacher_type,
            subscription_end_date=subscription_end_date,
            support_requests_used=0,
            support_requests_limit=support_requests_limit,
            additional_requests=0,
        )

        db.add(user)
        await db.flush()
        await db.refresh(user)

        logger.info(f"Created user: {user.id} ({user.role.value})")
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: str | UUID) -> User | None:
        """
        Get a user by ID.

        Args:
            db: Database session
            user_id: User UUID

        Returns:
            User instance or None if not found
        """
        result = await db.execute(select(User).where(User.id == str(user_id)))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        """
        Get a user by email address, ignoring case.

        Args:
            db: Database session
            email: Email address

        Returns:
            User instance or None if not found
        """
        result = await db.execute(
            select(User).where(func.lower(User.email) == email.strip().lower())
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def email_exists(db: AsyncSession, email: str) -> bool:
        """Check if an email address is already registered."""
        user = await UserRepository.get_by_email(db, email)
        return user is not None

    @staticmethod
    async def list_emails(db: AsyncSession) -> set[str]:
        """All registered email addresses, lower-cased."""
        result = await db.execute(select(func.lower(User.email)))
        return set(result.scalars().all())

    @staticmethod
    async def list_teachers(db: AsyncSession, school_id: str | None = None) -> list[User]:
        """
        List teachers, newest first.

        Args:
            db: Database session
            school_id: Restrict to one school (None lists every school)
        """
        query = select(User).where(User.role == UserRole.TEACHER)
        if school_id is not None:
            query = query.where(User.school_id == str(school_id))
        result = await db.execute(query.order_by(User.created_at.desc()))
        return list(result.scalars().all())

    @staticmethod
    async def list_by_ids(db: AsyncSession, user_ids: list[str]) -> list[User]:
        if not user_ids:
            return []
        result = await db.execute(select(User).where(User.id.in_([str(u) for u in user_ids])))
        return list(result.scalars().all())

    @staticmethod
    async def count(db: AsyncSession) -> int:
        result = await db.execute(select(func.count(User.id)))
        return result.scalar_one()

    @staticmethod
    async def update_fields(db: AsyncSession, user: User, **fields: Any) -> User:
        """
        Update user columns.

        Raises:
            ValueError: If a field is not updatable
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update user fields: {', '.join(sorted(unknown))}")

        for key, value in fields.items():
            setattr(user, key, value)

        await db.flush()
        await db.refresh(user)
        logger.info(f"Updated user {user.id}: {', '.join(sorted(fields))}")
        return user

    @staticmethod
    async def increment_support_requests(db: AsyncSession, user_id: str | UUID) -> bool:
        """
        Consume one support request if the user still has one left.

        The limit check and the increment are a single UPDATE statement.

        Returns:
            True if a request was consumed, False if the limit is reached
        """
        total_limit = func.coalesce(
            User.support_requests_limit, DEFAULT_SUPPORT_REQUESTS_LIMIT
        ) + func.coalesce(User.additional_requests, 0)
        result = await db.execute(
            update(User)
            .where(User.id == str(user_id), User.support_requests_used < total_limit)
            .values(support_requests_used=User.support_requests_used + 1)
            .execution_options(synchronize_session=False)
        )
        return bool(result.rowcount)

    @staticmethod
    async def reset_support_requests(db: AsyncSession) -> int:
        """
        Set support_requests_used back to zero for every user.

        Returns:
            Number of users whose usage was reset
        """
        result = await db.execute(
            update(User).where(User.support_requests_used != 0).values(support_requests_used=0)
        )
        return result.rowcount or 0

    @staticmethod
    async def delete_many(db: AsyncSession, user_ids: list[str]) -> int:
        """
        Delete users by ID.

        Returns:
            Number of deleted users
        """
        if not user_ids:
            return 0
        result = await db.execute(delete(User).where(User.id.in_([str(u) for u in user_ids])))
        count = result.rowcount or 0
        logger.info(f"Deleted {count} user(s)")
        return count
