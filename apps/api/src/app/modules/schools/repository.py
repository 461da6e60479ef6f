"""
School Repository

Database operations for school management.
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.schools.models import School

logger = logging.getLogger(__name__)

# Columns that may be changed through update()
UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "district",
        "address",
        "contact_email",
        "max_teachers",
        "default_requests_per_teacher",
        "is_active",
    }
)


class SchoolRepository:
    """Repository for school database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        name: str,
        district: str | None = None,
        address: str | None = None,
        contact_email: str | None = None,
        max_teachers: int = 50,
        default_requests_per_teacher: int = 20,
    ) -> School:
        """
        Create a new school record.

        Args:
            db: Database session
            name: School name
            district: School district (optional)
            address: Street address (optional)
            contact_email: Administrative contact (optional)
            max_teachers: Licensed teacher seats
            default_requests_per_teacher: Monthly support requests for new teachers

        Returns:
            Created School instance
        """
        school = School(
            name=name,
            district=district,
            address=address,
            contact_email=contact_email,
            max_teachers=max_teachers,
            default_requests_per_teacher=default_requests_per_teacher,
            is_active=True,
        )

        db.add(school)
        await db.flush()
        await db.refresh(school)

        logger.info(f"Created school: {school.id} - {school.name}")
        return school

    @staticmethod
    async def get_by_id(db: AsyncSession, school_id: str | UUID) -> School | None:
        result = await db.execute(select(School).where(School.id == str(school_id)))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_name(db: AsyncSession, name: str) -> School | None:
        """Get a school by name (case-insensitive, surrounding whitespace ignored)."""
        result = await db.execute(
            select(School).where(func.lower(School.name) == name.strip().lower()).limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def list_all(db: AsyncSession) -> list[School]:
        result = await db.execute(select(School).order_by(School.name))
        return list(result.scalars().all())

    @staticmethod
    async def count(db: AsyncSession) -> int:
        result = await db.execute(select(func.count(School.id)))
        return result.scalar_one()

    @staticmethod
    async def update(db: AsyncSession, school: School, **fields: Any) -> School:
        """
        Update school fields.

        Raises:
            ValueError: If a field is not updatable
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update school fields: {', '.join(sorted(unknown))}")

        for key, value in fields.items():
            setattr(school, key, value)

        await db.flush()
        await db.refresh(school)
        logger.info(f"Updated school {school.id}: {', '.join(sorted(fields))}")
        return school

    @staticmethod
    async def delete(db: AsyncSession, school: School) -> None:
        await db.delete(school)
        await db.flush()
        logger.info(f"Deleted school: {school.id}")
