"""
User Models

Teachers and administrators. Teachers carry a monthly support request quota:
every concern they submit consumes one request.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import ENUM
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.modules.shared import BaseModel, UUIDType

if TYPE_CHECKING:
    from app.modules.schools.models import School

DEFAULT_SUPPORT_REQUESTS_LIMIT = 20


class UserRole(str, Enum):
    """User roles in the system."""

    TEACHER = "teacher"
    SCHOOL_ADMIN = "school_admin"
    PLATFORM_ADMIN = "platform_admin"


class User(BaseModel):
    """
    User account.

    school_id is NULL for platform admins. School admins and teachers belong
    to exactly one school.
    """

    __tablename__ = "users"

    # ON DELETE SET NULL: users survive the removal of their school
    school_id: Mapped[str | None] = mapped_column(
        UUIDType,
        ForeignKey("schools.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Authentication
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )

    # Profile
    first_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    last_name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default="",
    )
    primary_grade: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
    )
    primary_subject: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )
    teacher_type: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
    )

    role: Mapped[UserRole] = mapped_column(
        ENUM(UserRole, name="user_role", create_type=True),
        nullable=False,
        default=UserRole.TEACHER,
    )

    # Account status
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    must_change_password: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    subscription_end_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    last_login_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # Monthly support request quota
    support_requests_used: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    support_requests_limit: Mapped[int] = mapped_column(
        Integer,
        default=DEFAULT_SUPPORT_REQUESTS_LIMIT,
        nullable=False,
    )
    additional_requests: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )

    school: Mapped["School | None"] = relationship(
        "School",
        back_populates="users",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role.value})>"

    @property
    def full_name(self) -> str:
        """Return user's full name."""
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def total_requests_limit(self) -> int:
        """Base monthly limit plus any requests granted by an administrator."""
        return (self.support_requests_limit or DEFAULT_SUPPORT_REQUESTS_LIMIT) + (
            self.additional_requests or 0
        )
