"""
School Models

A school groups teachers, owns an optional shared SMTP configuration and
sets the default monthly support request allowance for new teachers.
"""

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.modules.shared import BaseModel

if TYPE_CHECKING:
    from app.modules.users.models import User


class School(BaseModel):
    """School record."""

    __tablename__ = "schools"

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        index=True,
    )
    district: Mapped[str | None] = mapped_column(
        String(200),
        nullable=True,
    )
    address: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    contact_email: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    # Licensing
    max_teachers: Mapped[int] = mapped_column(
        Integer,
        default=50,
        nullable=False,
    )
    default_requests_per_teacher: Mapped[int] = mapped_column(
        Integer,
        default=20,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    users: Mapped[list["User"]] = relationship(
        "User",
        back_populates="school",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<School(id={self.id}, name={self.name})>"
