"""
Email Configuration Models

Personal (per-user) and school-wide SMTP accounts. SMTP passwords are stored
encrypted (see app.core.encryption).
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.shared import BaseModel, UUIDType


class SmtpSettingsMixin:
    """Columns shared by user and school SMTP configurations."""

    smtp_host: Mapped[str] = mapped_column(String(255), nullable=False)
    smtp_port: Mapped[int] = mapped_column(Integer, nullable=False, default=587)
    smtp_secure: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    smtp_user: Mapped[str] = mapped_column(String(255), nullable=False)
    # Encrypted, "ivhex:cipherhex"
    smtp_password: Mapped[str] = mapped_column(Text, nullable=False)
    from_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    from_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Result of the last configuration test: "success", "failed" or NULL
    test_status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    last_tested_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )


class UserEmailConfig(SmtpSettingsMixin, BaseModel):
    """A teacher's personal SMTP account."""

    __tablename__ = "user_email_configs"

    user_id: Mapped[str] = mapped_column(
        UUIDType,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )

    def __repr__(self) -> str:
        return f"<UserEmailConfig(user_id={self.user_id}, host={self.smtp_host})>"


class SchoolEmailConfig(SmtpSettingsMixin, BaseModel):
    """SMTP account shared by every teacher of a school."""

    __tablename__ = "school_email_configs"

    school_id: Mapped[str] = mapped_column(
        UUIDType,
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    configured_by: Mapped[str | None] = mapped_column(
        UUIDType,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<SchoolEmailConfig(school_id={self.school_id}, host={self.smtp_host})>"
