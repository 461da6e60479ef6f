"""
Admin Models

Audit log of administrator actions and the AI provider API keys managed from
the admin panel.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.shared import BaseModel, JSONType, UUIDType

DEFAULT_API_KEY_MAX_USAGE = 10000


class AdminLog(BaseModel):
    """One administrator action (bulk upload, quota grant, deletion, ...)."""

    __tablename__ = "admin_logs"

    admin_id: Mapped[str | None] = mapped_column(
        UUIDType,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    action: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    target_user_id: Mapped[str | None] = mapped_column(
        UUIDType,
        nullable=True,
    )
    target_school_id: Mapped[str | None] = mapped_column(
        UUIDType,
        nullable=True,
    )
    details: Mapped[dict | None] = mapped_column(
        JSONType,
        nullable=True,
    )

    __table_args__ = (Index("ix_admin_logs_created_at", "created_at"),)

    def __repr__(self) -> str:
        return f"<AdminLog(id={self.id}, action={self.action})>"


class ApiKey(BaseModel):
    """AI provider API key stored for use when no key is set in the environment."""

    __tablename__ = "api_keys"

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
    )
    provider: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="deepseek",
        index=True,
    )
    api_key: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    usage_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    max_usage: Mapped[int] = mapped_column(
        Integer,
        default=DEFAULT_API_KEY_MAX_USAGE,
        nullable=False,
    )
    last_used_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    created_by: Mapped[str | None] = mapped_column(
        UUIDType,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<ApiKey(id={self.id}, name={self.name}, provider={self.provider})>"
