"""
Shared model base for all feature modules.
"""

import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, String, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite for local runs)
JSONType = JSON().with_variant(JSONB(), "postgresql")

# Native UUID on PostgreSQL, the 36-character text form elsewhere
UUIDType = String(36).with_variant(UUID(as_uuid=False), "postgresql")


class BaseModel(Base):
    """Abstract base adding a UUID primary key and audit timestamps."""

    __abstract__ = True

    id: Mapped[str] = mapped_column(
        UUIDType,
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


__all__ = ["BaseModel", "JSONType", "UUIDType"]
