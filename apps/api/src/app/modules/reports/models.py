"""
Report Models

A generated PDF of a concern. The file lives under settings.reports_dir;
the row records where, who generated it and who it was shared with.
"""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from app.modules.shared import BaseModel, JSONType, UUIDType


class Report(BaseModel):
    __tablename__ = "reports"

    concern_id: Mapped[str] = mapped_column(
        UUIDType,
        ForeignKey("concerns.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_by: Mapped[str] = mapped_column(
        UUIDType,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    pdf_path: Mapped[str] = mapped_column(String(500), nullable=False)
    # [{"email": ..., "name": ..., "role": ..., "shared_at": ...}]
    shared_with: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    def __repr__(self) -> str:
        return f"<Report(id={self.id}, concern_id={self.concern_id})>"
