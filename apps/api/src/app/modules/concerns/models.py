"""
Concern Models

A concern is a teacher's write-up of a student issue. Each concern gets AI
generated interventions; teachers can ask follow-up questions about them and
keep progress notes on the interventions they put into practice.
"""

from datetime import date, datetime
from enum import Enum

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import ENUM
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.modules.shared import BaseModel, JSONType, UUIDType


class SeverityLevel(str, Enum):
    MILD = "mild"
    MODERATE = "moderate"
    URGENT = "urgent"


class TaskType(str, Enum):
    """What the teacher is asking the AI for."""

    INTERVENTION = "intervention"
    DIFFERENTIATION = "differentiation"
    CLASSROOM_MANAGEMENT = "classroom_management"


class Concern(BaseModel):
    """A documented student concern."""

    __tablename__ = "concerns"

    teacher_id: Mapped[str] = mapped_column(
        UUIDType,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Student
    student_first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    student_last_initial: Mapped[str] = mapped_column(String(1), nullable=False)
    grade: Mapped[str] = mapped_column(String(50), nullable=False)

    # Incident
    teacher_position: Mapped[str | None] = mapped_column(String(100), nullable=True)
    incident_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    concern_types: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    other_concern_type: Mapped[str | None] = mapped_column(String(200), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    severity_level: Mapped[SeverityLevel] = mapped_column(
        ENUM(SeverityLevel, name="severity_level", create_type=True),
        nullable=False,
        default=SeverityLevel.MODERATE,
    )
    actions_taken: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    other_action_taken: Mapped[str | None] = mapped_column(String(200), nullable=True)
    task_type: Mapped[TaskType] = mapped_column(
        ENUM(TaskType, name="concern_task_type", create_type=True),
        nullable=False,
        default=TaskType.INTERVENTION,
    )

    # Differentiation
    has_iep: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_disability: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    disability_type: Mapped[str | None] = mapped_column(String(200), nullable=True)
    is_eal_learner: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    eal_proficiency: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_gifted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_struggling: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    other_needs: Mapped[str | None] = mapped_column(Text, nullable=True)

    lesson_plan_content: Mapped[str | None] = mapped_column(Text, nullable=True)
    language: Mapped[str | None] = mapped_column(String(50), nullable=True)
    ai_disclaimer: Mapped[str | None] = mapped_column(Text, nullable=True)

    interventions: Mapped[list["Intervention"]] = relationship(
        "Intervention",
        back_populates="concern",
        cascade="all, delete-orphan",
        order_by="Intervention.created_at",
        lazy="selectin",
    )
    follow_up_questions: Mapped[list["FollowUpQuestion"]] = relationship(
        "FollowUpQuestion",
        back_populates="concern",
        cascade="all, delete-orphan",
        order_by="FollowUpQuestion.created_at",
        lazy="selectin",
    )

    __table_args__ = (Index("ix_concerns_teacher_created", "teacher_id", "created_at"),)

    def __repr__(self) -> str:
        return f"<Concern(id={self.id}, student={self.student_first_name} {self.student_last_initial}.)>"


class Intervention(BaseModel):
    """A suggested strategy for a concern."""

    __tablename__ = "interventions"

    concern_id: Mapped[str] = mapped_column(
        UUIDType,
        ForeignKey("concerns.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    steps: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    timeline: Mapped[str | None] = mapped_column(String(100), nullable=True)
    saved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    saved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    concern: Mapped["Concern"] = relationship("Concern", back_populates="interventions")

    def __repr__(self) -> str:
        return f"<Intervention(id={self.id}, title={self.title})>"


class FollowUpQuestion(BaseModel):
    """A question about a concern's recommendations and the AI's answer."""

    __tablename__ = "follow_up_questions"

    concern_id: Mapped[str] = mapped_column(
        UUIDType,
        ForeignKey("concerns.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    question: Mapped[str] = mapped_column(Text, nullable=False)
    response: Mapped[str] = mapped_column(Text, nullable=False)

    concern: Mapped["Concern"] = relationship("Concern", back_populates="follow_up_questions")


class ProgressNote(BaseModel):
    """A teacher's note on how an intervention is going."""

    __tablename__ = "progress_notes"

    intervention_id: Mapped[str] = mapped_column(
        UUIDType,
        ForeignKey("interventions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    teacher_id: Mapped[str] = mapped_column(
        UUIDType,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    note: Mapped[str] = mapped_column(Text, nullable=False)
    outcome: Mapped[str | None] = mapped_column(String(100), nullable=True)
    next_steps: Mapped[str | None] = mapped_column(Text, nullable=True)
