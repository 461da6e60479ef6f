"""
Concerns Schemas

Pydantic schemas for request validation and response serialization.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.modules.concerns.models import SeverityLevel, TaskType
from app.modules.users.schemas import UsageStatusResponse


class ConcernCreate(BaseModel):
    """Request body for POST /concerns."""

    student_first_name: str = Field(..., min_length=1, max_length=100)
    student_last_initial: str = Field(..., min_length=1, max_length=1)
    grade: str = Field(..., min_length=1, max_length=50)
    teacher_position: str | None = Field(None, max_length=100)
    incident_date: date | None = None
    location: str | None = Field(None, max_length=200)
    concern_types: list[str] = Field(default_factory=list)
    other_concern_type: str | None = Field(None, max_length=200)
    description: str = Field(..., min_length=1)
    severity_level: SeverityLevel = SeverityLevel.MODERATE
    actions_taken: list[str] = Field(default_factory=list)
    other_action_taken: str | None = Field(None, max_length=200)
    task_type: TaskType = TaskType.INTERVENTION

    has_iep: bool = False
    has_disability: bool = False
    disability_type: str | None = Field(None, max_length=200)
    is_eal_learner: bool = False
    eal_proficiency: str | None = Field(None, max_length=50)
    is_gifted: bool = False
    is_struggling: bool = False
    other_needs: str | None = None

    lesson_plan_content: str | None = None
    language: str | None = Field(None, max_length=50)

    @model_validator(mode="after")
    def validate_concern(self) -> "ConcernCreate":
        self.student_last_initial = self.student_last_initial.upper()
        if not self.student_first_name.strip():
            raise ValueError("student_first_name cannot be blank")
        if not self.description.strip():
            raise ValueError("description cannot be blank")
        return self


class InterventionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    concern_id: str
    title: str
    description: str
    steps: list[str]
    timeline: str | None = None
    saved: bool
    saved_at: datetime | None = None
    created_at: datetime


class FollowUpQuestionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    concern_id: str
    question: str
    response: str
    created_at: datetime


class ConcernSummary(BaseModel):
    """Concern as listed on the dashboard."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    student_first_name: str
    student_last_initial: str
    grade: str
    concern_types: list[str]
    severity_level: SeverityLevel
    task_type: TaskType
    incident_date: date | None = None
    created_at: datetime


class ConcernDetail(ConcernSummary):
    teacher_id: str
    teacher_position: str | None = None
    location: str | None = None
    other_concern_type: str | None = None
    description: str
    actions_taken: list[str]
    other_action_taken: str | None = None
    has_iep: bool
    has_disability: bool
    disability_type: str | None = None
    is_eal_learner: bool
    eal_proficiency: str | None = None
    is_gifted: bool
    is_struggling: bool
    other_needs: str | None = None
    language: str | None = None
    ai_disclaimer: str | None = None
    interventions: list[InterventionResponse] = Field(default_factory=list)
    follow_up_questions: list[FollowUpQuestionResponse] = Field(default_factory=list)


class ConcernCreateResponse(BaseModel):
    """Response after submitting a concern."""

    concern: ConcernDetail
    usage: UsageStatusResponse


class FollowUpQuestionCreate(BaseModel):
    # Blank questions are rejected by the service with a 400
    question: str = Field(..., max_length=5000)


class ProgressNoteCreate(BaseModel):
    note: str = Field(..., min_length=1)
    outcome: str | None = Field(None, max_length=100)
    next_steps: str | None = None


class ProgressNoteUpdate(BaseModel):
    note: str | None = Field(None, min_length=1)
    outcome: str | None = Field(None, max_length=100)
    next_steps: str | None = None


class ProgressNoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    intervention_id: str
    teacher_id: str
    note: str
    outcome: str | None = None
    next_steps: str | None = None
    created_at: datetime
    updated_at: datetime
