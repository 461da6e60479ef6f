"""AI request and result types."""

from enum import Enum

from pydantic import BaseModel, Field


class RecommendationSource(str, Enum):
    """Where generated text came from."""

    AI = "ai"
    MOCK = "mock"


class RecommendationRequest(BaseModel):
    """Everything the AI needs to know about a concern."""

    student_first_name: str
    student_last_initial: str
    grade: str
    teacher_position: str = ""
    incident_date: str = ""
    location: str = ""
    concern_types: list[str] = Field(default_factory=list)
    other_concern_type: str | None = None
    description: str = ""
    severity_level: str = "moderate"
    actions_taken: list[str] = Field(default_factory=list)
    other_action_taken: str | None = None

    # Differentiation
    has_iep: bool = False
    has_disability: bool = False
    disability_type: str | None = None
    is_eal_learner: bool = False
    eal_proficiency: str | None = None
    is_gifted: bool = False
    is_struggling: bool = False
    other_needs: str | None = None

    lesson_plan_content: str | None = None
    task_type: str = "intervention"
    language: str | None = None


class RecommendationResult(BaseModel):
    recommendations: str
    disclaimer: str
    source: RecommendationSource


class FollowUpRequest(BaseModel):
    """A teacher's follow-up question about earlier recommendations."""

    original_recommendations: str
    question: str
    student_first_name: str
    student_last_initial: str
    grade: str
    concern_types: list[str] = Field(default_factory=list)
    severity_level: str = "moderate"
    language: str | None = None


class FollowUpResult(BaseModel):
    assistance: str
    disclaimer: str = ""
    source: RecommendationSource


class InterventionDraft(BaseModel):
    """An intervention ready to be stored against a concern."""

    title: str
    description: str
    steps: list[str]
    timeline: str
