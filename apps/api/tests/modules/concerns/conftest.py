"""
Fixtures for concerns tests.
"""

from datetime import UTC, date, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from app.core.auth import CurrentUser
from app.modules.concerns.models import (
    Concern,
    Intervention,
    ProgressNote,
    SeverityLevel,
    TaskType,
)
from app.modules.concerns.schemas import ConcernCreate
from app.modules.users.models import User, UserRole

TEACHER_ID = str(uuid4())


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.flush = AsyncMock()
    db.delete = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def current_teacher():
    return CurrentUser(
        id=TEACHER_ID,
        email="teacher@school.edu",
        role="teacher",
        name="Jane Doe",
        school_id=str(uuid4()),
    )


@pytest.fixture
def other_teacher():
    return CurrentUser(id=str(uuid4()), email="other@school.edu", role="teacher")


@pytest.fixture
def teacher_account():
    user = MagicMock(spec=User)
    user.id = TEACHER_ID
    user.email = "teacher@school.edu"
    user.role = UserRole.TEACHER
    user.support_requests_used = 3
    user.support_requests_limit = 20
    user.additional_requests = 0
    user.total_requests_limit = 20
    user.is_active = True
    return user


@pytest.fixture
def concern_create():
    return ConcernCreate(
        student_first_name="Alex",
        student_last_initial="m",
        grade="4",
        teacher_position="Classroom Teacher",
        incident_date=date(2025, 3, 5),
        location="Classroom",
        concern_types=["attention"],
        description="Alex rarely finishes independent work.",
        severity_level=SeverityLevel.MODERATE,
        actions_taken=["seat change"],
    )


@pytest.fixture
def sample_intervention():
    intervention = MagicMock(spec=Intervention)
    intervention.id = str(uuid4())
    intervention.concern_id = str(uuid4())
    intervention.title = "Structured Support Plan"
    intervention.description = "Use a visual timer."
    intervention.steps = ["Review recommendations", "Implement strategies", "Monitor progress"]
    intervention.timeline = "2-6 weeks"
    intervention.saved = False
    intervention.saved_at = None
    intervention.created_at = datetime.now(UTC)
    return intervention


@pytest.fixture
def sample_concern(sample_intervention):
    concern = MagicMock(spec=Concern)
    concern.id = sample_intervention.concern_id
    concern.teacher_id = TEACHER_ID
    concern.student_first_name = "Alex"
    concern.student_last_initial = "M"
    concern.grade = "4"
    concern.teacher_position = "Classroom Teacher"
    concern.incident_date = date(2025, 3, 5)
    concern.location = "Classroom"
    concern.concern_types = ["attention"]
    concern.other_concern_type = None
    concern.description = "Alex rarely finishes independent work."
    concern.severity_level = SeverityLevel.MODERATE
    concern.actions_taken = ["seat change"]
    concern.other_action_taken = None
    concern.task_type = TaskType.INTERVENTION
    concern.has_iep = False
    concern.has_disability = False
    concern.disability_type = None
    concern.is_eal_learner = False
    concern.eal_proficiency = None
    concern.is_gifted = False
    concern.is_struggling = False
    concern.other_needs = None
    concern.lesson_plan_content = None
    concern.language = None
    concern.ai_disclaimer = None
    concern.interventions = [sample_intervention]
    concern.follow_up_questions = []
    concern.created_at = datetime.now(UTC)
    return concern


@pytest.fixture
def sample_note(sample_intervention):
    note = MagicMock(spec=ProgressNote)
    note.id = str(uuid4())
    note.intervention_id = sample_intervention.id
    note.teacher_id = TEACHER_ID
    note.note = "Completed 3 of 5 tasks with the timer."
    note.outcome = "improving"
    note.next_steps = None
    note.created_at = datetime.now(UTC)
    return note
