"""
Fixtures for reports tests.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from app.core.auth import CurrentUser
from app.modules.concerns.models import Concern, FollowUpQuestion, Intervention, SeverityLevel
from app.modules.reports.models import Report
from app.modules.reports.pdf import ConcernReportData, FollowUpSection, InterventionSection

TEACHER_ID = str(uuid4())

RECOMMENDATIONS = """# Assessment Summary

Alex needs **structured** support during independent work.

### **Immediate Interventions**

* **Strategy: Visual Timer**
* **Implementation:**
Step 1: Introduce the timer
- **Step 2:** Model the routine
1. **Check in** every ten minutes
* **Materials:** Timer, checklist
* **Weekly Review**
**Progress Monitoring**
  - Track completed tasks
- Praise effort
• Keep routines consistent
**Timeline:** 2-6 weeks

| Week | Focus | Measure |
|------|-------|---------|
| 1 | **Setup** | Baseline |
| 2 | Practice | Tasks done |

---
Continue monitoring and adjust as needed.
"""


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()
    db.flush = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def current_teacher():
    return CurrentUser(
        id=TEACHER_ID,
        email="teacher@school.edu",
        role="teacher",
        school_id=str(uuid4()),
    )


@pytest.fixture
def other_teacher():
    return CurrentUser(id=str(uuid4()), email="other@school.edu", role="teacher")


@pytest.fixture
def school_admin():
    return CurrentUser(id=str(uuid4()), email="admin@school.edu", role="school_admin")


@pytest.fixture
def report_data():
    return ConcernReportData(
        student_first_name="Alex",
        student_last_initial="M",
        grade="4",
        concern_types=["attention", "work completion"],
        severity_level="moderate",
        description="Alex rarely finishes independent work and is often off task. " * 5,
        documented_at=datetime(2025, 3, 5, tzinfo=UTC),
        interventions=[
            InterventionSection(
                title="Structured Support Plan",
                description=RECOMMENDATIONS,
                steps=["Review recommendations", "Implement strategies", "Monitor progress"],
                timeline="2-6 weeks",
            )
        ],
        follow_ups=[
            FollowUpSection(
                question="How often should I check in?",
                response="## Direct Answer\n\n- Every **ten** minutes at first",
            )
        ],
    )


@pytest.fixture
def sample_concern():
    intervention = MagicMock(spec=Intervention)
    intervention.title = "Structured Support Plan"
    intervention.description = RECOMMENDATIONS
    intervention.steps = ["Review recommendations"]
    intervention.timeline = "2-6 weeks"

    question = MagicMock(spec=FollowUpQuestion)
    question.question = "How often?"
    question.response = "Every ten minutes."

    concern = MagicMock(spec=Concern)
    concern.id = str(uuid4())
    concern.teacher_id = TEACHER_ID
    concern.student_first_name = "Alex"
    concern.student_last_initial = "M"
    concern.grade = "4"
    concern.concern_types = ["attention"]
    concern.severity_level = SeverityLevel.MODERATE
    concern.description = "Off task."
    concern.created_at = datetime(2025, 3, 5, tzinfo=UTC)
    concern.interventions = [intervention]
    concern.follow_up_questions = [question]
    return concern


@pytest.fixture
def sample_report(tmp_path, sample_concern):
    path = tmp_path / "concern.pdf"
    path.write_bytes(b"%PDF-1.4 test")

    report = MagicMock(spec=Report)
    report.id = str(uuid4())
    report.concern_id = sample_concern.id
    report.created_by = TEACHER_ID
    report.pdf_path = str(path)
    report.shared_with = []
    return report
