"""
Fixtures for admin tests.
"""

from contextlib import asynccontextmanager
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from app.core.auth import CurrentUser
from app.modules.schools.models import School
from app.modules.users.models import User, UserRole

SCHOOL_ID = str(uuid4())


@asynccontextmanager
async def _savepoint():
    yield


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()
    db.flush = AsyncMock()
    db.add = MagicMock()
    db.begin_nested = MagicMock(side_effect=lambda: _savepoint())
    return db


@pytest.fixture
def platform_admin():
    return CurrentUser(id=str(uuid4()), email="root@concern2care.com", role="platform_admin")


@pytest.fixture
def school_admin():
    return CurrentUser(
        id=str(uuid4()),
        email="principal@lincoln.edu",
        role="school_admin",
        school_id=SCHOOL_ID,
    )


@pytest.fixture
def sample_school():
    school = MagicMock(spec=School)
    school.id = SCHOOL_ID
    school.name = "Lincoln Elementary"
    school.district = "Springfield USD"
    return school


def make_teacher(school_id: str | None = SCHOOL_ID) -> MagicMock:
    teacher = MagicMock(spec=User)
    teacher.id = str(uuid4())
    teacher.email = f"{teacher.id[:8]}@lincoln.edu"
    teacher.first_name = "Jamie"
    teacher.last_name = "Rivera"
    teacher.role = UserRole.TEACHER
    teacher.school_id = school_id
    teacher.is_active = True
    teacher.primary_grade = "4"
    teacher.primary_subject = None
    teacher.teacher_type = None
    teacher.support_requests_used = 3
    teacher.support_requests_limit = 20
    teacher.additional_requests = 0
    teacher.total_requests_limit = 20
    teacher.must_change_password = False
    teacher.last_login_at = None
    teacher.created_at = datetime(2025, 1, 10, tzinfo=UTC)
    return teacher


@pytest.fixture
def teacher():
    return make_teacher()


@pytest.fixture
def other_school_teacher():
    return make_teacher(school_id=str(uuid4()))
