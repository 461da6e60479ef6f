"""
Fixtures for users tests.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from app.modules.users.models import User, UserRole


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.flush = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def sample_teacher():
    """A teacher halfway through the monthly allowance."""
    user = MagicMock(spec=User)
    user.id = str(uuid4())
    user.email = "teacher@school.edu"
    user.first_name = "Jane"
    user.last_name = "Doe"
    user.role = UserRole.TEACHER
    user.school_id = str(uuid4())
    user.is_active = True
    user.support_requests_used = 10
    user.support_requests_limit = 20
    user.additional_requests = 0
    user.total_requests_limit = 20
    user.created_at = datetime.now(UTC)
    return user
