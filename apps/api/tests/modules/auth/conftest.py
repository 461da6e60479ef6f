"""
Fixtures for auth tests.
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from app.modules.auth.service import PasswordResetTokenStore
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
def token_store():
    """A fresh password reset token store."""
    return PasswordResetTokenStore()


@pytest.fixture
def sample_user():
    """An active teacher account."""
    user = MagicMock(spec=User)
    user.id = str(uuid4())
    user.email = "teacher@school.edu"
    user.first_name = "Jane"
    user.last_name = "Doe"
    user.full_name = "Jane Doe"
    user.role = UserRole.TEACHER
    user.school_id = str(uuid4())
    user.is_active = True
    user.password_hash = "$2b$04$hash"
    return user
