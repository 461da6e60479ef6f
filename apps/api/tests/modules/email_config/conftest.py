"""
Fixtures for email configuration tests.
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from app.core.auth import CurrentUser
from app.core.encryption import encrypt_password
from app.modules.email_config.models import SchoolEmailConfig, UserEmailConfig
from app.modules.email_config.schemas import EmailConfigUpdate

SCHOOL_ID = str(uuid4())


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()
    db.flush = AsyncMock()
    db.delete = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def school_admin():
    return CurrentUser(id=str(uuid4()), email="admin@school.edu", role="school_admin", school_id=SCHOOL_ID)


@pytest.fixture
def platform_admin():
    return CurrentUser(id=str(uuid4()), email="root@concern2care.com", role="platform_admin")


@pytest.fixture
def config_update():
    return EmailConfigUpdate(
        smtp_host="smtp.school.edu",
        smtp_port=465,
        smtp_secure=True,
        smtp_user="teacher@school.edu",
        smtp_password="app-password",
        from_address="teacher@school.edu",
        from_name="Ms. Rivera",
    )


def _stored(model, **overrides):
    config = MagicMock(spec=model)
    config.id = str(uuid4())
    config.smtp_host = "smtp.school.edu"
    config.smtp_port = 587
    config.smtp_secure = False
    config.smtp_user = "sender@school.edu"
    config.smtp_password = encrypt_password("stored-secret")
    config.from_address = None
    config.from_name = None
    config.is_active = True
    for name, value in overrides.items():
        setattr(config, name, value)
    return config


@pytest.fixture
def user_config():
    return _stored(UserEmailConfig, smtp_user="teacher@school.edu")


@pytest.fixture
def school_config():
    return _stored(SchoolEmailConfig, smtp_user="office@school.edu", from_name="Lincoln Office")
