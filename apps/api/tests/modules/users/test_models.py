"""
Unit tests for User model helpers.
"""

from app.modules.schools.models import School  # noqa: F401 - needed for relationship resolution
from app.modules.users.models import User, UserRole


class TestUserProperties:
    """Tests for computed properties on User."""

    def test_full_name(self):
        user = User(first_name="Jane", last_name="Doe", role=UserRole.TEACHER)
        assert user.full_name == "Jane Doe"

    def test_full_name_without_last_name(self):
        user = User(first_name="Jane", last_name="", role=UserRole.TEACHER)
        assert user.full_name == "Jane"

    def test_total_requests_limit_adds_granted_requests(self):
        user = User(support_requests_limit=20, additional_requests=5)
        assert user.total_requests_limit == 25

    def test_total_requests_limit_defaults(self):
        user = User(support_requests_limit=None, additional_requests=None)
        assert user.total_requests_limit == 20
