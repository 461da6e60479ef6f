"""
Fixtures for AI tests.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.modules.ai.schemas import FollowUpRequest, RecommendationRequest


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.execute = AsyncMock()
    db.flush = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def recommendation_request():
    return RecommendationRequest(
        student_first_name="Alex",
        student_last_initial="M",
        grade="4",
        teacher_position="Classroom Teacher",
        incident_date="2025-03-05",
        location="Classroom",
        concern_types=["attention", "work completion"],
        description="Alex rarely finishes independent work and is often off task.",
        severity_level="moderate",
        actions_taken=["seat change"],
        task_type="intervention",
    )


@pytest.fixture
def follow_up_request():
    return FollowUpRequest(
        original_recommendations="Use a visual timer and check-ins.",
        question="How often should I check in?",
        student_first_name="Alex",
        student_last_initial="M",
        grade="4",
        concern_types=["attention"],
    )
