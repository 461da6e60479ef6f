"""
Concerns module - Student concerns, generated interventions, follow-up
questions and progress notes.
"""

from app.modules.concerns.models import (
    Concern,
    FollowUpQuestion,
    Intervention,
    ProgressNote,
    SeverityLevel,
    TaskType,
)

__all__ = [
    "Concern",
    "FollowUpQuestion",
    "Intervention",
    "ProgressNote",
    "SeverityLevel",
    "TaskType",
]
