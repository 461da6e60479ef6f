"""
Repository tests for concerns against a real SQLite database.

These tests cover:
- Newest-first listing of concerns and progress notes
- Saved interventions scoped to the teacher's own concerns
- Cascading removal of a teacher's concern data
"""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import func, select

from app.modules.concerns import repository
from app.modules.concerns.models import Concern, FollowUpQuestion, Intervention, ProgressNote
from app.modules.users.models import UserRole
from app.modules.users.repository import UserRepository

BASE_TIME = datetime(2025, 3, 1, 9, 0, tzinfo=UTC)


async def create_teacher(db, email: str):
    return await UserRepository.create(
        db,
        email=email,
        password_hash="hashed",
        first_name="Jamie",
        last_name="Rivera",
        role=UserRole.TEACHER,
    )


async def create_concern(db, teacher_id: str, student: str = "Alex", *, created_at: datetime = BASE_TIME):
    return await repository.create_concern(
        db,
        teacher_id=teacher_id,
        student_first_name=student,
        student_last_initial="M",
        grade="4",
        description=f"{student} has trouble staying on task.",
        created_at=created_at,
    )


async def create_intervention(db, concern_id: str, title: str = "Visual schedule"):
    return await repository.create_intervention(
        db,
        concern_id=concern_id,
        title=title,
        description="Post the day's plan where the student can see it.",
        steps=["Print the schedule", "Review it each morning"],
        timeline="2 weeks",
    )


async def count(db, model) -> int:
    return (await db.execute(select(func.count(model.id)))).scalar_one()


class TestListConcernsForTeacher:
    """Tests for list_concerns_for_teacher."""

    @pytest.mark.asyncio
    async def test_newest_first_and_own_only(self, db_session):
        teacher = await create_teacher(db_session, "jamie@lincoln.edu")
        other = await create_teacher(db_session, "sam@lincoln.edu")
        await create_concern(db_session, teacher.id, "Alex", created_at=BASE_TIME)
        await create_concern(db_session, teacher.id, "Blake", created_at=BASE_TIME + timedelta(days=2))
        await create_concern(db_session, teacher.id, "Casey", created_at=BASE_TIME + timedelta(days=1))
        await create_concern(db_session, other.id, "Drew")

        concerns = await repository.list_concerns_for_teacher(db_session, teacher.id)

        assert [c.student_first_name for c in concerns] == ["Blake", "Casey", "Alex"]


class TestProgressNotes:
    """Tests for list_progress_notes."""

    @pytest.mark.asyncio
    async def test_newest_first(self, db_session):
        teacher = await create_teacher(db_session, "jamie@lincoln.edu")
        concern = await create_concern(db_session, teacher.id)
        intervention = await create_intervention(db_session, concern.id)

        for offset, text in [(0, "Week one"), (14, "Week three"), (7, "Week two")]:
            note = await repository.create_progress_note(
                db_session, intervention_id=intervention.id, teacher_id=teacher.id, note=text
            )
            note.created_at = BASE_TIME + timedelta(days=offset)
        await db_session.flush()

        notes = await repository.list_progress_notes(db_session, intervention.id)

        assert [n.note for n in notes] == ["Week three", "Week two", "Week one"]


class TestListSavedInterventions:
    """Tests for list_saved_interventions."""

    @pytest.mark.asyncio
    async def test_only_saved_on_own_concerns(self, db_session):
        teacher = await create_teacher(db_session, "jamie@lincoln.edu")
        other = await create_teacher(db_session, "sam@lincoln.edu")
        own_concern = await create_concern(db_session, teacher.id)
        other_concern = await create_concern(db_session, other.id, "Drew")

        saved = await create_intervention(db_session, own_concern.id, "Visual schedule")
        await create_intervention(db_session, own_concern.id, "Seat change")
        other_saved = await create_intervention(db_session, other_concern.id, "Check-in chart")
        await repository.mark_intervention_saved(db_session, saved)
        await repository.mark_intervention_saved(db_session, other_saved)

        result = await repository.list_saved_interventions(db_session, teacher.id)

        assert [i.id for i in result] == [saved.id]
        assert result[0].saved is True
        assert result[0].saved_at is not None


class TestDeleteConcernsForTeachers:
    """Tests for delete_concerns_for_teachers."""

    @pytest.mark.asyncio
    async def test_removes_dependent_rows(self, db_session):
        teacher = await create_teacher(db_session, "jamie@lincoln.edu")
        other = await create_teacher(db_session, "sam@lincoln.edu")

        concern = await create_concern(db_session, teacher.id)
        intervention = await create_intervention(db_session, concern.id)
        await repository.create_progress_note(
            db_session, intervention_id=intervention.id, teacher_id=teacher.id, note="Going well"
        )
        await repository.create_follow_up(
            db_session, concern_id=concern.id, question="What if it continues?", response="Escalate."
        )

        kept = await create_concern(db_session, other.id, "Drew")
        kept_id, other_id = kept.id, other.id
        kept_intervention = await create_intervention(db_session, kept.id)
        await repository.create_progress_note(
            db_session, intervention_id=kept_intervention.id, teacher_id=other.id, note="Started"
        )

        deleted = await repository.delete_concerns_for_teachers(db_session, [teacher.id])

        assert deleted == 1
        db_session.expire_all()
        assert await count(db_session, Concern) == 1
        assert await count(db_session, Intervention) == 1
        assert await count(db_session, ProgressNote) == 1
        assert await count(db_session, FollowUpQuestion) == 0
        remaining = await repository.list_concerns_for_teacher(db_session, other_id)
        assert [c.id for c in remaining] == [kept_id]

    @pytest.mark.asyncio
    async def test_no_teachers(self, db_session):
        assert await repository.delete_concerns_for_teachers(db_session, []) == 0
