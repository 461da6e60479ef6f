"""
Concerns Repository

Database operations for concerns, interventions, follow-up questions and
progress notes. No business rules here: ownership checks live in the service.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Concern, FollowUpQuestion, Intervention, ProgressNote

# ============================================================================
# Concerns
# ============================================================================


async def create_concern(db: AsyncSession, *, teacher_id: str, **fields: Any) -> Concern:
    concern = Concern(teacher_id=str(teacher_id), **fields)
    db.add(concern)
    await db.flush()
    await db.refresh(concern)
    return concern


async def get_concern(db: AsyncSession, concern_id: str) -> Concern | None:
    return await db.get(Concern, str(concern_id))


async def list_concerns_for_teacher(db: AsyncSession, teacher_id: str) -> list[Concern]:
    """A teacher's concerns, newest first."""
    result = await db.execute(
        select(Concern)
        .where(Concern.teacher_id == str(teacher_id))
        .order_by(Concern.created_at.desc())
    )
    return list(result.scalars().all())


async def set_disclaimer(db: AsyncSession, concern: Concern, disclaimer: str) -> None:
    concern.ai_disclaimer = disclaimer
    await db.flush()


async def delete_concerns_for_teachers(db: AsyncSession, teacher_ids: list[str]) -> int:
    """
    Delete the teachers' concerns with their interventions, questions and notes.

    Returns:
        Number of deleted concerns
    """
    if not teacher_ids:
        return 0

    concern_ids = select(Concern.id).where(Concern.teacher_id.in_(teacher_ids))
    intervention_ids = select(Intervention.id).where(Intervention.concern_id.in_(concern_ids))

    await db.execute(delete(ProgressNote).where(ProgressNote.intervention_id.in_(intervention_ids)))
    await db.execute(delete(Intervention).where(Intervention.concern_id.in_(concern_ids)))
    await db.execute(delete(FollowUpQuestion).where(FollowUpQuestion.concern_id.in_(concern_ids)))
    result = await db.execute(delete(Concern).where(Concern.teacher_id.in_(teacher_ids)))
    return result.rowcount or 0


async def count_concerns(
    db: AsyncSession,
    *,
    since: datetime | None = None,
    until: datetime | None = None,
    teacher_ids: list[str] | None = None,
) -> int:
    query = select(func.count(Concern.id))
    if since is not None:
        query = query.where(Concern.created_at >= since)
    if until is not None:
        query = query.where(Concern.created_at < until)
    if teacher_ids is not None:
        query = query.where(Concern.teacher_id.in_(teacher_ids))
    result = await db.execute(query)
    return result.scalar_one()


async def count_active_teachers(db: AsyncSession, *, since: datetime) -> int:
    """Distinct teachers who submitted a concern since the given time."""
    result = await db.execute(
        select(func.count(func.distinct(Concern.teacher_id))).where(Concern.created_at >= since)
    )
    return result.scalar_one()


# ============================================================================
# Interventions
# ============================================================================


async def create_intervention(
    db: AsyncSession,
    *,
    concern_id: str,
    title: str,
    description: str,
    steps: list[str],
    timeline: str | None,
) -> Intervention:
    intervention = Intervention(
        concern_id=str(concern_id),
        title=title,
        description=description,
        steps=steps,
        timeline=timeline,
        saved=False,
    )
    db.add(intervention)
    await db.flush()
    return intervention


async def get_intervention(db: AsyncSession, intervention_id: str) -> Intervention | None:
    return await db.get(Intervention, str(intervention_id))


async def mark_intervention_saved(db: AsyncSession, intervention: Intervention) -> Intervention:
    intervention.saved = True
    intervention.saved_at = datetime.now(UTC)
    await db.flush()
    await db.refresh(intervention)
    return intervention


async def list_saved_interventions(db: AsyncSession, teacher_id: str) -> list[Intervention]:
    result = await db.execute(
        select(Intervention)
        .join(Concern, Intervention.concern_id == Concern.id)
        .where(Concern.teacher_id == str(teacher_id), Intervention.saved == True)  # noqa: E712
        .order_by(Intervention.saved_at.desc())
    )
    return list(result.scalars().all())


async def count_interventions(db: AsyncSession) -> int:
    result = await db.execute(select(func.count(Intervention.id)))
    return result.scalar_one()


# ============================================================================
# Follow-up questions
# ============================================================================


async def create_follow_up(
    db: AsyncSession,
    *,
    concern_id: str,
    question: str,
    response: str,
) -> FollowUpQuestion:
    follow_up = FollowUpQuestion(concern_id=str(concern_id), question=question, response=response)
    db.add(follow_up)
    await db.flush()
    await db.refresh(follow_up)
    return follow_up


# ============================================================================
# Progress notes
# ============================================================================


async def create_progress_note(
    db: AsyncSession,
    *,
    intervention_id: str,
    teacher_id: str,
    note: str,
    outcome: str | None = None,
    next_steps: str | None = None,
) -> ProgressNote:
    progress_note = ProgressNote(
        intervention_id=str(intervention_id),
        teacher_id=str(teacher_id),
        note=note,
        outcome=outcome,
        next_steps=next_steps,
    )
    db.add(progress_note)
    await db.flush()
    await db.refresh(progress_note)
    return progress_note


async def get_progress_note(db: AsyncSession, note_id: str) -> ProgressNote | None:
    return await db.get(ProgressNote, str(note_id))


async def list_progress_notes(db: AsyncSession, intervention_id: str) -> list[ProgressNote]:
    """Notes for an intervention, newest first."""
    result = await db.execute(
        select(ProgressNote)
        .where(ProgressNote.intervention_id == str(intervention_id))
        .order_by(ProgressNote.created_at.desc())
    )
    return list(result.scalars().all())


async def update_progress_note(
    db: AsyncSession,
    progress_note: ProgressNote,
    **fields: Any,
) -> ProgressNote:
    for name, value in fields.items():
        setattr(progress_note, name, value)
    await db.flush()
    await db.refresh(progress_note)
    return progress_note


async def delete_progress_note(db: AsyncSession, progress_note: ProgressNote) -> None:
    await db.delete(progress_note)
    await db.flush()
