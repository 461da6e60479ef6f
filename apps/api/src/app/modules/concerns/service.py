"""
Concerns Service Layer

Business logic for documenting student concerns.

Submitting a concern consumes one monthly support request. The request is
reserved first (the increment is conditional on the limit), then the
concern is stored and its recommendations are stored as interventions.
Teachers only ever see their own concerns; every lookup by id checks
ownership.
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser
from app.modules.ai import service as ai_service
from app.modules.ai.schemas import FollowUpRequest, RecommendationRequest
from app.modules.concerns import repository
from app.modules.concerns.models import Concern, FollowUpQuestion, Intervention, ProgressNote
from app.modules.concerns.schemas import ConcernCreate, ProgressNoteCreate, ProgressNoteUpdate
from app.modules.users import service as users_service
from app.modules.users.repository import UserRepository
from app.modules.users.service import UsageStatus

logger = logging.getLogger(__name__)


# ============================================================================
# Exceptions
# ============================================================================


class ConcernServiceError(Exception):
    """Base exception for concern service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class ConcernNotFoundError(ConcernServiceError):
    def __init__(self, concern_id: str | None = None):
        message = f"Concern {concern_id} not found" if concern_id else "Concern not found"
        super().__init__(message=message, error_code="CONCERN_NOT_FOUND", status_code=404)


class NotConcernOwnerError(ConcernServiceError):
    def __init__(self):
        super().__init__(
            message="You do not have access to this concern",
            error_code="NOT_CONCERN_OWNER",
            status_code=403,
        )


class InterventionNotFoundError(ConcernServiceError):
    def __init__(self, intervention_id: str | None = None):
        message = (
            f"Intervention {intervention_id} not found" if intervention_id else "Intervention not found"
        )
        super().__init__(message=message, error_code="INTERVENTION_NOT_FOUND", status_code=404)


class ProgressNoteNotFoundError(ConcernServiceError):
    def __init__(self, note_id: str | None = None):
        message = f"Progress note {note_id} not found" if note_id else "Progress note not found"
        super().__init__(message=message, error_code="PROGRESS_NOTE_NOT_FOUND", status_code=404)


class NotNoteAuthorError(ConcernServiceError):
    def __init__(self):
        super().__init__(
            message="Only the author can change this progress note",
            error_code="NOT_NOTE_AUTHOR",
            status_code=403,
        )


class SupportLimitReachedError(ConcernServiceError):
    def __init__(self, usage: UsageStatus | None = None):
        self.usage = usage
        super().__init__(
            message="Monthly support request limit reached",
            error_code="SUPPORT_LIMIT_REACHED",
            status_code=429,
        )


class EmptyQuestionError(ConcernServiceError):
    def __init__(self):
        super().__init__(
            message="Question cannot be empty",
            error_code="EMPTY_QUESTION",
            status_code=400,
        )


class TeacherNotFoundError(ConcernServiceError):
    def __init__(self):
        super().__init__(message="User not found", error_code="USER_NOT_FOUND", status_code=404)


class AccountInactiveError(ConcernServiceError):
    def __init__(self):
        super().__init__(
            message="Account is inactive",
            error_code="ACCOUNT_INACTIVE",
            status_code=403,
        )


# ============================================================================
# Helpers
# ============================================================================


def _ensure_owner(concern: Concern, user: CurrentUser) -> None:
    if str(concern.teacher_id) != str(user.id):
        raise NotConcernOwnerError()


def _recommendation_request(concern: Concern) -> RecommendationRequest:
    return RecommendationRequest(
        student_first_name=concern.student_first_name,
        student_last_initial=concern.student_last_initial,
        grade=concern.grade,
        teacher_position=concern.teacher_position or "",
        incident_date=concern.incident_date.isoformat() if concern.incident_date else "",
        location=concern.location or "",
        concern_types=list(concern.concern_types or []),
        other_concern_type=concern.other_concern_type,
        description=concern.description,
        severity_level=concern.severity_level.value,
        actions_taken=list(concern.actions_taken or []),
        other_action_taken=concern.other_action_taken,
        has_iep=concern.has_iep,
        has_disability=concern.has_disability,
        disability_type=concern.disability_type,
        is_eal_learner=concern.is_eal_learner,
        eal_proficiency=concern.eal_proficiency,
        is_gifted=concern.is_gifted,
        is_struggling=concern.is_struggling,
        other_needs=concern.other_needs,
        lesson_plan_content=concern.lesson_plan_content,
        task_type=concern.task_type.value,
        language=concern.language,
    )


def _original_recommendations(concern: Concern) -> str:
    return "\n\n".join(i.description for i in concern.interventions)


# ============================================================================
# Concerns
# ============================================================================


async def create_concern(
    db: AsyncSession,
    user: CurrentUser,
    data: ConcernCreate,
) -> tuple[Concern, UsageStatus]:
    """
    Document a concern and generate interventions for it.

    Returns:
        The stored concern and the teacher's usage after submission

    Raises:
        AccountInactiveError: If the account has been deactivated
        SupportLimitReachedError: If the monthly quota is used up
    """
    teacher = await UserRepository.get_by_id(db, user.id)
    if teacher is None:
        raise TeacherNotFoundError()
    if not teacher.is_active:
        raise AccountInactiveError()

    # Reserve the request before the AI call; the increment only succeeds
    # while usage is below the limit
    if not await users_service.increment_support_requests(db, teacher.id):
        await db.refresh(teacher)
        usage = users_service.check_usage_limit(teacher)
        logger.info(f"Teacher {teacher.id} hit the support request limit ({usage.used}/{usage.limit})")
        raise SupportLimitReachedError(usage)

    concern = await repository.create_concern(
        db,
        teacher_id=str(teacher.id),
        **data.model_dump(),
    )

    result = await ai_service.generate_recommendations(db, _recommendation_request(concern))
    for draft in ai_service.build_interventions(result):
        await repository.create_intervention(
            db,
            concern_id=concern.id,
            title=draft.title,
            description=draft.description,
            steps=draft.steps,
            timeline=draft.timeline,
        )
    await repository.set_disclaimer(db, concern, result.disclaimer)

    await db.refresh(teacher)
    await db.refresh(concern)

    logger.info(
        f"Concern {concern.id} created by teacher {teacher.id} "
        f"({concern.task_type.value}, {result.source.value} recommendations)"
    )
    return concern, users_service.check_usage_limit(teacher)


async def list_concerns(db: AsyncSession, user: CurrentUser) -> list[Concern]:
    return await repository.list_concerns_for_teacher(db, str(user.id))


async def get_concern(db: AsyncSession, user: CurrentUser, concern_id: str | UUID) -> Concern:
    """
    Raises:
        ConcernNotFoundError: If the concern does not exist
        NotConcernOwnerError: If it belongs to another teacher
    """
    concern = await repository.get_concern(db, str(concern_id))
    if concern is None:
        raise ConcernNotFoundError(str(concern_id))
    _ensure_owner(concern, user)
    return concern


async def ask_follow_up(
    db: AsyncSession,
    user: CurrentUser,
    concern_id: str | UUID,
    question: str,
) -> FollowUpQuestion:
    """Ask a follow-up question about a concern's recommendations."""
    if not question or not question.strip():
        raise EmptyQuestionError()

    concern = await get_concern(db, user, concern_id)
    question = question.strip()

    result = await ai_service.follow_up_assistance(
        db,
        FollowUpRequest(
            original_recommendations=_original_recommendations(concern),
            question=question,
            student_first_name=concern.student_first_name,
            student_last_initial=concern.student_last_initial,
            grade=concern.grade,
            concern_types=list(concern.concern_types or []),
            severity_level=concern.severity_level.value,
            language=concern.language,
        ),
    )

    follow_up = await repository.create_follow_up(
        db,
        concern_id=concern.id,
        question=question,
        response=result.assistance,
    )
    logger.info(f"Follow-up question answered for concern {concern.id} ({result.source.value})")
    return follow_up


# ============================================================================
# Interventions
# ============================================================================


async def _get_owned_intervention(
    db: AsyncSession,
    user: CurrentUser,
    intervention_id: str | UUID,
) -> Intervention:
    intervention = await repository.get_intervention(db, str(intervention_id))
    if intervention is None:
        raise InterventionNotFoundError(str(intervention_id))

    concern = await repository.get_concern(db, intervention.concern_id)
    if concern is None:
        raise ConcernNotFoundError(intervention.concern_id)
    _ensure_owner(concern, user)
    return intervention


async def save_intervention(
    db: AsyncSession,
    user: CurrentUser,
    intervention_id: str | UUID,
) -> Intervention:
    intervention = await _get_owned_intervention(db, user, intervention_id)
    intervention = await repository.mark_intervention_saved(db, intervention)
    logger.info(f"Intervention {intervention.id} saved by teacher {user.id}")
    return intervention


async def list_saved_interventions(db: AsyncSession, user: CurrentUser) -> list[Intervention]:
    return await repository.list_saved_interventions(db, str(user.id))


# ============================================================================
# Progress notes
# ============================================================================


async def create_progress_note(
    db: AsyncSession,
    user: CurrentUser,
    intervention_id: str | UUID,
    data: ProgressNoteCreate,
) -> ProgressNote:
    intervention = await _get_owned_intervention(db, user, intervention_id)
    return await repository.create_progress_note(
        db,
        intervention_id=intervention.id,
        teacher_id=str(user.id),
        note=data.note,
        outcome=data.outcome,
        next_steps=data.next_steps,
    )


async def list_progress_notes(
    db: AsyncSession,
    user: CurrentUser,
    intervention_id: str | UUID,
) -> list[ProgressNote]:
    intervention = await _get_owned_intervention(db, user, intervention_id)
    return await repository.list_progress_notes(db, intervention.id)


async def _get_authored_note(db: AsyncSession, user: CurrentUser, note_id: str | UUID) -> ProgressNote:
    progress_note = await repository.get_progress_note(db, str(note_id))
    if progress_note is None:
        raise ProgressNoteNotFoundError(str(note_id))
    if str(progress_note.teacher_id) != str(user.id):
        raise NotNoteAuthorError()
    return progress_note


async def update_progress_note(
    db: AsyncSession,
    user: CurrentUser,
    note_id: str | UUID,
    data: ProgressNoteUpdate,
) -> ProgressNote:
    progress_note = await _get_authored_note(db, user, note_id)
    fields: dict[str, Any] = data.model_dump(exclude_unset=True)
    if not fields:
        return progress_note
    return await repository.update_progress_note(db, progress_note, **fields)


async def delete_progress_note(db: AsyncSession, user: CurrentUser, note_id: str | UUID) -> None:
    progress_note = await _get_authored_note(db, user, note_id)
    await repository.delete_progress_note(db, progress_note)
    logger.info(f"Progress note {note_id} deleted by teacher {user.id}")
