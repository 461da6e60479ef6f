"""Concerns router - concerns, follow-up questions, saved interventions and progress notes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_user
from app.core.database import get_db
from app.core.rate_limit import rate_limit
from app.modules.concerns import service
from app.modules.concerns.schemas import (
    ConcernCreate,
    ConcernCreateResponse,
    ConcernDetail,
    ConcernSummary,
    FollowUpQuestionCreate,
    FollowUpQuestionResponse,
    InterventionResponse,
    ProgressNoteCreate,
    ProgressNoteResponse,
    ProgressNoteUpdate,
)
from app.modules.reports import service as reports_service
from app.modules.reports.schemas import (
    GenerateReportResponse,
    ShareReportRequest,
    ShareReportResponse,
)
from app.modules.users.schemas import UsageStatusResponse

logger = logging.getLogger(__name__)

router = APIRouter()


def _handle_service_error(
    e: service.ConcernServiceError | reports_service.ReportServiceError,
) -> HTTPException:
    return HTTPException(
        status_code=e.status_code,
        detail={"error": e.error_code, "message": e.message},
    )


# ============================================================================
# Concerns
# ============================================================================


@router.post("", response_model=ConcernCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_concern(
    data: ConcernCreate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ConcernCreateResponse:
    """
    Document a concern and receive AI generated interventions.

    Raises:
        HTTPException 403: Account is inactive
        HTTPException 429: Monthly support request limit reached
    """
    try:
        concern, usage = await service.create_concern(db, user, data)
    except service.ConcernServiceError as e:
        raise _handle_service_error(e) from e

    return ConcernCreateResponse(
        concern=ConcernDetail.model_validate(concern),
        usage=UsageStatusResponse.from_status(usage),
    )


@router.get("", response_model=list[ConcernSummary])
async def list_concerns(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[ConcernSummary]:
    concerns = await service.list_concerns(db, user)
    return [ConcernSummary.model_validate(c) for c in concerns]


# ============================================================================
# Interventions and progress notes
# ============================================================================


@router.get("/interventions/saved", response_model=list[InterventionResponse])
async def list_saved_interventions(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[InterventionResponse]:
    interventions = await service.list_saved_interventions(db, user)
    return [InterventionResponse.model_validate(i) for i in interventions]


@router.post("/interventions/{intervention_id}/save", response_model=InterventionResponse)
async def save_intervention(
    intervention_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> InterventionResponse:
    try:
        intervention = await service.save_intervention(db, user, intervention_id)
    except service.ConcernServiceError as e:
        raise _handle_service_error(e) from e
    return InterventionResponse.model_validate(intervention)


@router.get(
    "/interventions/{intervention_id}/progress-notes",
    response_model=list[ProgressNoteResponse],
)
async def list_progress_notes(
    intervention_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[ProgressNoteResponse]:
    try:
        notes = await service.list_progress_notes(db, user, intervention_id)
    except service.ConcernServiceError as e:
        raise _handle_service_error(e) from e
    return [ProgressNoteResponse.model_validate(n) for n in notes]


@router.post(
    "/interventions/{intervention_id}/progress-notes",
    response_model=ProgressNoteResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_progress_note(
    intervention_id: str,
    data: ProgressNoteCreate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ProgressNoteResponse:
    try:
        note = await service.create_progress_note(db, user, intervention_id, data)
    except service.ConcernServiceError as e:
        raise _handle_service_error(e) from e
    return ProgressNoteResponse.model_validate(note)


@router.patch("/progress-notes/{note_id}", response_model=ProgressNoteResponse)
async def update_progress_note(
    note_id: str,
    data: ProgressNoteUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ProgressNoteResponse:
    try:
        note = await service.update_progress_note(db, user, note_id, data)
    except service.ConcernServiceError as e:
        raise _handle_service_error(e) from e
    return ProgressNoteResponse.model_validate(note)


@router.delete("/progress-notes/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_progress_note(
    note_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        await service.delete_progress_note(db, user, note_id)
    except service.ConcernServiceError as e:
        raise _handle_service_error(e) from e


# ============================================================================
# Single concern
# ============================================================================


@router.get("/{concern_id}", response_model=ConcernDetail)
async def get_concern(
    concern_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ConcernDetail:
    try:
        concern = await service.get_concern(db, user, concern_id)
    except service.ConcernServiceError as e:
        raise _handle_service_error(e) from e
    return ConcernDetail.model_validate(concern)


@router.post(
    "/{concern_id}/questions",
    response_model=FollowUpQuestionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def ask_follow_up(
    concern_id: str,
    data: FollowUpQuestionCreate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> FollowUpQuestionResponse:
    """Ask a follow-up question about the concern's recommendations."""
    try:
        follow_up = await service.ask_follow_up(db, user, concern_id, data.question)
    except service.ConcernServiceError as e:
        raise _handle_service_error(e) from e
    return FollowUpQuestionResponse.model_validate(follow_up)


@router.post("/{concern_id}/report", response_model=GenerateReportResponse)
async def generate_report(
    concern_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> GenerateReportResponse:
    try:
        report = await reports_service.generate_report(db, user, concern_id)
    except (service.ConcernServiceError, reports_service.ReportServiceError) as e:
        raise _handle_service_error(e) from e
    return GenerateReportResponse(
        report_id=str(report.id),
        download_url=reports_service.download_url(str(report.id)),
    )


@router.post("/{concern_id}/share", response_model=ShareReportResponse)
@rate_limit(limit=10, window_seconds=3600)
async def share_report(
    request: Request,
    concern_id: str,
    data: ShareReportRequest,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> ShareReportResponse:
    """
    Email the concern report to colleagues.

    Raises:
        HTTPException 400: No recipients
        HTTPException 500: Email could not be sent
    """
    try:
        report = await reports_service.share_report(
            db, user, concern_id, data.recipients, data.message
        )
    except (service.ConcernServiceError, reports_service.ReportServiceError) as e:
        raise _handle_service_error(e) from e
    return ShareReportResponse(
        success=True,
        message="Report shared successfully",
        report_id=str(report.id),
    )
