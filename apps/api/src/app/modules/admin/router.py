"""
Admin router.

School admins and platform admins share the teacher endpoints (scoped by
the service); dashboard, logs and API keys are platform-admin only.
"""

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_admin_user, get_platform_admin_user
from app.core.database import get_db
from app.modules.admin import service
from app.modules.admin.schemas import (
    AdminLogResponse,
    ApiKeyCreate,
    ApiKeyResponse,
    ApiKeyUpdate,
    BulkDeleteRequest,
    BulkDeleteResponse,
    BulkUpdateRequest,
    BulkUpdateResponse,
    BulkUploadResponse,
    DashboardStats,
    GrantRequestsRequest,
    SchoolExport,
    TeacherDetail,
    TeacherExport,
)
from app.modules.users.service import UserServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


def _handle_service_error(e: service.AdminServiceError | UserServiceError) -> HTTPException:
    return HTTPException(
        status_code=e.status_code,
        detail={"error": e.error_code, "message": e.message},
    )


async def _read_csv(file: UploadFile) -> str:
    raw = await file.read()
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "INVALID_CSV", "message": "CSV file must be UTF-8 encoded"},
        ) from e


# ============================================================================
# Dashboard and logs
# ============================================================================


@router.get("/dashboard", response_model=DashboardStats)
async def get_dashboard(
    admin: CurrentUser = Depends(get_platform_admin_user),
    db: AsyncSession = Depends(get_db),
) -> DashboardStats:
    return await service.get_dashboard_stats(db)


@router.get("/logs", response_model=list[AdminLogResponse])
async def list_logs(
    limit: int = Query(50, ge=1, le=500),
    admin: CurrentUser = Depends(get_platform_admin_user),
    db: AsyncSession = Depends(get_db),
) -> list[AdminLogResponse]:
    logs = await service.list_admin_logs(db, limit=limit)
    return [AdminLogResponse.model_validate(log) for log in logs]


# ============================================================================
# Teachers
# ============================================================================


@router.get("/teachers", response_model=list[TeacherDetail])
async def list_teachers(
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> list[TeacherDetail]:
    return await service.list_teachers(db, admin)


@router.post("/teachers/bulk-upload", response_model=BulkUploadResponse)
async def bulk_upload_teachers(
    file: UploadFile = File(...),
    school_id: str | None = Form(None),
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> BulkUploadResponse:
    """
    Create teacher accounts from a CSV file.

    Row-level problems are reported in the response; the request only fails
    when the file itself is unusable.
    """
    content = await _read_csv(file)
    try:
        result = await service.bulk_upload_teachers(db, admin, content, school_id)
    except service.AdminServiceError as e:
        raise _handle_service_error(e) from e
    return BulkUploadResponse.from_result(result)


@router.post("/teachers/bulk-upload/credentials-pdf")
async def bulk_upload_credentials_pdf(
    file: UploadFile = File(...),
    school_id: str | None = Form(None),
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Create teacher accounts from a CSV file and return their logins as a PDF."""
    content = await _read_csv(file)
    try:
        result, pdf = await service.bulk_upload_credentials_pdf(db, admin, content, school_id)
    except service.AdminServiceError as e:
        raise _handle_service_error(e) from e

    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={
            "Content-Disposition": 'attachment; filename="teacher-credentials.pdf"',
            "X-Import-Summary": result.summary,
        },
    )


@router.patch("/teachers/bulk", response_model=BulkUpdateResponse)
async def bulk_update_teachers(
    data: BulkUpdateRequest,
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> BulkUpdateResponse:
    try:
        updated = await service.bulk_update_teachers(db, admin, data)
    except service.AdminServiceError as e:
        raise _handle_service_error(e) from e
    return BulkUpdateResponse(success=True, updated=updated)


@router.post("/teachers/bulk-delete", response_model=BulkDeleteResponse)
async def bulk_delete_teachers(
    data: BulkDeleteRequest,
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> BulkDeleteResponse:
    try:
        deleted = await service.bulk_delete_teachers(db, admin, data.teacher_ids)
    except service.AdminServiceError as e:
        raise _handle_service_error(e) from e
    return BulkDeleteResponse(
        success=True,
        deleted=deleted,
        message=f"Successfully deleted {deleted} teachers and their associated data",
    )


@router.post("/teachers/{teacher_id}/grant-requests", response_model=TeacherDetail)
async def grant_requests(
    teacher_id: str,
    data: GrantRequestsRequest,
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> TeacherDetail:
    try:
        return await service.grant_additional_requests(db, admin, teacher_id, data.amount)
    except (service.AdminServiceError, UserServiceError) as e:
        raise _handle_service_error(e) from e


@router.get("/teachers/{teacher_id}/export", response_model=TeacherExport)
async def export_teacher(
    teacher_id: str,
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> TeacherExport:
    try:
        return await service.export_teacher(db, admin, teacher_id)
    except service.AdminServiceError as e:
        raise _handle_service_error(e) from e


@router.get("/schools/{school_id}/export", response_model=SchoolExport)
async def export_school(
    school_id: str,
    admin: CurrentUser = Depends(get_current_admin_user),
    db: AsyncSession = Depends(get_db),
) -> SchoolExport:
    try:
        return await service.export_school(db, admin, school_id)
    except service.AdminServiceError as e:
        raise _handle_service_error(e) from e


# ============================================================================
# API keys
# ============================================================================


@router.get("/api-keys", response_model=list[ApiKeyResponse])
async def list_api_keys(
    admin: CurrentUser = Depends(get_platform_admin_user),
    db: AsyncSession = Depends(get_db),
) -> list[ApiKeyResponse]:
    return await service.list_api_keys(db)


@router.post("/api-keys", response_model=ApiKeyResponse, status_code=status.HTTP_201_CREATED)
async def create_api_key(
    data: ApiKeyCreate,
    admin: CurrentUser = Depends(get_platform_admin_user),
    db: AsyncSession = Depends(get_db),
) -> ApiKeyResponse:
    return await service.create_api_key(db, admin, data)


@router.patch("/api-keys/{key_id}", response_model=ApiKeyResponse)
async def update_api_key(
    key_id: str,
    data: ApiKeyUpdate,
    admin: CurrentUser = Depends(get_platform_admin_user),
    db: AsyncSession = Depends(get_db),
) -> ApiKeyResponse:
    try:
        return await service.update_api_key(db, admin, key_id, data)
    except service.AdminServiceError as e:
        raise _handle_service_error(e) from e


@router.delete("/api-keys/{key_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_api_key(
    key_id: str,
    admin: CurrentUser = Depends(get_platform_admin_user),
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        await service.delete_api_key(db, admin, key_id)
    except service.AdminServiceError as e:
        raise _handle_service_error(e) from e
