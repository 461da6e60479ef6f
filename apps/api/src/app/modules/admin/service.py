"""
Admin Service Layer

Business logic for the admin panel.

Platform admins see every school. School admins only manage the teachers
of their own school: every teacher lookup is checked against the caller's
school, and bulk imports are forced into it. API keys, the dashboard and
the audit log are platform-admin concerns.
"""

import logging
import math
from datetime import UTC, datetime, timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser
from app.modules.admin import csv_import
from app.modules.admin import repository as admin_repository
from app.modules.admin.models import AdminLog, ApiKey
from app.modules.admin.schemas import (
    ApiKeyCreate,
    ApiKeyResponse,
    ApiKeyUpdate,
    BulkUpdateRequest,
    ConcernExport,
    DashboardStats,
    SchoolExport,
    SchoolExportSummary,
    SchoolSummary,
    TeacherDetail,
    TeacherExport,
    TeacherExportSummary,
)
from app.modules.concerns import repository as concerns_repository
from app.modules.concerns.schemas import ConcernDetail, ProgressNoteResponse
from app.modules.reports import repository as reports_repository
from app.modules.reports.credentials_pdf import TeacherCredential, generate_credential_pdf
from app.modules.schools.repository import SchoolRepository
from app.modules.users import service as users_service
from app.modules.users.models import User, UserRole
from app.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


# ============================================================================
# Exceptions
# ============================================================================


class AdminServiceError(Exception):
    """Base exception for admin service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class TeacherNotFoundError(AdminServiceError):
    def __init__(self, teacher_id: str | None = None):
        message = f"Teacher {teacher_id} not found" if teacher_id else "Teacher not found"
        super().__init__(message=message, error_code="TEACHER_NOT_FOUND", status_code=404)


class SchoolNotFoundError(AdminServiceError):
    def __init__(self, school_id: str | None = None):
        message = f"School {school_id} not found" if school_id else "School not found"
        super().__init__(message=message, error_code="SCHOOL_NOT_FOUND", status_code=404)


class SchoolAccessDeniedError(AdminServiceError):
    def __init__(self):
        super().__init__(
            message="You can only manage teachers of your own school",
            error_code="SCHOOL_ACCESS_DENIED",
            status_code=403,
        )


class ApiKeyNotFoundError(AdminServiceError):
    def __init__(self, key_id: str | None = None):
        message = f"API key {key_id} not found" if key_id else "API key not found"
        super().__init__(message=message, error_code="API_KEY_NOT_FOUND", status_code=404)


class InvalidCSVError(AdminServiceError):
    def __init__(self, message: str):
        super().__init__(message=message, error_code="INVALID_CSV", status_code=400)


# ============================================================================
# Teachers
# ============================================================================


def _scope_school_id(admin: CurrentUser) -> str | None:
    """School an admin is confined to (None for platform admins)."""
    if admin.is_platform_admin:
        return None
    return admin.school_id


def _ensure_can_manage(admin: CurrentUser, teacher: User) -> None:
    teacher_school = str(teacher.school_id) if teacher.school_id else None
    if not admin.can_manage_school(teacher_school):
        raise SchoolAccessDeniedError()


async def _get_managed_teachers(
    db: AsyncSession,
    admin: CurrentUser,
    teacher_ids: list[str],
) -> list[User]:
    """Load the teachers, requiring every id to exist and be manageable."""
    users = await UserRepository.list_by_ids(db, teacher_ids)
    found = {str(u.id): u for u in users if u.role == UserRole.TEACHER}
    for teacher_id in teacher_ids:
        teacher = found.get(str(teacher_id))
        if teacher is None:
            raise TeacherNotFoundError(str(teacher_id))
        _ensure_can_manage(admin, teacher)
    return list(found.values())


async def list_teachers(db: AsyncSession, admin: CurrentUser) -> list[TeacherDetail]:
    if not admin.is_platform_admin and not admin.school_id:
        return []
    teachers = await UserRepository.list_teachers(db, school_id=_scope_school_id(admin))
    return [TeacherDetail.from_user(t) for t in teachers]


async def bulk_update_teachers(
    db: AsyncSession,
    admin: CurrentUser,
    request: BulkUpdateRequest,
) -> int:
    """
    Apply the same changes to several teachers.

    Returns:
        Number of teachers updated
    """
    updates = request.updates()
    if "school_id" in updates:
        if not admin.can_manage_school(updates["school_id"]):
            raise SchoolAccessDeniedError()
        if await SchoolRepository.get_by_id(db, updates["school_id"]) is None:
            raise SchoolNotFoundError(updates["school_id"])

    teachers = await _get_managed_teachers(db, admin, request.teacher_ids)
    for teacher in teachers:
        await UserRepository.update_fields(db, teacher, **updates)

    await admin_repository.create_log(
        db,
        admin_id=admin.id,
        action="bulk_update_teachers",
        details={"teacher_ids": [str(t.id) for t in teachers], "updates": updates},
    )
    logger.info(f"Admin {admin.id} updated {len(teachers)} teacher(s): {', '.join(sorted(updates))}")
    return len(teachers)


async def bulk_delete_teachers(db: AsyncSession, admin: CurrentUser, teacher_ids: list[str]) -> int:
    """
    Delete teachers with their concerns, interventions, questions, notes and reports.

    Returns:
        Number of teachers deleted
    """
    teachers = await _get_managed_teachers(db, admin, teacher_ids)
    ids = [str(t.id) for t in teachers]

    await reports_repository.delete_reports_for_teachers(db, ids)
    concerns_deleted = await concerns_repository.delete_concerns_for_teachers(db, ids)
    deleted = await UserRepository.delete_many(db, ids)

    await admin_repository.create_log(
        db,
        admin_id=admin.id,
        action="bulk_delete_teachers",
        details={"teacher_ids": ids, "concerns_deleted": concerns_deleted},
    )
    logger.info(f"Admin {admin.id} deleted {deleted} teacher(s) and {concerns_deleted} concern(s)")
    return deleted


async def grant_additional_requests(
    db: AsyncSession,
    admin: CurrentUser,
    teacher_id: str,
    amount: int,
) -> TeacherDetail:
    teacher = await UserRepository.get_by_id(db, teacher_id)
    if teacher is None:
        raise TeacherNotFoundError(teacher_id)
    _ensure_can_manage(admin, teacher)

    teacher = await users_service.grant_additional_requests(
        db, user_id=teacher.id, amount=amount, admin_id=admin.id
    )
    return TeacherDetail.from_user(teacher)


# ============================================================================
# Bulk upload
# ============================================================================


def _upload_school_id(admin: CurrentUser, school_id: str | None) -> str | None:
    """School admins always import into their own school."""
    if admin.is_platform_admin:
        return school_id
    if school_id and school_id != admin.school_id:
        raise SchoolAccessDeniedError()
    if not admin.school_id:
        raise SchoolAccessDeniedError()
    return admin.school_id


async def bulk_upload_teachers(
    db: AsyncSession,
    admin: CurrentUser,
    content: str,
    school_id: str | None = None,
) -> csv_import.BulkUploadResult:
    target_school_id = _upload_school_id(admin, school_id)
    if target_school_id and await SchoolRepository.get_by_id(db, target_school_id) is None:
        raise SchoolNotFoundError(target_school_id)

    try:
        return await csv_import.process_bulk_csv_upload(
            db, content, school_id=target_school_id, admin_id=admin.id
        )
    except csv_import.CSVFormatError as e:
        raise InvalidCSVError(str(e)) from e


async def bulk_upload_credentials_pdf(
    db: AsyncSession,
    admin: CurrentUser,
    content: str,
    school_id: str | None = None,
) -> tuple[csv_import.BulkUploadResult, bytes]:
    """Run a bulk upload and render the created logins as a PDF."""
    result = await bulk_upload_teachers(db, admin, content, school_id)

    target_school_id = _upload_school_id(admin, school_id)
    school = await SchoolRepository.get_by_id(db, target_school_id) if target_school_id else None
    if school is not None:
        school_name, district = school.name, school.district
    else:
        names = {c.school for c in result.created_credentials}
        school_name = names.pop() if len(names) == 1 else "Multiple Schools"
        district = None

    pdf = generate_credential_pdf(
        school_name=school_name,
        school_district=district,
        contact_email=admin.email,
        credentials=[
            TeacherCredential(name=c.name, email=c.email, password=c.password, school=c.school)
            for c in result.created_credentials
        ],
    )
    return result, pdf


# ============================================================================
# Dashboard and logs
# ============================================================================


def month_bounds(now: datetime) -> tuple[datetime, datetime]:
    """Start of the current month and of the previous one."""
    this_month = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    last_month = (this_month - timedelta(days=1)).replace(day=1)
    return this_month, last_month


def percent_change(current: int, previous: int) -> float:
    if previous == 0:
        return 0.0
    return round((current - previous) / previous * 100, 1)


async def get_dashboard_stats(db: AsyncSession, now: datetime | None = None) -> DashboardStats:
    now = now or datetime.now(UTC)
    this_month, last_month = month_bounds(now)

    this_month_count = await concerns_repository.count_concerns(db, since=this_month)
    last_month_count = await concerns_repository.count_concerns(db, since=last_month, until=this_month)

    return DashboardStats(
        total_users=await UserRepository.count(db),
        total_schools=await SchoolRepository.count(db),
        total_concerns=await concerns_repository.count_concerns(db),
        total_interventions=await concerns_repository.count_interventions(db),
        active_teachers_this_month=await concerns_repository.count_active_teachers(db, since=this_month),
        concerns_this_month=this_month_count,
        concerns_last_month=last_month_count,
        percent_change=percent_change(this_month_count, last_month_count),
    )


async def list_admin_logs(db: AsyncSession, limit: int = 50) -> list[AdminLog]:
    return await admin_repository.list_recent_logs(db, limit=limit)


# ============================================================================
# API keys
# ============================================================================


def usage_percentage(key: ApiKey) -> int:
    """Whole percent of the usage cap consumed, halves rounded up."""
    if not key.max_usage:
        return 0
    return math.floor((key.usage_count or 0) / key.max_usage * 100 + 0.5)


def to_api_key_response(key: ApiKey) -> ApiKeyResponse:
    return ApiKeyResponse(
        id=str(key.id),
        name=key.name,
        provider=key.provider,
        description=key.description,
        is_active=key.is_active,
        usage_count=key.usage_count or 0,
        max_usage=key.max_usage,
        usage_percentage=usage_percentage(key),
        last_used_at=key.last_used_at,
        created_by=str(key.created_by) if key.created_by else None,
        created_at=key.created_at,
    )


async def list_api_keys(db: AsyncSession) -> list[ApiKeyResponse]:
    keys = await admin_repository.list_api_keys(db)
    return [to_api_key_response(k) for k in keys]


async def create_api_key(db: AsyncSession, admin: CurrentUser, data: ApiKeyCreate) -> ApiKeyResponse:
    key = await admin_repository.create_api_key(
        db,
        name=data.name,
        api_key=data.api_key,
        provider=data.provider,
        description=data.description,
        max_usage=data.max_usage,
        created_by=admin.id,
    )
    await admin_repository.create_log(
        db,
        admin_id=admin.id,
        action="create_api_key",
        details={"api_key_id": str(key.id), "name": key.name, "provider": key.provider},
    )
    logger.info(f"API key {key.id} ({key.provider}) created by admin {admin.id}")
    return to_api_key_response(key)


async def update_api_key(
    db: AsyncSession,
    admin: CurrentUser,
    key_id: str | UUID,
    data: ApiKeyUpdate,
) -> ApiKeyResponse:
    key = await admin_repository.get_api_key(db, key_id)
    if key is None:
        raise ApiKeyNotFoundError(str(key_id))

    fields = data.model_dump(exclude_unset=True, exclude_none=True)
    if fields:
        key = await admin_repository.update_api_key(db, key, **fields)
        await admin_repository.create_log(
            db,
            admin_id=admin.id,
            action="update_api_key",
            details={"api_key_id": str(key.id), "fields": sorted(fields)},
        )
    return to_api_key_response(key)


async def delete_api_key(db: AsyncSession, admin: CurrentUser, key_id: str | UUID) -> None:
    key = await admin_repository.get_api_key(db, key_id)
    if key is None:
        raise ApiKeyNotFoundError(str(key_id))

    await admin_repository.delete_api_key(db, key)
    await admin_repository.create_log(
        db,
        admin_id=admin.id,
        action="delete_api_key",
        details={"api_key_id": str(key_id), "name": key.name},
    )
    logger.info(f"API key {key_id} deleted by admin {admin.id}")


# ============================================================================
# Exports
# ============================================================================


async def _teacher_export(db: AsyncSession, teacher: User) -> TeacherExport:
    concerns = await concerns_repository.list_concerns_for_teacher(db, str(teacher.id))

    exported: list[ConcernExport] = []
    interventions = follow_ups = notes = 0
    for concern in concerns:
        progress_notes = []
        for intervention in concern.interventions:
            progress_notes.extend(await concerns_repository.list_progress_notes(db, intervention.id))

        detail = ConcernDetail.model_validate(concern)
        exported.append(
            ConcernExport(
                **detail.model_dump(),
                progress_notes=[ProgressNoteResponse.model_validate(n) for n in progress_notes],
            )
        )
        interventions += len(concern.interventions)
        follow_ups += len(concern.follow_up_questions)
        notes += len(progress_notes)

    return TeacherExport(
        teacher=TeacherDetail.from_user(teacher),
        concerns=exported,
        summary=TeacherExportSummary(
            total_concerns=len(concerns),
            total_interventions=interventions,
            total_follow_up_questions=follow_ups,
            total_progress_notes=notes,
            support_requests_used=teacher.support_requests_used or 0,
            support_requests_limit=teacher.support_requests_limit,
        ),
    )


async def export_teacher(db: AsyncSession, admin: CurrentUser, teacher_id: str) -> TeacherExport:
    teacher = await UserRepository.get_by_id(db, teacher_id)
    if teacher is None:
        raise TeacherNotFoundError(teacher_id)
    _ensure_can_manage(admin, teacher)

    export = await _teacher_export(db, teacher)
    await admin_repository.create_log(
        db, admin_id=admin.id, action="export_teacher", target_user_id=str(teacher.id)
    )
    return export


async def export_school(db: AsyncSession, admin: CurrentUser, school_id: str) -> SchoolExport:
    if not admin.can_manage_school(school_id):
        raise SchoolAccessDeniedError()

    school = await SchoolRepository.get_by_id(db, school_id)
    if school is None:
        raise SchoolNotFoundError(school_id)

    teachers = await UserRepository.list_teachers(db, school_id=str(school.id))
    exports = [await _teacher_export(db, t) for t in teachers]

    await admin_repository.create_log(
        db, admin_id=admin.id, action="export_school", target_school_id=str(school.id)
    )
    return SchoolExport(
        school=SchoolSummary.model_validate(school),
        teachers=exports,
        summary=SchoolExportSummary(
            total_teachers=len(exports),
            total_concerns=sum(e.summary.total_concerns for e in exports),
            total_interventions=sum(e.summary.total_interventions for e in exports),
            total_follow_up_questions=sum(e.summary.total_follow_up_questions for e in exports),
            total_progress_notes=sum(e.summary.total_progress_notes for e in exports),
        ),
    )
