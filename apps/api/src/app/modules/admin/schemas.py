"""
Admin Schemas

Pydantic schemas for the admin panel: teacher management, bulk import,
dashboard statistics, audit log, API keys and exports.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.modules.admin.csv_import import BulkUploadResult
from app.modules.concerns.schemas import ConcernDetail, ProgressNoteResponse
from app.modules.users.models import User

MASKED_API_KEY = "••••••••••••••••••••••••••••••••"


# ============================================================================
# Teachers
# ============================================================================


class TeacherDetail(BaseModel):
    id: str
    email: str
    name: str
    first_name: str
    last_name: str
    school_id: str | None = None
    role: str
    is_active: bool
    primary_grade: str | None = None
    primary_subject: str | None = None
    teacher_type: str | None = None
    support_requests_used: int
    support_requests_limit: int
    additional_requests: int
    total_limit: int
    must_change_password: bool
    last_login_at: datetime | None = None
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "TeacherDetail":
        return cls(
            id=str(user.id),
            email=user.email,
            name=f"{user.first_name or ''} {user.last_name or ''}".strip(),
            first_name=user.first_name,
            last_name=user.last_name,
            school_id=str(user.school_id) if user.school_id else None,
            role=user.role.value,
            is_active=user.is_active,
            primary_grade=user.primary_grade,
            primary_subject=user.primary_subject,
            teacher_type=user.teacher_type,
            support_requests_used=user.support_requests_used or 0,
            support_requests_limit=user.support_requests_limit,
            additional_requests=user.additional_requests or 0,
            total_limit=user.total_requests_limit,
            must_change_password=user.must_change_password,
            last_login_at=user.last_login_at,
            created_at=user.created_at,
        )


class BulkUpdateRequest(BaseModel):
    teacher_ids: list[str] = Field(..., min_length=1)
    support_requests_limit: int | None = Field(None, ge=1, le=1000)
    is_active: bool | None = None
    school_id: str | None = None

    @model_validator(mode="after")
    def validate_has_updates(self) -> "BulkUpdateRequest":
        if not self.updates():
            raise ValueError("At least one field to update is required")
        return self

    def updates(self) -> dict[str, Any]:
        return self.model_dump(exclude={"teacher_ids"}, exclude_none=True)


class BulkUpdateResponse(BaseModel):
    success: bool
    updated: int


class BulkDeleteRequest(BaseModel):
    teacher_ids: list[str] = Field(..., min_length=1)


class BulkDeleteResponse(BaseModel):
    success: bool
    deleted: int
    message: str


class GrantRequestsRequest(BaseModel):
    # Range is enforced by the users service
    amount: int


# ============================================================================
# Bulk upload
# ============================================================================


class RowErrorResponse(BaseModel):
    row: int
    error: str
    email: str | None = None
    name: str | None = None


class CreatedCredentialResponse(BaseModel):
    name: str
    email: str
    password: str
    school: str


class BulkUploadResponse(BaseModel):
    success: bool
    total_rows: int
    successful_imports: int
    errors: list[RowErrorResponse]
    duplicate_emails: list[str]
    summary: str
    created_credentials: list[CreatedCredentialResponse]

    @classmethod
    def from_result(cls, result: BulkUploadResult) -> "BulkUploadResponse":
        return cls(**result.as_dict())


# ============================================================================
# Dashboard and logs
# ============================================================================


class DashboardStats(BaseModel):
    total_users: int
    total_schools: int
    total_concerns: int
    total_interventions: int
    active_teachers_this_month: int
    concerns_this_month: int
    concerns_last_month: int
    percent_change: float


class AdminLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    admin_id: str | None = None
    action: str
    target_user_id: str | None = None
    target_school_id: str | None = None
    details: dict[str, Any] | None = None
    created_at: datetime


# ============================================================================
# API keys
# ============================================================================


class ApiKeyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    api_key: str = Field(..., min_length=1)
    provider: str = Field("deepseek", min_length=1, max_length=50)
    description: str | None = None
    max_usage: int = Field(10000, ge=1)


class ApiKeyUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    api_key: str | None = Field(None, min_length=1)
    description: str | None = None
    is_active: bool | None = None
    max_usage: int | None = Field(None, ge=1)


class ApiKeyResponse(BaseModel):
    """API key with the secret masked."""

    id: str
    name: str
    provider: str
    api_key: str = MASKED_API_KEY
    description: str | None = None
    is_active: bool
    usage_count: int
    max_usage: int
    usage_percentage: int
    last_used_at: datetime | None = None
    created_by: str | None = None
    created_at: datetime


# ============================================================================
# Exports
# ============================================================================


class ConcernExport(ConcernDetail):
    progress_notes: list[ProgressNoteResponse] = Field(default_factory=list)


class TeacherExportSummary(BaseModel):
    total_concerns: int
    total_interventions: int
    total_follow_up_questions: int
    total_progress_notes: int
    support_requests_used: int
    support_requests_limit: int


class TeacherExport(BaseModel):
    teacher: TeacherDetail
    concerns: list[ConcernExport]
    summary: TeacherExportSummary


class SchoolSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    district: str | None = None
    contact_email: str | None = None
    max_teachers: int
    default_requests_per_teacher: int
    is_active: bool


class SchoolExportSummary(BaseModel):
    total_teachers: int
    total_concerns: int
    total_interventions: int
    total_follow_up_questions: int
    total_progress_notes: int


class SchoolExport(BaseModel):
    school: SchoolSummary
    teachers: list[TeacherExport]
    summary: SchoolExportSummary
