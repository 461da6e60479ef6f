"""User schemas shared by the auth and admin routers."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.modules.users.models import User
from app.modules.users.service import UsageStatus


class UsageStatusResponse(BaseModel):
    """Monthly support request usage."""

    can_create: bool
    used: int
    limit: int
    remaining: int

    @classmethod
    def from_status(cls, status: UsageStatus) -> "UsageStatusResponse":
        return cls(**status.as_dict())


class UserProfile(BaseModel):
    """Public view of a user account."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    first_name: str
    last_name: str
    role: str
    school_id: str | None = None
    is_active: bool
    must_change_password: bool
    primary_grade: str | None = None
    primary_subject: str | None = None
    teacher_type: str | None = None
    subscription_end_date: datetime | None = None
    support_requests_used: int
    support_requests_limit: int
    additional_requests: int
    last_login_at: datetime | None = None
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserProfile":
        return cls(
            id=str(user.id),
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=user.role.value,
            school_id=str(user.school_id) if user.school_id else None,
            is_active=user.is_active,
            must_change_password=user.must_change_password,
            primary_grade=user.primary_grade,
            primary_subject=user.primary_subject,
            teacher_type=user.teacher_type,
            subscription_end_date=user.subscription_end_date,
            support_requests_used=user.support_requests_used or 0,
            support_requests_limit=user.support_requests_limit,
            additional_requests=user.additional_requests or 0,
            last_login_at=user.last_login_at,
            created_at=user.created_at,
        )
