"""Email configuration schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class EmailConfigUpdate(BaseModel):
    """
    SMTP settings submitted by a user or school admin.

    smtp_password may be omitted when updating an existing configuration to
    keep the stored password.
    """

    smtp_host: str = Field(..., min_length=1, max_length=255)
    smtp_port: int = Field(default=587, ge=1, le=65535)
    smtp_secure: bool = False
    smtp_user: str = Field(..., min_length=1, max_length=255)
    smtp_password: str | None = Field(default=None, max_length=500)
    from_address: EmailStr | None = None
    from_name: str | None = Field(default=None, max_length=200)
    is_active: bool = True


class EmailConfigResponse(BaseModel):
    """Stored SMTP settings. The password is never returned."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    smtp_host: str
    smtp_port: int
    smtp_secure: bool
    smtp_user: str
    from_address: str | None = None
    from_name: str | None = None
    is_active: bool
    test_status: str | None = None
    last_tested_at: datetime | None = None
    has_password: bool = True
    updated_at: datetime


class EmailTestRequest(BaseModel):
    test_email: EmailStr


class EmailTestResponse(BaseModel):
    success: bool
    message: str


class EmailStatusResponse(BaseModel):
    has_personal_config: bool
    has_school_config: bool
    active_config: Literal["user", "school", "none"]
    status: Literal["active", "limited"]
