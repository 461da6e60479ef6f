"""Authentication schemas."""

from pydantic import BaseModel, EmailStr, Field

from app.modules.users.schemas import UsageStatusResponse, UserProfile


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    """Token response schema."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class LoginResponse(TokenResponse):
    """Tokens plus the authenticated user's profile."""

    user: UserProfile


class MeResponse(BaseModel):
    """Current user's profile with monthly usage."""

    user: UserProfile
    usage: UsageStatusResponse


class PasswordResetRequest(BaseModel):
    email: EmailStr


class PasswordResetConfirm(BaseModel):
    # Length rules are enforced by the service so the messages match the reset flow
    token: str = ""
    new_password: str = ""


class PasswordResetResponse(BaseModel):
    success: bool
    message: str
