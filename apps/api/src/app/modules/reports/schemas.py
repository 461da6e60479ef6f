"""Report request and response schemas."""

from pydantic import BaseModel, EmailStr, Field


class ReportRecipient(BaseModel):
    email: EmailStr
    name: str | None = Field(None, max_length=200)
    role: str | None = Field(None, max_length=100)


class ShareReportRequest(BaseModel):
    # Empty lists are rejected by the service with NO_RECIPIENTS
    recipients: list[ReportRecipient] = Field(default_factory=list)
    message: str | None = Field(None, max_length=5000)


class ShareReportResponse(BaseModel):
    success: bool
    message: str
    report_id: str


class GenerateReportResponse(BaseModel):
    report_id: str
    download_url: str
