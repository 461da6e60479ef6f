"""
Reports Service Layer

Generates concern report PDFs, serves them back to their owner and shares
them by email through the sender's resolved SMTP account.
"""

import asyncio
import logging
from datetime import UTC, datetime
from pathlib import Path
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser
from app.core.config import settings
from app.core.email import EmailAttachment, render_report_share_email, send_email
from app.modules.concerns import service as concerns_service
from app.modules.concerns.models import Concern
from app.modules.email_config import service as email_config_service
from app.modules.reports import repository
from app.modules.reports.models import Report
from app.modules.reports.pdf import (
    ConcernReportData,
    FollowUpSection,
    InterventionSection,
    render_concern_report,
)
from app.modules.reports.schemas import ReportRecipient

logger = logging.getLogger(__name__)

ATTACHMENT_FILENAME = "concern-report.pdf"


class ReportServiceError(Exception):
    """Base exception for report service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class ReportNotFoundError(ReportServiceError):
    def __init__(self, report_id: str | None = None):
        message = f"Report {report_id} not found" if report_id else "Report not found"
        super().__init__(message=message, error_code="REPORT_NOT_FOUND", status_code=404)


class ReportFileMissingError(ReportServiceError):
    def __init__(self):
        super().__init__(
            message="Report file not found",
            error_code="REPORT_FILE_MISSING",
            status_code=404,
        )


class ReportAccessDeniedError(ReportServiceError):
    def __init__(self):
        super().__init__(
            message="You do not have access to this report",
            error_code="REPORT_ACCESS_DENIED",
            status_code=403,
        )


class NoRecipientsError(ReportServiceError):
    def __init__(self):
        super().__init__(
            message="At least one recipient is required",
            error_code="NO_RECIPIENTS",
            status_code=400,
        )


class EmailSendFailedError(ReportServiceError):
    def __init__(self):
        super().__init__(
            message="Failed to send report email",
            error_code="EMAIL_SEND_FAILED",
            status_code=500,
        )


def build_report_data(concern: Concern) -> ConcernReportData:
    return ConcernReportData(
        student_first_name=concern.student_first_name,
        student_last_initial=concern.student_last_initial,
        grade=concern.grade,
        concern_types=list(concern.concern_types or []),
        severity_level=concern.severity_level.value,
        description=concern.description,
        documented_at=concern.created_at,
        interventions=[
            InterventionSection(
                title=i.title,
                description=i.description,
                steps=list(i.steps or []),
                timeline=i.timeline,
            )
            for i in concern.interventions
        ],
        follow_ups=[
            FollowUpSection(question=q.question, response=q.response)
            for q in concern.follow_up_questions
        ],
    )


def report_filename(concern_id: str, now: datetime | None = None) -> str:
    now = now or datetime.now(UTC)
    return f"concern-{concern_id}-{int(now.timestamp() * 1000)}.pdf"


def download_url(report_id: str) -> str:
    return f"/api/v1/reports/{report_id}/download"


def _write_pdf(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)


async def generate_report(db: AsyncSession, user: CurrentUser, concern_id: str | UUID) -> Report:
    """
    Render the concern as a PDF under the reports directory and record it.

    Raises:
        ConcernNotFoundError / NotConcernOwnerError from the concerns service
    """
    concern = await concerns_service.get_concern(db, user, concern_id)
    data = build_report_data(concern)

    path = Path(settings.reports_dir) / report_filename(concern.id)
    content = await asyncio.to_thread(render_concern_report, data)
    await asyncio.to_thread(_write_pdf, path, content)

    report = await repository.create_report(
        db,
        concern_id=concern.id,
        created_by=str(user.id),
        pdf_path=str(path),
    )
    logger.info(f"Report {report.id} generated for concern {concern.id} ({len(content)} bytes)")
    return report


async def download_report(db: AsyncSession, user: CurrentUser, report_id: str | UUID) -> tuple[Report, Path]:
    """
    Locate a report's PDF for its owner (or an administrator).

    Raises:
        ReportNotFoundError: If the record does not exist
        ReportAccessDeniedError: If the user neither owns it nor is an admin
        ReportFileMissingError: If the file is gone from disk
    """
    report = await repository.get_report(db, str(report_id))
    if report is None:
        raise ReportNotFoundError(str(report_id))

    if str(report.created_by) != str(user.id) and not user.is_admin:
        raise ReportAccessDeniedError()

    path = Path(report.pdf_path)
    if not path.is_file():
        logger.warning(f"Report {report.id} file missing at {path}")
        raise ReportFileMissingError()

    return report, path


async def share_report(
    db: AsyncSession,
    user: CurrentUser,
    concern_id: str | UUID,
    recipients: list[ReportRecipient],
    message: str | None = None,
) -> Report:
    """
    Email the concern's latest report (generating one if needed) as a PDF attachment.

    Raises:
        NoRecipientsError: If recipients is empty
        EmailSendFailedError: If delivery fails
    """
    if not recipients:
        raise NoRecipientsError()

    concern = await concerns_service.get_concern(db, user, concern_id)

    report = await repository.get_latest_report(db, concern.id)
    if report is None or not Path(report.pdf_path).is_file():
        report = await generate_report(db, user, concern.id)

    content = await asyncio.to_thread(Path(report.pdf_path).read_bytes)
    config = await email_config_service.get_email_configuration(
        db, user_id=str(user.id), school_id=user.school_id
    )

    subject = f"Student Concern Report - {concern.student_first_name} {concern.student_last_initial}."
    html_content = render_report_share_email(message, f"{settings.base_url}/reports/{report.id}")

    sent = await send_email(
        [r.email for r in recipients],
        subject,
        html_content,
        config=config,
        attachments=[EmailAttachment(filename=ATTACHMENT_FILENAME, content=content)],
    )
    if not sent:
        raise EmailSendFailedError()

    shared_at = datetime.now(UTC).isoformat()
    await repository.add_recipients(
        db,
        report,
        [
            {"email": r.email, "name": r.name, "role": r.role, "shared_at": shared_at}
            for r in recipients
        ],
    )
    logger.info(f"Report {report.id} shared with {len(recipients)} recipient(s) by user {user.id}")
    return report
