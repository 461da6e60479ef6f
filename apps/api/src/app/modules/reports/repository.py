"""
Reports Repository

Database operations for generated reports.
"""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Report


async def create_report(db: AsyncSession, *, concern_id: str, created_by: str, pdf_path: str) -> Report:
    report = Report(
        concern_id=str(concern_id),
        created_by=str(created_by),
        pdf_path=pdf_path,
        shared_with=[],
    )
    db.add(report)
    await db.flush()
    await db.refresh(report)
    return report


async def get_report(db: AsyncSession, report_id: str) -> Report | None:
    return await db.get(Report, str(report_id))


async def get_latest_report(db: AsyncSession, concern_id: str) -> Report | None:
    result = await db.execute(
        select(Report)
        .where(Report.concern_id == str(concern_id))
        .order_by(Report.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def add_recipients(db: AsyncSession, report: Report, recipients: list[dict]) -> Report:
    # Reassign so the JSON column is flagged dirty
    report.shared_with = [*(report.shared_with or []), *recipients]
    await db.flush()
    return report


async def delete_reports_for_teachers(db: AsyncSession, teacher_ids: list[str]) -> int:
    """Delete report rows generated by the given teachers. Files are left on disk."""
    if not teacher_ids:
        return 0
    result = await db.execute(delete(Report).where(Report.created_by.in_(teacher_ids)))
    return result.rowcount or 0
