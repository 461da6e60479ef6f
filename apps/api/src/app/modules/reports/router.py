"""Reports router - PDF download."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentUser, get_current_user
from app.core.database import get_db
from app.modules.reports import service
from app.modules.reports.service import ATTACHMENT_FILENAME

router = APIRouter()


@router.get("/{report_id}/download")
async def download_report(
    report_id: str,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> FileResponse:
    try:
        _, path = await service.download_report(db, user, report_id)
    except service.ReportServiceError as e:
        raise HTTPException(
            status_code=e.status_code,
            detail={"error": e.error_code, "message": e.message},
        )

    return FileResponse(path, media_type="application/pdf", filename=ATTACHMENT_FILENAME)
