"""관리자 신고 라우터 — 전체 신고 조회, 상태 변경, Excel 내보내기.

Admin Report Router — List every report, move reports through the status
lifecycle and export the filtered list as an Excel workbook.
"""

from io import BytesIO
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.models.user import User
from app.schemas.common import PaginatedResponse
from app.schemas.report import ReportStatusUpdate
from app.services.dashboard_service import dashboard_service
from app.services.report_service import report_service

router: APIRouter = APIRouter()


@router.get("", response_model=PaginatedResponse)
async def list_reports(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    status: Annotated[str | None, Query()] = None,
    department: Annotated[str | None, Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 20,
) -> dict:
    """전체 신고 목록 — "all"은 필터 없음."""
    reports, total = await report_service.list_all(db, status, department, page, per_page)
    items = [await report_service.build_response(db, r) for r in reports]
    return {"items": items, "total": total, "page": page, "per_page": per_page}


@router.get("/export")
async def export_reports(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    status: Annotated[str | None, Query()] = None,
    department: Annotated[str | None, Query()] = None,
) -> StreamingResponse:
    """신고 목록을 Excel 파일로 내보냅니다."""
    excel_bytes: bytes = await dashboard_service.export_reports_excel(
        db,
        status=None if status in (None, "", "all") else status,
        department=None if department in (None, "", "all") else department,
    )
    return StreamingResponse(
        BytesIO(excel_bytes),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=reports_export.xlsx"},
    )


@router.post("/{report_id}/status")
async def update_report_status(
    report_id: UUID,
    data: ReportStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict:
    """신고 상태 변경 — 허용된 전이만 가능.

    Raises 409 for a transition the lifecycle does not allow.
    """
    report = await report_service.change_status(db, report_id, data.status)
    await db.commit()
    return await report_service.build_response(db, report)
