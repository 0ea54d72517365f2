"""대시보드 서비스 — 사용자/관리자 대시보드 집계 비즈니스 로직.

Dashboard Service — Aggregation logic for the citizen dashboard and the
admin overview, plus the admin Excel export of reports.
"""

from io import BytesIO
from uuid import UUID

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.report import (
    REPORT_STATUSES,
    STATUS_IN_PROGRESS,
    STATUS_OPEN,
    STATUS_RESOLVED,
    Report,
)
from app.models.user import User
from app.repositories.report_repository import report_repository
from app.repositories.user_repository import user_repository
from app.services.report_service import report_service

RECENT_OWN_LIMIT: int = 8
RECENT_PUBLIC_LIMIT: int = 5
RECENT_USERS_LIMIT: int = 6


class DashboardService:
    """대시보드 서비스.

    Dashboard aggregation service for the citizen and admin views.
    """

    async def get_user_dashboard(self, db: AsyncSession, user: User) -> dict:
        """사용자 대시보드 집계.

        Counts of the user's reports by status, their latest reports and the
        latest public reports from everyone.
        """
        counts: dict[str, int] = await report_repository.count_by_status(db, user.id)
        own = await report_repository.recent(db, RECENT_OWN_LIMIT, user_id=user.id)
        public = await report_repository.recent(db, RECENT_PUBLIC_LIMIT)

        return {
            "username": user.username,
            "first_name": user.display_name,
            "email": user.email,
            "avatar_url": user.avatar_url,
            "google_linked": user.google_id is not None,
            "reports_count": sum(counts.values()),
            "open_count": counts.get(STATUS_OPEN, 0),
            "in_progress_count": counts.get(STATUS_IN_PROGRESS, 0),
            "resolved_count": counts.get(STATUS_RESOLVED, 0),
            "recent_reports": [await report_service.build_response(db, r) for r in own],
            "recent_public": [await report_service.build_response(db, r) for r in public],
        }

    async def get_admin_overview(self, db: AsyncSession) -> dict:
        """관리자 대시보드 집계.

        Totals, status and department breakdowns, the resolution rate
        (resolved / all, in percent) and the newest accounts.
        """
        counts: dict[str, int] = await report_repository.count_by_status(db)
        total: int = sum(counts.values())
        resolved: int = counts.get(STATUS_RESOLVED, 0)
        rate = round(resolved / total * 100, 1) if total > 0 else 0

        recent_users, _ = await user_repository.list_users(db, 1, RECENT_USERS_LIMIT)
        return {
            "users_count": await user_repository.count_all(db),
            "reports_count": total,
            "open_count": counts.get(STATUS_OPEN, 0),
            "resolved_count": resolved,
            "resolution_rate": rate,
            "status_breakdown": {status: counts.get(status, 0) for status in REPORT_STATUSES},
            "department_breakdown": await report_repository.count_by_department(db),
            "recent_users": [
                {
                    "id": str(u.id),
                    "username": u.username,
                    "email": u.email,
                    "is_admin": u.is_admin,
                    "created_at": u.created_at,
                }
                for u in recent_users
            ],
        }

    async def export_reports_excel(
        self,
        db: AsyncSession,
        status: str | None = None,
        department: str | None = None,
    ) -> bytes:
        """신고 목록을 Excel 파일로 내보내기."""
        wb = Workbook()
        header_font = Font(bold=True, color="FFFFFF", size=11)
        header_fill = PatternFill(start_color="0E7490", end_color="0E7490", fill_type="solid")

        ws = wb.active
        ws.title = "Reports"
        headers = [
            "Report ID", "Title", "Department", "Address", "Status",
            "Reporter", "Latitude", "Longitude", "Created", "Resolved",
        ]
        for col_idx, h in enumerate(headers, 1):
            cell = ws.cell(row=1, column=col_idx, value=h)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = Alignment(horizontal="center")

        query = (
            select(Report, User.username)
            .join(User, Report.user_id == User.id)
            .order_by(Report.created_at.desc())
        )
        if status:
            query = query.where(Report.status == status)
        if department:
            query = query.where(Report.department == department)

        result = await db.execute(query)
        for report, username in result.all():
            ws.append([
                report.report_code,
                report.title,
                report.department or "",
                report.address,
                report.status,
                username,
                report.latitude,
                report.longitude,
                report.created_at.strftime("%Y-%m-%d %H:%M") if report.created_at else "",
                report.resolved_at.strftime("%Y-%m-%d %H:%M") if report.resolved_at else "",
            ])

        for i, w in enumerate([22, 30, 18, 30, 12, 16, 11, 11, 17, 17], 1):
            ws.column_dimensions[ws.cell(row=1, column=i).column_letter].width = w

        buffer = BytesIO()
        wb.save(buffer)
        return buffer.getvalue()


# 싱글턴 인스턴스
dashboard_service: DashboardService = DashboardService()
