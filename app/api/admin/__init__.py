"""관리자 API 라우터 패키지 — 모든 관리자 엔드포인트 통합.

Admin API Router package — Aggregates all admin-facing endpoints
into a single router for inclusion in the FastAPI application.

Included routers:
    - auth: 관리자 로그인 (Admin login)
    - dashboard: 전체 통계 (Overview)
    - reports: 신고 관리, 상태 변경, 내보내기 (Report management)
    - contributions: 기여 검토 (Contribution moderation)
    - users: 사용자 관리 (User management)
    - settings: 조직 설정 (Organisation settings)
"""

from fastapi import APIRouter

from app.api.admin.auth import router as auth_router
from app.api.admin.contributions import router as contributions_router
from app.api.admin.dashboard import router as dashboard_router
from app.api.admin.reports import router as reports_router
from app.api.admin.settings import router as settings_router
from app.api.admin.users import router as users_router

admin_router: APIRouter = APIRouter()

# 대시보드가 /admin 자체에 위치하므로 하위 라우터마다 전체 경로를 지정
# The overview lives at /admin itself, so each sub-router carries its full prefix
admin_router.include_router(auth_router, prefix="/admin", tags=["Admin Auth"])
admin_router.include_router(dashboard_router, prefix="/admin", tags=["Admin Dashboard"])
admin_router.include_router(reports_router, prefix="/admin/reports", tags=["Admin Reports"])
admin_router.include_router(contributions_router, prefix="/admin/contributions", tags=["Admin Contributions"])
admin_router.include_router(users_router, prefix="/admin/users", tags=["Admin Users"])
admin_router.include_router(settings_router, prefix="/admin/settings", tags=["Admin Settings"])
