"""시민용 API 라우터 패키지 — 모든 사용자 엔드포인트 통합.

Citizen API Router package — Aggregates all user-facing endpoints
into a single router for inclusion in the FastAPI application.

Included routers:
    - auth: 회원가입/로그인/로그아웃/Google (Signup, login, logout, Google)
    - reports: 신고 제출, 초안, 내 신고, 수정/삭제 (Report submission and own reports)
    - contributions: 공개 신고 탐색, 기여, 투표 (Report browser, contributions, votes)
    - dashboard: 내 대시보드 (My dashboard)
    - account: 계정 설정 (Account settings)
    - geocoding: 역지오코딩 프록시 (Reverse geocoding proxy)
    - media: 저장된 사진 (Stored images)
"""

from fastapi import APIRouter

from app.config import settings
from app.api.app.auth import router as auth_router
from app.api.app.contributions import router as contributions_router
from app.api.app.dashboard import router as dashboard_router
from app.api.app.geocoding import router as geocoding_router
from app.api.app.media import router as media_router
from app.api.app.reports import router as reports_router
from app.api.app.account import router as settings_router

app_router: APIRouter = APIRouter()

app_router.include_router(auth_router, prefix="/auth", tags=["Auth"])
# 신고: /report/... 제출 경로와 /reports/... 내 신고 경로 (Submission and own-report paths)
app_router.include_router(reports_router, tags=["Reports"])
app_router.include_router(contributions_router, prefix="/contribute", tags=["Contribute"])
app_router.include_router(dashboard_router, tags=["Dashboard"])
app_router.include_router(settings_router, prefix="/settings", tags=["Settings"])
app_router.include_router(geocoding_router, prefix="/geocode", tags=["Geocoding"])
app_router.include_router(media_router, prefix=settings.UPLOADS_URL_PREFIX, tags=["Media"])
