"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
create_all().

Modules:
    user: 사용자 및 로그인 세션 (User and UserSession)
    report: 신고 및 세션별 초안 (Report and ReportDraft)
    contribution: 신고 기여 (Contribution)
    setting: 조직 설정 (AppSetting)
"""

from app.models.user import User, UserSession
from app.models.report import Report, ReportDraft
from app.models.contribution import Contribution
from app.models.setting import AppSetting

__all__ = [
    "User", "UserSession",
    "Report", "ReportDraft",
    "Contribution",
    "AppSetting",
]
