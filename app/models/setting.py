"""조직 설정 SQLAlchemy ORM 모델 정의.

Organization settings model. A single row edited from the admin API;
kept in the database so that every instance sees the same values and
they survive restarts.
"""

from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class AppSetting(Base):
    """조직 설정 모델 (단일 행, id=1).

    Attributes:
        id: 항상 1 (Always 1)
        org_name: 조직 이름 (Organization display name)
        org_email: 지원 이메일 (Support e-mail)
        primary_color: 기본 색상 (Primary brand colour, hex)
        accent_color: 강조 색상 (Accent colour, hex)
        session_timeout_minutes: 관리자 세션 만료(분) (Admin-facing session timeout)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "app_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=1)
    org_name: Mapped[str] = mapped_column(String(200), default="CivicConnect")
    org_email: Mapped[str] = mapped_column(String(255), default="support@civicconnect.local")
    primary_color: Mapped[str] = mapped_column(String(20), default="#06b6d4")
    accent_color: Mapped[str] = mapped_column(String(20), default="#0ea5a4")
    session_timeout_minutes: Mapped[int] = mapped_column(Integer, default=60)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
