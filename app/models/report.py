"""신고 관련 SQLAlchemy ORM 모델 정의.

Report-related SQLAlchemy ORM model definitions.

Tables:
    - reports: 시민 신고 (Citizen civic-issue reports)
    - report_drafts: 세션별 신고 초안 (In-flight report per login session)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Text, Float, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column, validates

from app.database import Base
from app.utils.ids import generate_report_code
from app.utils.validation import description_words_valid, title_words_valid

# 신고 상태 — Report status values
STATUS_OPEN: str = "open"
STATUS_IN_PROGRESS: str = "in_progress"
STATUS_RESOLVED: str = "resolved"
STATUS_CLOSED: str = "closed"
REPORT_STATUSES: tuple[str, ...] = (STATUS_OPEN, STATUS_IN_PROGRESS, STATUS_RESOLVED, STATUS_CLOSED)


class Report(Base):
    """신고 모델 — 시민이 제출한 생활 불편 신고.

    Report model — A citizen-submitted record of a civic issue.
    Word-count rules are re-checked here by @validates hooks so that no
    code path can persist a report that bypassed the service validation.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        report_code: 사람이 읽을 수 있는 신고 코드 (Human-readable code, immutable)
        user_id: 작성자 FK (Owning user, immutable)
        title: 제목 1-10 단어 (Title, 1-10 words)
        description: 설명 30-250 단어 (Description, 30-250 words)
        department: 담당 부서 (Department, free text)
        address: 주소 (Address, required)
        location_text: 위치 설명 (Human-readable location label from geotag)
        latitude: 위도 (Latitude, nullable)
        longitude: 경도 (Longitude, nullable)
        image_path: 사진 경로 (Relative media reference under /uploads)
        status: 상태 (open -> in_progress -> resolved / closed)
        resolved_at: 해결 일시 (When the report entered "resolved")
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "reports"

    # 신고 고유 식별자 — Report unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 신고 코드 — e.g. "Rm1x2k3p4-a9b8c7"
    report_code: Mapped[str] = mapped_column(String(40), unique=True, nullable=False, default=generate_report_code)
    # 작성자 FK — CASCADE: 사용자 삭제 시 신고도 삭제
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    department: Mapped[str | None] = mapped_column(Text, nullable=True)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    location_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    image_path: Mapped[str] = mapped_column(String(500), nullable=False)
    # 진행 상태 — Workflow status: "open" → "in_progress" → "resolved" / "closed"
    status: Mapped[str] = mapped_column(String(20), default=STATUS_OPEN, index=True)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    @validates("title")
    def _check_title(self, key: str, value: str) -> str:
        if not title_words_valid(value):
            raise ValueError("Title must be 1-10 words")
        return value.strip()

    @validates("description")
    def _check_description(self, key: str, value: str) -> str:
        if not description_words_valid(value):
            raise ValueError("Description must be between 30 and 250 words")
        return value

    @validates("status")
    def _check_status(self, key: str, value: str) -> str:
        if value not in REPORT_STATUSES:
            raise ValueError(f"Unknown status: {value}")
        return value


class ReportDraft(Base):
    """신고 초안 모델 — 로그인 세션당 최대 1개.

    Report draft — The in-flight report of one login session, created by the
    upload-temp/capture-temp step and consumed by upload-complete.
    The session id is the primary key, so a session holds at most one draft.

    Attributes:
        session_id: 세션 FK이자 PK (Owning session, primary key)
        image_path: 저장된 사진 경로 (Already stored media reference)
        latitude: 위도 (Latitude, nullable)
        longitude: 경도 (Longitude, nullable)
        address: 주소 (Address captured at upload time, optional)
        location_text: 위치 설명 (Location label, optional)
        expires_at: 만료 일시 (Expiry; stale drafts are purged on read)
        created_at: 생성 일시 (Creation timestamp)
    """

    __tablename__ = "report_drafts"

    session_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("user_sessions.id", ondelete="CASCADE"), primary_key=True)
    image_path: Mapped[str] = mapped_column(String(500), nullable=False)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    location_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
