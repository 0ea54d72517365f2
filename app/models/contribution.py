"""기여 관련 SQLAlchemy ORM 모델 정의.

Contribution SQLAlchemy ORM model definition.

Tables:
    - contributions: 신고에 대한 추가 증거 (Supplementary evidence on a report)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import JSON, Boolean, String, DateTime, Integer, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

# 기여 검토 상태 — Contribution moderation status values
CONTRIBUTION_STATUSES: tuple[str, ...] = ("pending", "approved", "rejected")


class Contribution(Base):
    """기여 모델 — 다른 사용자가 기존 신고에 첨부한 증거.

    Contribution model — Evidence attached to an existing report by a user
    other than its owner. Vote counters only ever grow; there is no per-user
    vote tracking.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        report_id: 대상 신고 FK (Target report)
        contributor_id: 작성자 FK (Contributing user)
        title: 제목 최대 100자 (Title, max 100 chars)
        description: 설명 최대 500자 (Description, max 500 chars)
        images: 사진 경로 목록 (List of media references, at least one)
        status: 검토 상태 (pending / approved / rejected)
        helpful: 유용 표시 (Marked helpful by moderators)
        upvotes: 추천 수 (Up-vote counter)
        downvotes: 비추천 수 (Down-vote counter)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "contributions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 신고 FK — CASCADE: 신고 삭제 시 기여도 삭제
    report_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, index=True)
    contributor_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(String(20), default="pending", index=True)
    helpful: Mapped[bool] = mapped_column(Boolean, default=False)
    upvotes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    downvotes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
