"""신고 Pydantic 스키마.

Report request schemas. Field rules (word counts, presence) are NOT
expressed here: they live in app.utils.validation so that every entry
route applies the same checks.
"""

from pydantic import BaseModel


class ReportMetadata(BaseModel):
    """신고 메타데이터 — 제출 폼에서 허용된 필드만.

    Allow-listed report fields accepted from a submission form.
    """

    title: str | None = None
    description: str | None = None
    department: str | None = None
    address: str | None = None
    location_text: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class ReportUpdate(BaseModel):
    """신고 수정 — 전달된 필드만 변경 (exclude_unset)."""

    title: str | None = None
    description: str | None = None
    department: str | None = None
    address: str | None = None
    location_text: str | None = None
    latitude: float | None = None
    longitude: float | None = None


class ReportStatusUpdate(BaseModel):
    status: str  # open, in_progress, resolved, closed
