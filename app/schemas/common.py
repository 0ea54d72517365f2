"""공통 Pydantic 응답 스키마 정의.

Common Pydantic response schema definitions shared across API domains:
pagination envelope, generic messages and organisation settings.
"""

from typing import Any

from pydantic import BaseModel


class PaginatedResponse(BaseModel):
    """페이지네이션 응답 스키마.

    Paginated list response envelope.

    Attributes:
        items: 현재 페이지 항목 (Items on the current page)
        total: 전체 항목 수 (Total number of matching items)
        page: 현재 페이지 번호 (Current page, 1-based)
        per_page: 페이지당 항목 수 (Items per page)
    """

    items: list[Any]
    total: int
    page: int
    per_page: int


class MessageResponse(BaseModel):
    """단순 메시지 응답 스키마 — Generic {"message": ...} response."""

    message: str


class AppSettingsResponse(BaseModel):
    """조직 설정 응답 스키마."""

    org_name: str
    org_email: str
    primary_color: str
    accent_color: str
    session_timeout_minutes: int


class AppSettingsUpdate(BaseModel):
    """조직 설정 수정 요청 스키마 (부분 업데이트).

    Attributes:
        org_name: 조직 이름 (Organisation display name)
        org_email: 지원 이메일 (Support e-mail)
        primary_color: 기본 색상 hex (Primary colour, e.g. "#06b6d4")
        accent_color: 강조 색상 hex (Accent colour)
        session_timeout_minutes: 세션 만료(분), 5-1440 (Session timeout in minutes)
    """

    org_name: str | None = None
    org_email: str | None = None
    primary_color: str | None = None
    accent_color: str | None = None
    session_timeout_minutes: int | None = None
