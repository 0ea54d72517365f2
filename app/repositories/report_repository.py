"""신고 레포지토리.

Report repository — Handles reports and report_drafts DB queries.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.report import Report, ReportDraft
from app.repositories.base import BaseRepository

# 정렬 키 — Browse sort keys
_SORTS = {
    "newest": Report.created_at.desc(),
    "oldest": Report.created_at.asc(),
    "department": Report.department.asc(),
    "location": Report.address.asc(),
}


class ReportRepository(BaseRepository[Report]):

    def __init__(self) -> None:
        super().__init__(Report)

    async def get_for_owner(
        self,
        db: AsyncSession,
        report_id: UUID,
        user_id: UUID,
    ) -> Report | None:
        result = await db.execute(
            select(Report).where(Report.id == report_id, Report.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Report], int]:
        query: Select = (
            select(Report)
            .where(Report.user_id == user_id)
            .order_by(Report.created_at.desc())
        )
        return await self.get_paginated(db, query, page, per_page)

    async def browse(
        self,
        db: AsyncSession,
        department: str | None = None,
        location: str | None = None,
        search: str | None = None,
        status: str | None = None,
        sort: str = "newest",
        page: int = 1,
        per_page: int = 12,
    ) -> tuple[Sequence[Report], int]:
        """공개 신고 목록 — Public report browser with text filters."""
        query: Select = select(Report)
        if department:
            query = query.where(Report.department.ilike(f"%{department}%"))
        if location:
            query = query.where(or_(
                Report.address.ilike(f"%{location}%"),
                Report.location_text.ilike(f"%{location}%"),
            ))
        if search:
            query = query.where(or_(
                Report.title.ilike(f"%{search}%"),
                Report.description.ilike(f"%{search}%"),
                Report.department.ilike(f"%{search}%"),
            ))
        if status:
            query = query.where(Report.status == status)
        query = query.order_by(_SORTS.get(sort, _SORTS["newest"]))
        return await self.get_paginated(db, query, page, per_page)

    async def get_filtered(
        self,
        db: AsyncSession,
        status: str | None = None,
        department: str | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Report], int]:
        query: Select = select(Report).order_by(Report.created_at.desc())
        if status:
            query = query.where(Report.status == status)
        if department:
            query = query.where(Report.department == department)
        return await self.get_paginated(db, query, page, per_page)

    async def recent(
        self,
        db: AsyncSession,
        limit: int,
        user_id: UUID | None = None,
    ) -> Sequence[Report]:
        query: Select = select(Report).order_by(Report.created_at.desc()).limit(limit)
        if user_id is not None:
            query = query.where(Report.user_id == user_id)
        return (await db.execute(query)).scalars().all()

    async def count_by_status(
        self,
        db: AsyncSession,
        user_id: UUID | None = None,
    ) -> dict[str, int]:
        """상태별 신고 수 — {status: count}; absent statuses are omitted."""
        query: Select = select(Report.status, func.count()).group_by(Report.status)
        if user_id is not None:
            query = query.where(Report.user_id == user_id)
        rows = (await db.execute(query)).all()
        return {status: count for status, count in rows}

    async def count_by_department(self, db: AsyncSession) -> dict[str, int]:
        query: Select = (
            select(Report.department, func.count())
            .group_by(Report.department)
            .order_by(func.count().desc())
        )
        rows = (await db.execute(query)).all()
        return {department or "Unassigned": count for department, count in rows}

    async def departments(self, db: AsyncSession) -> list[str]:
        query: Select = (
            select(Report.department)
            .where(Report.department.is_not(None), Report.department != "")
            .distinct()
            .order_by(Report.department)
        )
        return list((await db.execute(query)).scalars().all())


class DraftRepository:
    """세션별 신고 초안 쿼리 — Queries for per-session report drafts."""

    async def get(self, db: AsyncSession, session_id: UUID) -> ReportDraft | None:
        result = await db.execute(select(ReportDraft).where(ReportDraft.session_id == session_id))
        return result.scalar_one_or_none()

    async def save(self, db: AsyncSession, draft: ReportDraft) -> ReportDraft:
        db.add(draft)
        await db.flush()
        return draft

    async def delete(self, db: AsyncSession, session_id: UUID) -> None:
        await db.execute(delete(ReportDraft).where(ReportDraft.session_id == session_id))
        await db.flush()


report_repository: ReportRepository = ReportRepository()
draft_repository: DraftRepository = DraftRepository()
