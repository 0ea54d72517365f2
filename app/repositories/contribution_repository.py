"""기여 레포지토리.

Contribution repository — Handles contributions DB queries.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.contribution import Contribution
from app.repositories.base import BaseRepository


class ContributionRepository(BaseRepository[Contribution]):

    def __init__(self) -> None:
        super().__init__(Contribution)

    async def get_by_report(
        self,
        db: AsyncSession,
        report_id: UUID,
    ) -> Sequence[Contribution]:
        query: Select = (
            select(Contribution)
            .where(Contribution.report_id == report_id)
            .order_by(Contribution.created_at.desc())
        )
        return (await db.execute(query)).scalars().all()

    async def increment_vote(
        self,
        db: AsyncSession,
        contribution_id: UUID,
        column: str,
    ) -> tuple[int, int] | None:
        """투표 카운터 증가 — Atomically add 1 to "upvotes" or "downvotes".

        Returns:
            tuple[int, int] | None: (upvotes, downvotes), None if not found
        """
        counter = getattr(Contribution, column)
        result = await db.execute(
            update(Contribution)
            .where(Contribution.id == contribution_id)
            .values({column: counter + 1})
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None
        row = (await db.execute(
            select(Contribution.upvotes, Contribution.downvotes)
            .where(Contribution.id == contribution_id)
        )).one()
        return row.upvotes, row.downvotes

    async def delete_by_report(self, db: AsyncSession, report_id: UUID) -> list[str]:
        """신고의 기여 삭제 — Delete a report's contributions, returning their image paths."""
        contributions = await self.get_by_report(db, report_id)
        images: list[str] = [path for c in contributions for path in (c.images or [])]
        await db.execute(delete(Contribution).where(Contribution.report_id == report_id))
        await db.flush()
        return images


# 싱글턴 인스턴스 — Singleton instance
contribution_repository: ContributionRepository = ContributionRepository()
