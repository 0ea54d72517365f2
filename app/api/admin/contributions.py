"""관리자 기여 라우터 — 기여 검토.

Admin Contribution Router — Moderation of citizen contributions.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.models.user import User
from app.schemas.contribution import ContributionStatusUpdate
from app.services.contribution_service import contribution_service

router: APIRouter = APIRouter()


@router.post("/{contribution_id}/status")
async def moderate_contribution(
    contribution_id: UUID,
    data: ContributionStatusUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict:
    """기여 상태(pending/approved/rejected)와 helpful 표시 변경."""
    contribution = await contribution_service.moderate(db, contribution_id, data)
    await db.commit()
    return contribution_service.build_response(contribution)
