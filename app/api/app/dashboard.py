"""대시보드 라우터 — 내 신고 통계와 최근 신고.

Dashboard Router — The signed-in user's report stats and recent reports.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.services.dashboard_service import dashboard_service

router: APIRouter = APIRouter()


@router.get("/dashboard")
async def get_dashboard(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """내 대시보드 조회."""
    return await dashboard_service.get_user_dashboard(db, current_user)
