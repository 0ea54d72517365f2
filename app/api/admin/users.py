"""관리자 사용자 라우터 — 사용자 목록, 관리자 권한 토글.

Admin User Router — User listing and admin-flag toggling.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.models.user import User
from app.schemas.auth import ProfileResponse
from app.schemas.common import PaginatedResponse
from app.services.user_service import user_service

router: APIRouter = APIRouter()


@router.get("", response_model=PaginatedResponse)
async def list_users(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 20,
) -> dict:
    """사용자 목록 조회 (최신 가입순)."""
    users, total = await user_service.list_users(db, page, per_page)
    items = [user_service.to_profile(u) for u in users]
    return {"items": items, "total": total, "page": page, "per_page": per_page}


@router.post("/{user_id}/toggle-admin", response_model=ProfileResponse)
async def toggle_admin(
    user_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> ProfileResponse:
    """관리자 권한 토글 — 자기 자신은 불가."""
    user = await user_service.toggle_admin(db, user_id, current_user)
    await db.commit()
    return user_service.to_profile(user)
