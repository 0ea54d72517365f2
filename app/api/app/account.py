"""계정 설정 라우터 — 프로필 조회/수정, 비밀번호 변경.

Account Settings Router — Profile read/update and password change.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.schemas.auth import ProfileResponse
from app.schemas.common import MessageResponse
from app.schemas.user import PasswordChange, ProfileUpdate
from app.services.user_service import user_service

router: APIRouter = APIRouter()


@router.get("", response_model=ProfileResponse)
async def get_settings(
    current_user: Annotated[User, Depends(get_current_user)],
) -> ProfileResponse:
    """내 계정 정보 조회."""
    return user_service.to_profile(current_user)


@router.post("/profile", response_model=ProfileResponse)
async def update_profile(
    data: ProfileUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> ProfileResponse:
    """프로필 수정 — 허용된 필드만."""
    result: ProfileResponse = await user_service.update_profile(db, current_user, data)
    await db.commit()
    return result


@router.post("/password", response_model=MessageResponse)
async def change_password(
    data: PasswordChange,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> MessageResponse:
    """비밀번호 변경."""
    await user_service.change_password(db, current_user, data)
    await db.commit()
    return MessageResponse(message="Password updated")
