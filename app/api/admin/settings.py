"""관리자 설정 라우터 — 조직 설정 조회/수정.

Admin Settings Router — Organisation name, contact e-mail, colours and
session timeout.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin
from app.database import get_db
from app.models.user import User
from app.schemas.common import AppSettingsResponse, AppSettingsUpdate
from app.services.settings_service import settings_service

router: APIRouter = APIRouter()


@router.get("", response_model=AppSettingsResponse)
async def get_app_settings(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict:
    """조직 설정 조회 — 최초 조회 시 기본값으로 생성."""
    row = await settings_service.get_settings(db)
    await db.commit()
    return settings_service.build_response(row)


@router.post("", response_model=AppSettingsResponse)
async def update_app_settings(
    data: AppSettingsUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> dict:
    """조직 설정 수정 — 전달된 필드만 변경."""
    row = await settings_service.update_settings(db, data)
    await db.commit()
    return settings_service.build_response(row)
