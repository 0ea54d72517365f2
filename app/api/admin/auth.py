"""관리자 인증 라우터 — 관리자 로그인.

Admin Auth Router — Administrator login. Non-admin accounts are rejected
even when their credentials are correct. Logout is shared with citizens
(see app.api.app.auth).
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.app.auth import set_session_cookie
from app.database import get_db
from app.schemas.auth import LoginRequest, SessionResponse
from app.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("/login", response_model=SessionResponse)
async def admin_login(
    data: LoginRequest,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SessionResponse:
    """관리자 로그인 — 관리자 계정만 가능.

    Admin login endpoint. Rejects accounts without the admin flag.
    """
    session: SessionResponse = await auth_service.login(db, data, admin_only=True)
    await db.commit()
    await auth_service.purge_expired_sessions(db, session.user_id)
    set_session_cookie(response, session)
    return session
