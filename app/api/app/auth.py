"""인증 라우터 — 회원가입, 로그인, 로그아웃, 프로필, Google 로그인.

Auth Router — Signup, login, logout, profile and Google sign-in endpoints.
The session token is returned in the body and also set as an HttpOnly
cookie so that browser form posts are authenticated.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_session, get_current_user
from app.config import settings
from app.database import get_db
from app.models.user import User, UserSession
from app.schemas.auth import LoginRequest, ProfileResponse, SessionResponse, SignupRequest
from app.services.auth_service import auth_service
from app.services.user_service import user_service

router: APIRouter = APIRouter()


def set_session_cookie(response: Response, session: SessionResponse) -> None:
    """세션 쿠키 설정 — HttpOnly cookie expiring with the session."""
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session.access_token,
        expires=session.expires_at,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


@router.post("/signup", status_code=201)
async def signup(
    data: SignupRequest,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """회원가입 — 계정 생성 후 바로 로그인.

    Create a local account and start a session.
    """
    user, session = await auth_service.signup(db, data)
    await db.commit()
    set_session_cookie(response, session)
    return {
        "user": user_service.to_profile(user),
        "session": session,
        "redirect": "/dashboard",
    }


@router.post("/login", response_model=SessionResponse)
async def login(
    data: LoginRequest,
    response: Response,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SessionResponse:
    """로그인 — 사용자명 또는 이메일과 비밀번호."""
    session: SessionResponse = await auth_service.login(db, data)
    await db.commit()
    await auth_service.purge_expired_sessions(db, session.user_id)
    set_session_cookie(response, session)
    return session


@router.api_route("/logout", methods=["GET", "POST"])
async def logout(
    current: Annotated[tuple[User, UserSession], Depends(get_current_session)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RedirectResponse:
    """로그아웃 — 세션 종료 및 초안 폐기.

    End the session, discard its report draft and clear the cookie.
    """
    _, db_session = current
    await auth_service.logout(db, db_session.id)
    redirect = RedirectResponse(url="/", status_code=303)
    redirect.delete_cookie(settings.SESSION_COOKIE_NAME)
    return redirect


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    current_user: Annotated[User, Depends(get_current_user)],
) -> ProfileResponse:
    """현재 사용자 프로필 조회."""
    return user_service.to_profile(current_user)


@router.get("/google")
async def google_login() -> RedirectResponse:
    """Google 로그인 시작 — Redirect to the Google account chooser."""
    return RedirectResponse(url=auth_service.google_authorization_url(), status_code=303)


@router.get("/google/callback")
async def google_callback(
    db: Annotated[AsyncSession, Depends(get_db)],
    code: str | None = None,
    state: str | None = None,
) -> RedirectResponse:
    """Google 로그인 콜백 — Sign in (creating the account if needed), then go to the dashboard."""
    session: SessionResponse = await auth_service.google_callback(db, code, state)
    await db.commit()
    await auth_service.purge_expired_sessions(db, session.user_id)
    redirect = RedirectResponse(url="/dashboard", status_code=303)
    set_session_cookie(redirect, session)
    return redirect
