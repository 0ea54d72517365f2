"""FastAPI 의존성 주입 모듈 — 인증 및 권한 검사.

FastAPI dependency injection module — Authentication and authorization.
Provides reusable dependencies for resolving the current session and user
from a session token and for restricting admin endpoints.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더 또는 세션 쿠키를 전송
       (Client sends Authorization: Bearer <token> or the session cookie)
    2. decode_token()이 JWT 서명/만료를 검증 (Signature and expiry verified)
    3. "sid" 클레임으로 user_sessions 행을 조회, 만료 확인
       (Session row loaded by the "sid" claim and checked for expiry)
    4. 세션의 사용자를 조회 (Session owner loaded)
    어느 단계든 실패하면 403 (Any failure → 403 AuthenticationRequiredError)
"""

from typing import Annotated
from uuid import UUID

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.models.user import User, UserSession
from app.repositories.session_repository import session_repository
from app.repositories.user_repository import user_repository
from app.utils.exceptions import AuthenticationRequiredError, PermissionDeniedError
from app.utils.ids import as_utc, utcnow
from app.utils.jwt import decode_token

# HTTP Bearer 토큰 추출기 — 헤더가 없으면 쿠키로 대체 (Falls back to the session cookie)
security: HTTPBearer = HTTPBearer(auto_error=False)


def _extract_token(request: Request, credentials: HTTPAuthorizationCredentials | None) -> str | None:
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


async def get_current_session(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> tuple[User, UserSession]:
    """세션 토큰에서 현재 사용자와 세션을 추출합니다.

    Resolve the authenticated user and their durable session row.
    Draft routes need the session because drafts are keyed by it.

    Returns:
        tuple[User, UserSession]: (사용자, 세션) (User and session)

    Raises:
        AuthenticationRequiredError: 토큰 없음/무효/만료, 세션 폐기됨
                                     (Missing, invalid or expired token; revoked session)
    """
    token: str | None = _extract_token(request, credentials)
    if not token:
        raise AuthenticationRequiredError()

    try:
        payload: dict = decode_token(token)
        if payload.get("type") != "access":
            raise AuthenticationRequiredError("Invalid token type")
        user_id: UUID = UUID(payload["sub"])
        session_id: UUID = UUID(payload["sid"])
    except (jwt.InvalidTokenError, KeyError, ValueError, TypeError):
        raise AuthenticationRequiredError("Invalid or expired session")

    db_session: UserSession | None = await session_repository.get(db, session_id)
    if db_session is None or db_session.user_id != user_id:
        raise AuthenticationRequiredError("Session has ended")
    if as_utc(db_session.expires_at) <= utcnow():
        raise AuthenticationRequiredError("Session has expired")

    user: User | None = await user_repository.get_by_id(db, user_id)
    if user is None:
        raise AuthenticationRequiredError("User not found")

    return user, db_session


async def get_current_user(
    current: Annotated[tuple[User, UserSession], Depends(get_current_session)],
) -> User:
    """현재 인증된 사용자 — The authenticated user."""
    return current[0]


async def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """관리자 전용 — Administrator accounts only.

    Raises:
        PermissionDeniedError: 관리자가 아님 (Not an administrator)
    """
    if not current_user.is_admin:
        raise PermissionDeniedError("Administrator access required")
    return current_user
