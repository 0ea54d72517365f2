"""인증 서비스 — 회원가입, 로그인, 로그아웃, Google 로그인 비즈니스 로직.

Auth Service — Business logic for signup, login, logout and Google sign-in.
Every successful sign-in creates a durable user_sessions row and a signed
session token pointing at it. The session id also keys the report draft.
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from urllib.parse import urlencode
from uuid import UUID

import httpx
import jwt
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.user import User
from app.repositories.session_repository import session_repository
from app.repositories.user_repository import user_repository
from app.schemas.auth import LoginRequest, SessionResponse, SignupRequest
from app.services.draft_service import draft_service
from app.services.media_service import media_service
from app.services.settings_service import settings_service
from app.services.user_service import (
    PASSWORD_MIN_CHARS,
    USERNAME_MAX_CHARS,
    USERNAME_MIN_CHARS,
    normalize_account_fields,
)
from app.utils.exceptions import (
    BadRequestError,
    DuplicateError,
    PermissionDeniedError,
    PersistenceError,
    UnauthorizedError,
    ValidationFailedError,
)
from app.utils.ids import utcnow
from app.utils.jwt import create_session_token, create_state_token, decode_token
from app.utils.password import hash_password, random_password_hash, verify_password

logger = logging.getLogger(__name__)

GOOGLE_AUTHORIZE_URL: str = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL: str = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL: str = "https://openidconnect.googleapis.com/v1/userinfo"

_SIGNUP_REQUIRED: tuple[str, ...] = (
    "first_name", "last_name", "username", "password", "email", "phone_number",
)


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.
    Manages signup, citizen/admin login, logout and the Google OAuth code flow.
    """

    async def issue_session(self, db: AsyncSession, user: User) -> SessionResponse:
        """세션 행과 세션 토큰을 생성합니다.

        Create a session row and the signed token that points at it.
        The lifetime comes from the durable organisation settings.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user: 로그인한 사용자 (Signed-in user)

        Returns:
            SessionResponse: 토큰 응답 (Token response)
        """
        minutes: int = await settings_service.session_timeout_minutes(db)
        expires_at: datetime = datetime.now(timezone.utc) + timedelta(minutes=minutes)
        db_session = await session_repository.create(db, user.id, expires_at)

        token: str = create_session_token(
            {"sub": str(user.id), "sid": str(db_session.id), "adm": user.is_admin},
            expires_at=expires_at,
        )
        return SessionResponse(
            access_token=token, expires_at=expires_at, is_admin=user.is_admin, user_id=user.id
        )

    async def signup(self, db: AsyncSession, data: SignupRequest) -> tuple[User, SessionResponse]:
        """회원가입을 처리합니다.

        Create a local account and sign it in.

        Raises:
            ValidationFailedError: 필수 필드 누락 또는 규칙 위반 (Missing or invalid field)
            DuplicateError: 이메일/사용자명/전화번호 중복 (Unique field already registered)
        """
        values: dict = data.model_dump()
        missing = [field for field in _SIGNUP_REQUIRED if not (values.get(field) or "").strip()]
        if missing:
            raise ValidationFailedError(
                missing[0], "required", f"Missing required fields: {', '.join(missing)}"
            )
        if len(data.password) < PASSWORD_MIN_CHARS:
            raise ValidationFailedError(
                "password", "length",
                f"Password must be at least {PASSWORD_MIN_CHARS} characters long",
            )

        password: str = values.pop("password")
        values = normalize_account_fields(values)

        conflict = await user_repository.find_conflict(
            db, values["username"], values["email"], values["phone_number"]
        )
        if conflict is not None:
            raise DuplicateError(f"User with this {conflict} already exists")

        user: User = await user_repository.create(
            db, {**values, "password_hash": hash_password(password)}
        )
        return user, await self.issue_session(db, user)

    async def login(
        self,
        db: AsyncSession,
        data: LoginRequest,
        admin_only: bool = False,
    ) -> SessionResponse:
        """로그인을 처리합니다.

        Process login with a username or e-mail. Admin login additionally
        requires the administrator flag.

        Raises:
            UnauthorizedError: 잘못된 인증 정보 (Invalid credentials)
            PermissionDeniedError: 관리자 로그인에 일반 계정 (Non-admin on admin login)
        """
        identifier: str = (data.username or "").strip()
        if not identifier or not data.password:
            raise UnauthorizedError("Username and password are required")

        user: User | None = await user_repository.get_by_identifier(db, identifier)
        if user is None or not verify_password(data.password, user.password_hash):
            raise UnauthorizedError("Invalid username or password")
        if admin_only and not user.is_admin:
            raise PermissionDeniedError("Administrator access required")

        return await self.issue_session(db, user)

    async def logout(self, db: AsyncSession, session_id: UUID) -> None:
        """로그아웃 — 초안(사진 포함)을 버리고 세션을 삭제합니다.

        End the session: delete the draft and session rows, commit, then
        remove the draft media.

        Raises:
            PersistenceError: DB 오류, 사진은 유지됨 (Database failure; media kept)
        """
        try:
            image_path = await draft_service.discard_draft(db, session_id)
            await session_repository.delete(db, session_id)
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            raise PersistenceError("Could not end the session")
        media_service.remove(image_path)

    async def purge_expired_sessions(self, db: AsyncSession, user_id: UUID) -> int:
        """만료된 세션 정리 — 로그인 직후 호출.

        Delete the user's expired sessions together with their drafts,
        commit, then remove the draft media. Returns the number of sessions
        removed. A failure is logged and leaves the rows for the next login.
        """
        try:
            session_ids = await session_repository.get_expired_ids(db, user_id, utcnow())
            image_paths: list[str] = []
            for session_id in session_ids:
                image_path = await draft_service.discard_draft(db, session_id)
                if image_path:
                    image_paths.append(image_path)
            await session_repository.delete_many(db, session_ids)
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            logger.warning("Expired session purge failed for user %s", user_id, exc_info=True)
            return 0

        for image_path in image_paths:
            media_service.remove(image_path)
        return len(session_ids)

    # --- Google OAuth ---

    def google_authorization_url(self) -> str:
        """Google 인증 URL — Authorization URL carrying a signed state value.

        Raises:
            BadRequestError: Google 로그인 미설정 (Google sign-in not configured)
        """
        if not settings.GOOGLE_CLIENT_ID:
            raise BadRequestError("Google sign-in is not configured")
        params = {
            "client_id": settings.GOOGLE_CLIENT_ID,
            "response_type": "code",
            "scope": "openid email profile",
            "redirect_uri": settings.GOOGLE_REDIRECT_URI,
            "state": create_state_token({"provider": "google"}),
            "prompt": "select_account",
        }
        return f"{GOOGLE_AUTHORIZE_URL}?{urlencode(params)}"

    async def fetch_google_profile(self, code: str) -> dict:
        """인가 코드를 교환하고 사용자 정보를 조회합니다.

        Exchange the authorization code and fetch the Google userinfo document.

        Raises:
            UnauthorizedError: Google 응답 실패 (Google rejected the exchange)
        """
        async with httpx.AsyncClient(timeout=10.0) as client:
            try:
                token_res = await client.post(GOOGLE_TOKEN_URL, data={
                    "code": code,
                    "client_id": settings.GOOGLE_CLIENT_ID,
                    "client_secret": settings.GOOGLE_CLIENT_SECRET,
                    "redirect_uri": settings.GOOGLE_REDIRECT_URI,
                    "grant_type": "authorization_code",
                })
                token_res.raise_for_status()
                access_token: str = token_res.json()["access_token"]

                info_res = await client.get(
                    GOOGLE_USERINFO_URL,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                info_res.raise_for_status()
            except (httpx.HTTPError, KeyError, ValueError):
                raise UnauthorizedError("Google sign-in failed")
        return info_res.json()

    async def _unique_username(self, db: AsyncSession, email: str) -> str:
        """이메일에서 고유 사용자명 생성 — e.g. "jane.doe@x.org" → "janedoe", "janedoe1", ..."""
        base: str = re.sub(r"[^a-zA-Z0-9]", "", email.split("@")[0]) or "user"
        if len(base) < USERNAME_MIN_CHARS:
            base = f"{base}user"
        base = base[:USERNAME_MAX_CHARS - 4]

        username: str = base
        counter: int = 0
        while await user_repository.exists(db, {"username": username}):
            counter += 1
            username = f"{base}{counter}"
        return username

    async def google_callback(
        self,
        db: AsyncSession,
        code: str | None,
        state: str | None,
    ) -> SessionResponse:
        """Google 로그인 콜백을 처리합니다.

        Verify the state value, fetch the Google profile and sign the user in.
        An existing account with the same e-mail is signed in (and linked);
        otherwise a verified account is created with a username derived
        from the e-mail.

        Raises:
            UnauthorizedError: state 불일치, 코드 누락, 이메일 없음
                               (Bad state, missing code or no e-mail)
        """
        try:
            payload: dict = decode_token(state or "")
        except jwt.InvalidTokenError:
            raise UnauthorizedError("Invalid OAuth state")
        if payload.get("type") != "oauth_state" or not code:
            raise UnauthorizedError("Invalid OAuth state")

        profile: dict = await self.fetch_google_profile(code)
        email: str = str(profile.get("email") or "").strip().lower()
        google_id: str | None = profile.get("sub")
        if not email or not google_id:
            raise UnauthorizedError("Google account has no e-mail")

        user: User | None = await user_repository.get_by_email(db, email)
        if user is None:
            user = await user_repository.get_by_google_id(db, google_id)
        if user is not None:
            if user.google_id is None:
                await user_repository.update(db, user, {"google_id": google_id})
            return await self.issue_session(db, user)

        user = await user_repository.create(db, {
            "first_name": (profile.get("given_name") or "")[:50],
            "last_name": (profile.get("family_name") or "")[:50],
            "username": await self._unique_username(db, email),
            "email": email,
            "phone_number": None,
            "password_hash": random_password_hash(),
            "google_id": google_id,
            "is_verified": True,
            "avatar_url": profile.get("picture"),
        })
        return await self.issue_session(db, user)


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService()
