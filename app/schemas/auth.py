"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers signup, login, session token issuance and the current user profile.
Field rules (lengths, phone format) are checked in AuthService so that the
error detail carries the offending field name.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """로그인 요청 스키마.

    Login request schema shared by citizen and admin login.

    Attributes:
        username: 사용자명 또는 이메일 (Username or e-mail)
        password: 비밀번호 (Plain text password, verified against bcrypt hash)
    """

    username: str  # 사용자명 또는 이메일 (Username or e-mail)
    password: str  # 비밀번호 — 평문, 서버에서 bcrypt 해시와 비교 (Plain text, compared to bcrypt hash)


class SignupRequest(BaseModel):
    """회원가입 요청 스키마.

    Local account signup request schema.

    Attributes:
        first_name: 이름 (Given name)
        last_name: 성 (Family name)
        username: 사용자명 3-30자 (Username, 3-30 chars)
        password: 비밀번호 6자 이상 (Password, at least 6 chars)
        email: 이메일 (E-mail address)
        phone_number: 전화번호 10자리 (10-digit phone number)
    """

    first_name: str = ""
    last_name: str = ""
    username: str = ""
    password: str = ""
    email: str = ""
    phone_number: str = ""


class SessionResponse(BaseModel):
    """세션 토큰 발급 응답 스키마.

    Returned after login, signup and Google sign-in. The same token is
    also set as an HttpOnly cookie.

    Attributes:
        access_token: 세션 JWT (Signed session token)
        token_type: 토큰 유형 (Always "bearer" for Authorization header)
        expires_at: 세션 만료 일시 (Session expiry)
        is_admin: 관리자 여부 (Administrator flag)
        user_id: 로그인한 사용자 ID (Signed-in user)
    """

    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    is_admin: bool = False
    user_id: UUID | None = None


class ProfileResponse(BaseModel):
    """현재 사용자 정보 응답 스키마 (GET /auth/profile, GET /settings)."""

    id: str
    first_name: str
    last_name: str
    username: str
    email: str
    phone_number: str | None
    address: str | None
    age: int | None
    sex: str | None
    avatar_url: str | None
    is_verified: bool
    is_admin: bool
    created_at: datetime
