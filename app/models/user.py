"""사용자 및 세션 관련 SQLAlchemy ORM 모델 정의.

User and session SQLAlchemy ORM model definitions.

Tables:
    - users: 사용자 계정 (Citizen and administrator accounts)
    - user_sessions: 로그인 세션 (Durable login sessions; a draft is keyed by session)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, Integer, ForeignKey, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class User(Base):
    """사용자 모델 — 시민 및 관리자 계정 정보.

    User model — Account identity for citizens and administrators.
    A user signs in with a local password or a linked Google identity;
    is_admin grants access to the admin API.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        first_name: 이름 (Given name, max 50 chars)
        last_name: 성 (Family name, max 50 chars)
        username: 로그인 아이디 (Login username, globally unique)
        email: 이메일 (Lower-cased e-mail, globally unique)
        phone_number: 전화번호 (10 digits, unique; NULL for OAuth sign-ups)
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password)
        google_id: Google 계정 ID (Linked Google subject, optional)
        is_verified: 이메일 인증 여부 (E-mail verified, true for Google sign-ups)
        is_admin: 관리자 여부 (Administrator flag)
        address: 주소 (Postal address, optional, max 200 chars)
        age: 나이 (Age 1-120, optional)
        sex: 성별 (male / female / other, optional)
        avatar_url: 프로필 이미지 URL (Avatar URL, optional)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    first_name: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    # 로그인 아이디 — Login username (전역 고유, globally unique)
    username: Mapped[str] = mapped_column(String(30), unique=True, nullable=False)
    # 이메일 — 소문자로 저장 (Stored lower-cased)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    phone_number: Mapped[str | None] = mapped_column(String(10), unique=True, nullable=True)
    # 비밀번호 해시 — bcrypt hashed password (평문 저장 금지, never store plaintext)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    google_id: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False)
    address: Mapped[str | None] = mapped_column(String(200), nullable=True)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sex: Mapped[str | None] = mapped_column(String(10), nullable=True)  # male, female, other
    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    @property
    def display_name(self) -> str:
        return self.first_name or self.username


class UserSession(Base):
    """로그인 세션 테이블.

    Login session table. The session token carries this row's id in its
    "sid" claim; deleting the row (logout) revokes the token.

    Attributes:
        id: 세션 식별자 (Session identifier, keys the report draft)
        user_id: 소유 사용자 ID (Owner user UUID)
        expires_at: 만료 일시 (Expiration timestamp)
        created_at: 생성 일시 (Creation timestamp)
    """

    __tablename__ = "user_sessions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 사용자 FK — CASCADE: 사용자 삭제 시 세션도 삭제
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
