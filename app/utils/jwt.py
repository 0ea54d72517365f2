"""세션 토큰 생성 및 검증 유틸리티 모듈.

Session token creation and verification utility module.
A session token is a signed JWT that points at a durable user_sessions row;
revoking the row (logout) invalidates the token even before it expires.

JWT Payload Structure:
    {
        "sub": "user_uuid",      # 사용자 ID (User identifier)
        "sid": "session_uuid",   # 세션 ID (Session identifier, keys the report draft)
        "adm": false,            # 관리자 여부 (Administrator flag at issue time)
        "exp": 1234567890,       # 만료 시간 UNIX timestamp (Expiration)
        "type": "access"         # 토큰 유형 (Token type discriminator)
    }
"""

from datetime import datetime, timedelta, timezone
from typing import Any
import jwt

from app.config import settings


def create_session_token(data: dict[str, Any], expires_at: datetime | None = None) -> str:
    """세션 JWT를 생성합니다.

    Generate a signed session token with the given payload data.
    The token expires with its session row (SESSION_EXPIRE_MINUTES by default).

    Args:
        data: JWT 페이로드 데이터, 일반적으로 {"sub": user_id, "sid": session_id, "adm": bool}
              (JWT payload data)
        expires_at: 만료 일시, None이면 설정값 사용 (Expiry; defaults to now + SESSION_EXPIRE_MINUTES)

    Returns:
        str: 인코딩된 JWT 문자열 (Encoded JWT token string)
    """
    to_encode: dict[str, Any] = data.copy()
    expire: datetime = expires_at or datetime.now(timezone.utc) + timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_state_token(data: dict[str, Any], minutes: int = 10) -> str:
    """OAuth state 값 — Short-lived signed value carried through the OAuth redirect."""
    to_encode: dict[str, Any] = data.copy()
    to_encode.update({
        "exp": datetime.now(timezone.utc) + timedelta(minutes=minutes),
        "type": "oauth_state",
    })
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    """JWT 토큰을 디코딩하고 검증합니다.

    Decode and verify a JWT token string.

    Raises:
        jwt.ExpiredSignatureError: 토큰 만료 시 (When token has expired)
        jwt.InvalidTokenError: 유효하지 않은 토큰 (When token is invalid)
    """
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
