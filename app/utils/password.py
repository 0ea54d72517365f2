"""비밀번호 해싱 및 검증 유틸리티 모듈.

Password hashing and verification for local accounts.
OAuth-created accounts receive a random password hash so that the column
stays non-null; they sign in through Google only until they set one.
"""

import secrets

import bcrypt


def hash_password(password: str) -> str:
    """평문 비밀번호를 bcrypt 해시로 변환합니다.

    Hash a plain text password with a fresh bcrypt salt.

    Args:
        password: 평문 비밀번호 (Plain text password to hash)

    Returns:
        str: bcrypt 해시 문자열 (Bcrypt hash string, ~60 chars)
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=12)).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """평문 비밀번호와 bcrypt 해시를 비교 검증합니다.

    Returns:
        bool: 일치하면 True (True if password matches hash)
    """
    return bcrypt.checkpw(
        plain_password.encode("utf-8"), hashed_password.encode("utf-8")
    )


def random_password_hash() -> str:
    """추측 불가능한 비밀번호 해시 — Hash of a random password nobody knows."""
    return hash_password(secrets.token_urlsafe(24))
