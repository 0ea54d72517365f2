"""식별자 및 시간 유틸리티.

Human-readable report codes, collision-resistant media names and
UTC helpers. SQLite returns naive datetimes, so expiry checks go
through as_utc().
"""

import secrets
import time
from datetime import datetime, timezone

_BASE36: str = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_report_code() -> str:
    """신고 코드 생성 — e.g. "Rm1x2k3p4-a9b8c7" (R + base36 ms + 6 random chars)."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(6))
    return f"R{to_base36(int(time.time() * 1000))}-{suffix}"


def generate_media_name(extension: str) -> str:
    """미디어 파일명 생성 — UTC timestamp + random suffix, extension kept."""
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S%f")
    return f"{stamp}-{secrets.token_hex(4)}{extension}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """naive 값은 UTC로 간주 — Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
