"""조직 설정 서비스.

Settings service — Durable organisation settings edited by administrators.
The row is created on first read from the process configuration.
"""

import re

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.setting import AppSetting
from app.repositories.setting_repository import setting_repository
from app.schemas.common import AppSettingsUpdate
from app.utils.exceptions import ValidationFailedError

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")
_EMAIL = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

SESSION_TIMEOUT_MIN: int = 5
SESSION_TIMEOUT_MAX: int = 1440


class SettingsService:

    async def get_settings(self, db: AsyncSession) -> AppSetting:
        """설정 행을 반환합니다. 없으면 기본값으로 생성합니다 (flush only)."""
        row = await setting_repository.get(db)
        if row is None:
            row = await setting_repository.create(
                db, {"session_timeout_minutes": settings.SESSION_EXPIRE_MINUTES}
            )
        return row

    async def session_timeout_minutes(self, db: AsyncSession) -> int:
        row = await setting_repository.get(db)
        if row is None:
            return settings.SESSION_EXPIRE_MINUTES
        return row.session_timeout_minutes

    def build_response(self, row: AppSetting) -> dict:
        return {
            "org_name": row.org_name,
            "org_email": row.org_email,
            "primary_color": row.primary_color,
            "accent_color": row.accent_color,
            "session_timeout_minutes": row.session_timeout_minutes,
        }

    async def update_settings(self, db: AsyncSession, data: AppSettingsUpdate) -> AppSetting:
        """설정 수정 — Validate and apply the given fields; the caller commits.

        Raises:
            ValidationFailedError: 형식 또는 범위 위반 (Bad format or range)
        """
        update_data = data.model_dump(exclude_unset=True, exclude_none=True)

        if "org_name" in update_data:
            update_data["org_name"] = update_data["org_name"].strip()
            if not update_data["org_name"]:
                raise ValidationFailedError("org_name", "required", "Organization name is required")
        if "org_email" in update_data:
            update_data["org_email"] = update_data["org_email"].strip().lower()
            if not _EMAIL.match(update_data["org_email"]):
                raise ValidationFailedError("org_email", "format", "Enter a valid e-mail address")
        for field in ("primary_color", "accent_color"):
            if field in update_data and not _HEX_COLOR.match(update_data[field]):
                raise ValidationFailedError(field, "format", "Colours must look like #1a2b3c")
        timeout = update_data.get("session_timeout_minutes")
        if timeout is not None and not SESSION_TIMEOUT_MIN <= timeout <= SESSION_TIMEOUT_MAX:
            raise ValidationFailedError(
                "session_timeout_minutes", "range",
                f"Session timeout must be between {SESSION_TIMEOUT_MIN} and {SESSION_TIMEOUT_MAX} minutes",
            )

        row = await self.get_settings(db)
        for field, value in update_data.items():
            setattr(row, field, value)
        await db.flush()
        await db.refresh(row)
        return row


settings_service: SettingsService = SettingsService()
