"""조직 설정 레포지토리.

Settings repository — Reads and creates the single app_settings row.
"""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.setting import AppSetting

SETTINGS_ROW_ID: int = 1


class SettingRepository:

    async def get(self, db: AsyncSession) -> AppSetting | None:
        result = await db.execute(select(AppSetting).where(AppSetting.id == SETTINGS_ROW_ID))
        return result.scalar_one_or_none()

    async def create(self, db: AsyncSession, values: dict[str, Any]) -> AppSetting:
        row = AppSetting(id=SETTINGS_ROW_ID, **values)
        db.add(row)
        await db.flush()
        await db.refresh(row)
        return row


setting_repository: SettingRepository = SettingRepository()
