"""초기 데이터 시드 스크립트 — 테이블, 조직 설정, 첫 관리자 계정 생성.

Seed script — Creates tables, the organisation settings row and the first
administrator. Run this script once to bootstrap the database.

Usage:
    python -m app.seed

Creates:
    - app_settings 기본 행 (Default organisation settings row)
    - 1개 관리자 계정: SEED_ADMIN_USERNAME / SEED_ADMIN_PASSWORD (1 admin user)
"""

import asyncio

from app.config import settings
from app.database import Base, async_session, engine
from app.models import User
from app.repositories.user_repository import user_repository
from app.services.settings_service import settings_service
from app.utils.password import hash_password


async def seed() -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Seed the database with initial data.
    Creates tables if they don't exist, then the settings row and the
    admin account.

    Idempotent: 이미 있는 관리자는 건너뜁니다 (An existing admin is left untouched).
    """
    # 테이블 생성 — DDL 실행 (Create all tables from ORM metadata)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        await settings_service.get_settings(db)

        existing: User | None = await user_repository.get_by_identifier(
            db, settings.SEED_ADMIN_USERNAME
        )
        if existing is not None:
            await db.commit()
            print(f"Admin '{existing.username}' already exists. Skipping.")
            return

        admin: User = await user_repository.create(
            db,
            {
                "username": settings.SEED_ADMIN_USERNAME,
                "email": settings.SEED_ADMIN_EMAIL.lower(),
                "first_name": "System",
                "last_name": "Admin",
                "password_hash": hash_password(settings.SEED_ADMIN_PASSWORD),
                "is_verified": True,
                "is_admin": True,
            },
        )
        await db.commit()
        print(f"Seeded: admin user={admin.username}")


if __name__ == "__main__":
    asyncio.run(seed())
