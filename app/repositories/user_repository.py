"""사용자 레포지토리 — 사용자 조회 및 목록 쿼리.

User Repository — Lookup and listing queries for users.
"""

from typing import Sequence

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the users table.
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_by_identifier(
        self,
        db: AsyncSession,
        identifier: str,
    ) -> User | None:
        """사용자명 또는 이메일로 사용자를 조회합니다.

        Retrieve a user by username or (case-insensitive) e-mail.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            identifier: 사용자명 또는 이메일 (Username or e-mail)

        Returns:
            User | None: 조회된 사용자 또는 None (Found user or None)
        """
        query: Select = select(User).where(
            or_(User.username == identifier, User.email == identifier.lower())
        )
        result = await db.execute(query)
        return result.scalars().first()

    async def get_by_email(self, db: AsyncSession, email: str) -> User | None:
        result = await db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def get_by_google_id(self, db: AsyncSession, google_id: str) -> User | None:
        result = await db.execute(select(User).where(User.google_id == google_id))
        return result.scalar_one_or_none()

    async def find_conflict(
        self,
        db: AsyncSession,
        username: str | None,
        email: str | None,
        phone_number: str | None,
        exclude_id=None,
    ) -> str | None:
        """고유 필드 충돌 검사 — Name the first unique field already taken, or None."""
        checks: list[tuple[str, object, str | None]] = [
            ("email", User.email, email.lower() if email else None),
            ("username", User.username, username),
            ("phone number", User.phone_number, phone_number),
        ]
        for label, column, value in checks:
            if not value:
                continue
            query: Select = select(func.count()).select_from(User).where(column == value)
            if exclude_id is not None:
                query = query.where(User.id != exclude_id)
            if ((await db.execute(query)).scalar() or 0) > 0:
                return label
        return None

    async def list_users(
        self,
        db: AsyncSession,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[User], int]:
        query: Select = select(User).order_by(User.created_at.desc())
        return await self.get_paginated(db, query, page, per_page)

    async def count_all(self, db: AsyncSession) -> int:
        return (await db.execute(select(func.count()).select_from(User))).scalar() or 0


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
