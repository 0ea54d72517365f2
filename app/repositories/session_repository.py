"""세션 레포지토리 — 로그인 세션 CRUD.

Session Repository — Handles user_sessions rows that back session tokens.
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import UserSession
from app.utils.ids import as_utc


class SessionRepository:
    """로그인 세션 관련 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling login session rows.
    """

    async def create(
        self,
        db: AsyncSession,
        user_id: UUID,
        expires_at: datetime,
    ) -> UserSession:
        """새 세션을 생성합니다.

        Create a new session row.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 세션 소유자 사용자 ID (Session owner user UUID)
            expires_at: 세션 만료 일시 (Session expiration timestamp)

        Returns:
            UserSession: 생성된 세션 레코드 (Created session record)
        """
        db_session: UserSession = UserSession(user_id=user_id, expires_at=expires_at)
        db.add(db_session)
        await db.flush()
        await db.refresh(db_session)
        return db_session

    async def get(self, db: AsyncSession, session_id: UUID) -> UserSession | None:
        query: Select = select(UserSession).where(UserSession.id == session_id)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def delete(self, db: AsyncSession, session_id: UUID) -> bool:
        """세션을 삭제합니다 — Delete one session; False when it did not exist."""
        db_session: UserSession | None = await self.get(db, session_id)
        if db_session is None:
            return False
        await db.delete(db_session)
        await db.flush()
        return True

    async def get_expired_ids(self, db: AsyncSession, user_id: UUID, now: datetime) -> list[UUID]:
        """만료된 세션 ID 목록 — Ids of the user's sessions that expired before now."""
        result = await db.execute(
            select(UserSession.id, UserSession.expires_at).where(UserSession.user_id == user_id)
        )
        return [row.id for row in result if as_utc(row.expires_at) <= now]

    async def delete_many(self, db: AsyncSession, session_ids: list[UUID]) -> None:
        if not session_ids:
            return
        await db.execute(delete(UserSession).where(UserSession.id.in_(session_ids)))
        await db.flush()


# 싱글턴 인스턴스 — Singleton instance
session_repository: SessionRepository = SessionRepository()
