"""신고 초안 서비스 — 세션별 초안 저장소.

Draft Store — Holds at most one in-progress report per login session.
Drafts live in the report_drafts table keyed by session id (not in any
framework session object) and expire after DRAFT_TTL_MINUTES.
"""

from dataclasses import dataclass
from datetime import timedelta
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.report import ReportDraft
from app.repositories.report_repository import draft_repository
from app.services.media_service import StoredMedia, media_service
from app.utils.exceptions import NotFoundError, PersistenceError, ValidationFailedError
from app.utils.ids import as_utc, utcnow
from app.utils.validation import validate_coordinates


@dataclass(frozen=True)
class DraftLocation:
    """업로드 시점의 위치 정보 — Location captured with the photo."""

    latitude: float | None = None
    longitude: float | None = None
    address: str | None = None
    location_text: str | None = None


class DraftService:

    async def start_draft(
        self,
        db: AsyncSession,
        session_id: UUID,
        media: StoredMedia,
        location: DraftLocation,
    ) -> ReportDraft:
        """새 초안을 시작합니다. 기존 초안은 덮어쓰고 그 사진은 삭제됩니다.

        Start a draft for the session. An existing draft is overwritten and
        its media deleted once the overwrite is committed. Commits; if the write fails
        the new media is deleted and PersistenceError is raised.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            session_id: 로그인 세션 ID (Login session id)
            media: 저장된 사진 (Media already written by the ingest step)
            location: 위치 정보 (Captured location)

        Returns:
            ReportDraft: 현재 초안 (The session's draft)

        Raises:
            ValidationFailedError: 좌표 범위 위반, 새 사진은 삭제됨
                                   (Coordinate out of range; new media removed)
            PersistenceError: DB 오류, 새 사진은 삭제됨 (Database failure; new media removed)
        """
        try:
            validate_coordinates(location.latitude, location.longitude)
        except ValidationFailedError:
            media_service.discard(media)
            raise

        expires_at = utcnow() + timedelta(minutes=settings.DRAFT_TTL_MINUTES)
        values = {
            "image_path": media.path,
            "latitude": location.latitude,
            "longitude": location.longitude,
            "address": (location.address or "").strip() or None,
            "location_text": (location.location_text or "").strip() or None,
            "expires_at": expires_at,
        }

        try:
            draft = await draft_repository.get(db, session_id)
            if draft is None:
                draft = await draft_repository.save(db, ReportDraft(session_id=session_id, **values))
                await db.commit()
                return draft
            previous_image: str = draft.image_path
            for field, value in values.items():
                setattr(draft, field, value)
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            media_service.discard(media)
            raise PersistenceError("Could not save the report draft")

        # 이전 초안 사진 삭제 — Drop the superseded media
        if previous_image != media.path:
            media_service.remove(previous_image)
        return draft

    async def get_draft(self, db: AsyncSession, session_id: UUID) -> ReportDraft:
        """현재 초안을 반환합니다.

        Return the session's draft. An expired draft is purged (row and media)
        and reported as missing.

        Raises:
            NotFoundError: 초안이 없거나 만료됨 (No live draft for this session)
        """
        draft = await draft_repository.get(db, session_id)
        if draft is None:
            raise NotFoundError("No report draft in progress")
        if as_utc(draft.expires_at) <= utcnow():
            image_path = await self.discard_draft(db, session_id, draft)
            await db.commit()
            media_service.remove(image_path)
            raise NotFoundError("Report draft expired")
        return draft

    async def clear_draft(self, db: AsyncSession, session_id: UUID) -> None:
        """초안 행만 삭제 — Remove the draft row only; its media now belongs to a report."""
        await draft_repository.delete(db, session_id)

    async def discard_draft(
        self,
        db: AsyncSession,
        session_id: UUID,
        draft: ReportDraft | None = None,
    ) -> str | None:
        """초안 행 삭제 후 사진 경로 반환 (로그아웃, 만료).

        Delete the draft row and return its media path. The caller removes
        the file only after its transaction commits.
        """
        draft = draft or await draft_repository.get(db, session_id)
        if draft is None:
            return None
        image_path: str = draft.image_path
        await draft_repository.delete(db, session_id)
        return image_path


draft_service: DraftService = DraftService()
