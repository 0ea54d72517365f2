"""기여 서비스 — 다른 사용자의 추가 증거, 투표, 검토.

Contribution service — Supplementary evidence attached to a report by
users other than its owner, up/down votes and moderation.
"""

from typing import Any, Sequence
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.contribution import Contribution
from app.models.report import Report
from app.repositories.contribution_repository import contribution_repository
from app.repositories.report_repository import report_repository
from app.schemas.contribution import ContributionStatusUpdate
from app.services.media_service import CONTRIBUTION_FOLDER, StoredMedia, media_service
from app.utils.exceptions import (
    BadRequestError,
    NotFoundError,
    PermissionDeniedError,
    PersistenceError,
    ValidationFailedError,
)
from app.utils.validation import validate_contribution_fields

# 투표 값 → 카운터 컬럼 — Vote value to counter column
_VOTE_COLUMNS: dict[str, str] = {"up": "upvotes", "down": "downvotes"}


class ContributionService:

    def build_response(self, contribution: Contribution) -> dict:
        return {
            "id": str(contribution.id),
            "report_id": str(contribution.report_id),
            "contributor_id": str(contribution.contributor_id),
            "title": contribution.title,
            "description": contribution.description,
            "images": list(contribution.images or []),
            "status": contribution.status,
            "helpful": contribution.helpful,
            "upvotes": contribution.upvotes,
            "downvotes": contribution.downvotes,
            "created_at": contribution.created_at,
        }

    async def _get_report(self, db: AsyncSession, report_id: UUID) -> Report:
        report = await report_repository.get_by_id(db, report_id)
        if report is None:
            raise NotFoundError("Report not found")
        return report

    async def create_contribution(
        self,
        db: AsyncSession,
        report_id: UUID,
        contributor_id: UUID,
        title: str | None,
        description: str | None,
        uploads: list[UploadFile],
    ) -> Contribution:
        """신고에 기여를 추가합니다.

        Attach evidence to someone else's report. Every image is checked
        and stored before the row is written; if any later step fails, all
        images stored by this call are removed.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            report_id: 대상 신고 ID (Target report)
            contributor_id: 기여자 ID (Contributing user)
            title: 제목, 최대 100자 (Title, max 100 chars)
            description: 설명, 최대 500자 (Description, max 500 chars)
            uploads: 사진 1-5장 (1 to CONTRIBUTION_MAX_IMAGES images)

        Returns:
            Contribution: 생성된 기여 (Created contribution, status pending)

        Raises:
            NotFoundError: 신고 없음 (Unknown report)
            PermissionDeniedError: 본인 신고에 기여 (Contributing to own report)
            ValidationFailedError: 필드 또는 사진 수 위반 (Field or image-count rule failed)
            InvalidMediaTypeError / PayloadTooLargeError: 사진 검증 실패 (Image rejected)
            PersistenceError: DB 오류 (Database failure)
        """
        report = await self._get_report(db, report_id)
        if report.user_id == contributor_id:
            raise PermissionDeniedError("You cannot contribute to your own report")

        validate_contribution_fields(title, description)

        files = [upload for upload in uploads if upload is not None and upload.filename]
        if not files:
            raise ValidationFailedError("images", "required", "At least one image is required")
        if len(files) > settings.CONTRIBUTION_MAX_IMAGES:
            raise ValidationFailedError(
                "images", "count",
                f"You can upload at most {settings.CONTRIBUTION_MAX_IMAGES} images",
            )

        stored: list[StoredMedia] = []
        try:
            for upload in files:
                stored.append(await media_service.ingest_upload(
                    upload,
                    CONTRIBUTION_FOLDER,
                    settings.CONTRIBUTION_MAX_UPLOAD_BYTES,
                    field="images",
                ))
        except Exception:
            for media in stored:
                media_service.discard(media)
            raise

        values: dict[str, Any] = {
            "report_id": report.id,
            "contributor_id": contributor_id,
            "title": title.strip(),
            "description": description.strip(),
            "images": [media.path for media in stored],
        }
        try:
            contribution = await contribution_repository.create(db, values)
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            for media in stored:
                media_service.discard(media)
            raise PersistenceError("Could not save the contribution")
        return contribution

    async def list_for_report(
        self,
        db: AsyncSession,
        report_id: UUID,
    ) -> tuple[Report, Sequence[Contribution]]:
        report = await self._get_report(db, report_id)
        contributions = await contribution_repository.get_by_report(db, report_id)
        return report, contributions

    async def vote(self, db: AsyncSession, contribution_id: UUID, vote: str | None) -> tuple[int, int]:
        """투표 — Add one up- or down-vote. Every call counts; votes are not deduplicated."""
        column = _VOTE_COLUMNS.get((vote or "").strip().lower())
        if column is None:
            raise BadRequestError("Invalid vote")
        counts = await contribution_repository.increment_vote(db, contribution_id, column)
        if counts is None:
            raise NotFoundError("Contribution not found")
        return counts

    async def moderate(
        self,
        db: AsyncSession,
        contribution_id: UUID,
        data: ContributionStatusUpdate,
    ) -> Contribution:
        """관리자 검토 — Set moderation status and optionally the helpful flag."""
        contribution = await contribution_repository.get_by_id(db, contribution_id)
        if contribution is None:
            raise NotFoundError("Contribution not found")
        update_data: dict[str, Any] = data.model_dump(exclude_none=True)
        return await contribution_repository.update(db, contribution, update_data)


contribution_service: ContributionService = ContributionService()
