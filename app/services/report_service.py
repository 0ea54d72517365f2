"""신고 서비스.

Report service — Report commit, owner edit/delete and the status lifecycle.

Commit, edit and delete commit their own transaction: whether a stored
file is kept or removed depends on the outcome of that transaction.
"""

from datetime import datetime, timezone
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.report import (
    REPORT_STATUSES,
    STATUS_CLOSED,
    STATUS_IN_PROGRESS,
    STATUS_OPEN,
    STATUS_RESOLVED,
    Report,
)
from app.models.user import User
from app.repositories.contribution_repository import contribution_repository
from app.repositories.report_repository import report_repository
from app.schemas.report import ReportMetadata, ReportUpdate
from app.services.draft_service import draft_service
from app.services.media_service import StoredMedia, media_service
from app.utils.exceptions import (
    InvalidStateTransitionError,
    NotFoundError,
    PermissionDeniedError,
    PersistenceError,
    ValidationFailedError,
)
from app.utils.validation import validate_coordinates, validate_report_fields

# 관리자 상태 전이 — Administrative transitions; closed is terminal
ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    STATUS_OPEN: frozenset({STATUS_IN_PROGRESS, STATUS_RESOLVED, STATUS_CLOSED}),
    STATUS_IN_PROGRESS: frozenset({STATUS_OPEN, STATUS_RESOLVED, STATUS_CLOSED}),
    STATUS_RESOLVED: frozenset({STATUS_IN_PROGRESS, STATUS_CLOSED}),
    STATUS_CLOSED: frozenset(),
}

# 사용자가 지정할 수 있는 필드 — Fields a submitter may set
_EDITABLE_FIELDS: tuple[str, ...] = (
    "title", "description", "department", "address",
    "location_text", "latitude", "longitude",
)
_OPTIONAL_TEXT_FIELDS: frozenset[str] = frozenset({"department", "location_text"})


def _clean(field: str, value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        if not value and field in _OPTIONAL_TEXT_FIELDS:
            return None
    return value


class ReportService:

    async def build_response(self, db: AsyncSession, report: Report) -> dict:
        reporter_result = await db.execute(
            select(User.first_name, User.username).where(User.id == report.user_id)
        )
        row = reporter_result.first()
        reporter: str = (row.first_name or row.username) if row else "Anonymous"

        return {
            "id": str(report.id),
            "report_id": report.report_code,
            "user_id": str(report.user_id),
            "reporter": reporter,
            "title": report.title,
            "description": report.description,
            "department": report.department,
            "address": report.address,
            "location_text": report.location_text,
            "latitude": report.latitude,
            "longitude": report.longitude,
            "image_path": report.image_path,
            "status": report.status,
            "resolved_at": report.resolved_at,
            "created_at": report.created_at,
            "updated_at": report.updated_at,
        }

    # --- Commit ---

    async def commit_report(
        self,
        db: AsyncSession,
        user_id: UUID,
        metadata: ReportMetadata,
        media: StoredMedia,
        session_id: UUID | None = None,
    ) -> Report:
        """검증된 메타데이터와 사진으로 신고를 저장합니다.

        Persist a report from validated metadata and resolved media.
        When session_id is given the media came from that session's draft,
        and the draft row is removed in the same transaction.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 작성자 ID (Submitting user)
            metadata: 제출 필드 (Submitted fields)
            media: 초안 사진(fresh=False) 또는 새 업로드(fresh=True)
                   (Draft media or freshly ingested media)
            session_id: 초안을 사용한 경우 세션 ID (Session whose draft is consumed)

        Returns:
            Report: 저장된 신고, status=open (Persisted report)

        Raises:
            ValidationFailedError: 필드 규칙 위반, 새 사진은 삭제됨
                                   (Field rule failed; fresh media removed)
            PersistenceError: DB 오류, 새 사진은 삭제됨
                              (Database failure; fresh media removed)
        """
        try:
            validate_report_fields(metadata.title, metadata.description, metadata.address)
            validate_coordinates(metadata.latitude, metadata.longitude)
        except ValidationFailedError:
            media_service.discard(media)
            raise

        values: dict[str, Any] = {
            field: _clean(field, getattr(metadata, field)) for field in _EDITABLE_FIELDS
        }
        values.update({"user_id": user_id, "image_path": media.path, "status": STATUS_OPEN})

        try:
            report = await report_repository.create(db, values)
            if session_id is not None:
                await draft_service.clear_draft(db, session_id)
            await db.commit()
        except ValueError as exc:
            await db.rollback()
            media_service.discard(media)
            raise ValidationFailedError("report", "model", str(exc))
        except SQLAlchemyError:
            await db.rollback()
            media_service.discard(media)
            raise PersistenceError("Could not save the report")
        return report

    # --- 조회 ---

    async def list_for_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Report], int]:
        return await report_repository.get_by_user(db, user_id, page, per_page)

    async def get_own(self, db: AsyncSession, report_id: UUID, user_id: UUID) -> Report:
        report = await report_repository.get_for_owner(db, report_id, user_id)
        if report is None:
            raise NotFoundError("Report not found")
        return report

    async def list_all(
        self,
        db: AsyncSession,
        status: str | None = None,
        department: str | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Report], int]:
        """관리자 신고 목록 — All reports, optional status/department filter."""
        status = None if status in (None, "", "all") else status
        department = None if department in (None, "", "all") else department
        return await report_repository.get_filtered(db, status, department, page, per_page)

    async def browse(
        self,
        db: AsyncSession,
        department: str | None = None,
        location: str | None = None,
        search: str | None = None,
        status: str | None = STATUS_OPEN,
        sort: str = "newest",
        page: int = 1,
    ) -> tuple[Sequence[Report], int]:
        """공개 신고 목록 — Public browser; "all" (or empty) disables a department/status filter."""
        if department == "all":
            department = None
        if status in (None, "", "all"):
            status = None
        elif status not in REPORT_STATUSES:
            raise ValidationFailedError("status", "choice", "Unknown status filter")
        return await report_repository.browse(
            db, department=department, location=location, search=search,
            status=status, sort=sort, page=page,
        )

    async def get_detail(self, db: AsyncSession, report_id: UUID) -> Report:
        report = await report_repository.get_by_id(db, report_id)
        if report is None:
            raise NotFoundError("Report not found")
        return report

    # --- 작성자 수정/삭제 ---

    async def get_mutable(self, db: AsyncSession, report_id: UUID, user_id: UUID) -> Report:
        """작성자가 수정/삭제할 수 있는 신고를 반환합니다.

        Load a report the caller may edit or delete. The status is checked
        before ownership: a report that left "open" is frozen for everyone.

        Raises:
            NotFoundError: 신고 없음 (Unknown report)
            InvalidStateTransitionError: 상태가 open이 아님 (Status is not open)
            PermissionDeniedError: 작성자가 아님 (Caller is not the owner)
        """
        report = await self.get_detail(db, report_id)
        if report.status != STATUS_OPEN:
            raise InvalidStateTransitionError(
                f"Report is {report.status}; only open reports can be changed"
            )
        if report.user_id != user_id:
            raise PermissionDeniedError("Only the reporter can change this report")
        return report

    async def edit_report(
        self,
        db: AsyncSession,
        report: Report,
        data: ReportUpdate,
        new_media: StoredMedia | None = None,
    ) -> Report:
        """신고를 수정합니다. 새 사진은 DB 반영 후에 기존 사진을 삭제합니다.

        Apply an owner edit. When a new photo is given, the record update is
        committed first and only then is the previous file deleted; on any
        failure the new file is deleted and the old one kept.
        """
        changes: dict[str, Any] = {
            field: _clean(field, value)
            for field, value in data.model_dump(exclude_unset=True).items()
            if field in _EDITABLE_FIELDS
        }

        merged = {field: changes.get(field, getattr(report, field)) for field in _EDITABLE_FIELDS}
        try:
            validate_report_fields(merged["title"], merged["description"], merged["address"])
            validate_coordinates(merged["latitude"], merged["longitude"])
        except ValidationFailedError:
            media_service.discard(new_media)
            raise

        previous_image: str = report.image_path
        if new_media is not None:
            changes["image_path"] = new_media.path

        try:
            report = await report_repository.update(db, report, changes)
            await db.commit()
        except ValueError as exc:
            await db.rollback()
            media_service.discard(new_media)
            raise ValidationFailedError("report", "model", str(exc))
        except SQLAlchemyError:
            await db.rollback()
            media_service.discard(new_media)
            raise PersistenceError("Could not update the report")

        if new_media is not None and previous_image != new_media.path:
            media_service.remove(previous_image)
        return report

    async def delete_report(self, db: AsyncSession, report: Report) -> None:
        """신고와 사진을 삭제합니다. 사진 삭제 실패는 기록만 합니다.

        Delete the report, its contributions and, after the commit, their
        media. Media removal is best-effort and never blocks the deletion.
        """
        image_paths: list[str] = [report.image_path]
        try:
            image_paths += await contribution_repository.delete_by_report(db, report.id)
            await report_repository.delete(db, report)
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            raise PersistenceError("Could not delete the report")

        for path in image_paths:
            media_service.remove(path)

    # --- 관리자 상태 전이 ---

    async def change_status(
        self,
        db: AsyncSession,
        report_id: UUID,
        new_status: str,
    ) -> Report:
        """관리자 상태 변경 — Administrative status transition (flushes; caller commits)."""
        if new_status not in REPORT_STATUSES:
            raise ValidationFailedError(
                "status", "choice", f"Status must be one of {', '.join(REPORT_STATUSES)}"
            )
        report = await self.get_detail(db, report_id)
        if new_status not in ALLOWED_TRANSITIONS[report.status]:
            raise InvalidStateTransitionError(
                f"Cannot move report from {report.status} to {new_status}"
            )

        update_data: dict[str, Any] = {"status": new_status}
        # resolved 진입 시 시각 기록, 이탈 시 초기화 — Stamp on entering resolved, clear on leaving
        if new_status == STATUS_RESOLVED:
            update_data["resolved_at"] = datetime.now(timezone.utc)
        elif report.status == STATUS_RESOLVED:
            update_data["resolved_at"] = None
        return await report_repository.update(db, report, update_data)


report_service: ReportService = ReportService()
