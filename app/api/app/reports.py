"""신고 라우터 — 신고 제출, 초안, 내 신고, 수정/삭제.

Report Router — Report submission (direct upload, camera capture and the
two-step draft flow), the user's own reports, and owner edit/delete.
Submission routes take browser forms: multipart for photo uploads and
urlencoded for base64 camera captures.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_session, get_current_user
from app.config import settings
from app.database import get_db
from app.models.user import User, UserSession
from app.schemas.common import PaginatedResponse
from app.schemas.report import ReportMetadata, ReportUpdate
from app.services.draft_service import DraftLocation, draft_service
from app.services.media_service import (
    ALLOWED_EXTENSIONS,
    ALLOWED_MIME_TYPES,
    REPORT_FOLDER,
    StoredMedia,
    media_service,
)
from app.services.report_service import report_service
from app.utils.exceptions import NotFoundError
from app.utils.validation import (
    DESCRIPTION_MAX_WORDS,
    DESCRIPTION_MIN_WORDS,
    TITLE_MAX_WORDS,
    TITLE_MIN_WORDS,
    parse_coordinate,
)

router: APIRouter = APIRouter()


def report_form(
    title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    department: Annotated[str | None, Form()] = None,
    address: Annotated[str | None, Form()] = None,
    location_text: Annotated[str | None, Form(alias="locationText")] = None,
    latitude: Annotated[str | None, Form()] = None,
    longitude: Annotated[str | None, Form()] = None,
) -> ReportMetadata:
    """신고 폼 필드 — Allow-listed report fields from a submission form."""
    return ReportMetadata(
        title=title,
        description=description,
        department=department,
        address=address,
        location_text=location_text,
        latitude=parse_coordinate("latitude", latitude),
        longitude=parse_coordinate("longitude", longitude),
    )


def location_form(
    address: Annotated[str | None, Form()] = None,
    location_text: Annotated[str | None, Form(alias="locationText")] = None,
    latitude: Annotated[str | None, Form()] = None,
    longitude: Annotated[str | None, Form()] = None,
) -> DraftLocation:
    """초안 위치 필드 — Location captured with a draft photo."""
    return DraftLocation(
        latitude=parse_coordinate("latitude", latitude),
        longitude=parse_coordinate("longitude", longitude),
        address=address,
        location_text=location_text,
    )


# --- 제출 ---


@router.get("/report/upload")
async def upload_form(
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """신고 작성 화면 정보 — Limits and accepted types for the submission form."""
    return {
        "username": current_user.username,
        "email": current_user.email,
        "max_upload_bytes": settings.REPORT_MAX_UPLOAD_BYTES,
        "allowed_types": sorted(ALLOWED_MIME_TYPES),
        "allowed_extensions": sorted(ALLOWED_EXTENSIONS),
        "title_words": [TITLE_MIN_WORDS, TITLE_MAX_WORDS],
        "description_words": [DESCRIPTION_MIN_WORDS, DESCRIPTION_MAX_WORDS],
    }


@router.post("/report/upload", status_code=201)
async def upload_report(
    current_user: Annotated[User, Depends(get_current_user)],
    metadata: Annotated[ReportMetadata, Depends(report_form)],
    db: Annotated[AsyncSession, Depends(get_db)],
    photo: Annotated[UploadFile | None, File()] = None,
) -> dict:
    """사진 업로드와 함께 신고 제출."""
    media: StoredMedia = await media_service.ingest_upload(
        photo, REPORT_FOLDER, settings.REPORT_MAX_UPLOAD_BYTES
    )
    report = await report_service.commit_report(db, current_user.id, metadata, media)
    return await report_service.build_response(db, report)


@router.post("/report/capture", status_code=201)
async def capture_report(
    current_user: Annotated[User, Depends(get_current_user)],
    metadata: Annotated[ReportMetadata, Depends(report_form)],
    db: Annotated[AsyncSession, Depends(get_db)],
    image_base64: Annotated[str | None, Form(alias="imageBase64")] = None,
) -> dict:
    """카메라 캡처(base64)와 함께 신고 제출."""
    media: StoredMedia = media_service.ingest_data_uri(
        image_base64, REPORT_FOLDER, settings.REPORT_MAX_UPLOAD_BYTES
    )
    report = await report_service.commit_report(db, current_user.id, metadata, media)
    return await report_service.build_response(db, report)


# --- 초안 (2단계 제출) ---


@router.post("/report/upload-temp")
async def upload_temp(
    current: Annotated[tuple[User, UserSession], Depends(get_current_session)],
    location: Annotated[DraftLocation, Depends(location_form)],
    db: Annotated[AsyncSession, Depends(get_db)],
    photo: Annotated[UploadFile | None, File()] = None,
) -> RedirectResponse:
    """사진으로 초안 시작 후 검토 화면으로 이동."""
    _, db_session = current
    media: StoredMedia = await media_service.ingest_upload(
        photo, REPORT_FOLDER, settings.REPORT_MAX_UPLOAD_BYTES
    )
    await draft_service.start_draft(db, db_session.id, media, location)
    return RedirectResponse(url="/report/review", status_code=303)


@router.post("/report/capture-temp")
async def capture_temp(
    current: Annotated[tuple[User, UserSession], Depends(get_current_session)],
    location: Annotated[DraftLocation, Depends(location_form)],
    db: Annotated[AsyncSession, Depends(get_db)],
    image_base64: Annotated[str | None, Form(alias="imageBase64")] = None,
) -> RedirectResponse:
    """캡처로 초안 시작 후 검토 화면으로 이동."""
    _, db_session = current
    media: StoredMedia = media_service.ingest_data_uri(
        image_base64, REPORT_FOLDER, settings.REPORT_MAX_UPLOAD_BYTES
    )
    await draft_service.start_draft(db, db_session.id, media, location)
    return RedirectResponse(url="/report/review", status_code=303)


@router.get("/report/review", response_model=None)
async def review_draft(
    db: Annotated[AsyncSession, Depends(get_db)],
    current: Annotated[tuple[User, UserSession], Depends(get_current_session)],
) -> dict | RedirectResponse:
    """현재 초안 조회 — 없으면 업로드 화면으로."""
    _, db_session = current
    try:
        draft = await draft_service.get_draft(db, db_session.id)
    except NotFoundError:
        return RedirectResponse(url="/report/upload", status_code=303)
    return {
        "image_path": draft.image_path,
        "latitude": draft.latitude,
        "longitude": draft.longitude,
        "address": draft.address,
        "location_text": draft.location_text,
        "expires_at": draft.expires_at,
    }


@router.post("/report/upload-complete", status_code=201, response_model=None)
async def complete_draft(
    current: Annotated[tuple[User, UserSession], Depends(get_current_session)],
    metadata: Annotated[ReportMetadata, Depends(report_form)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict | RedirectResponse:
    """초안과 폼 필드로 신고 제출.

    Commit the session's draft with the posted metadata. Location fields
    left blank in the form fall back to the values captured with the draft.
    """
    current_user, db_session = current
    try:
        draft = await draft_service.get_draft(db, db_session.id)
    except NotFoundError:
        return RedirectResponse(url="/report/upload", status_code=303)

    merged = metadata.model_copy(update={
        "address": metadata.address if (metadata.address or "").strip() else draft.address,
        "location_text": metadata.location_text or draft.location_text,
        "latitude": metadata.latitude if metadata.latitude is not None else draft.latitude,
        "longitude": metadata.longitude if metadata.longitude is not None else draft.longitude,
    })
    media = StoredMedia(path=draft.image_path, fresh=False)
    report = await report_service.commit_report(
        db, current_user.id, merged, media, session_id=db_session.id
    )
    return await report_service.build_response(db, report)


# --- 내 신고 ---


@router.get("/reports", response_model=PaginatedResponse)
async def list_my_reports(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    page: int = 1,
    per_page: int = 20,
) -> dict:
    """내 신고 목록 조회."""
    reports, total = await report_service.list_for_user(db, current_user.id, page, per_page)
    items = [await report_service.build_response(db, r) for r in reports]
    return {"items": items, "total": total, "page": page, "per_page": per_page}


@router.get("/reports/{report_id}")
async def get_my_report(
    report_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """내 신고 상세 조회."""
    report = await report_service.get_own(db, report_id, current_user.id)
    return await report_service.build_response(db, report)


@router.get("/reports/{report_id}/edit")
async def edit_form(
    report_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """수정 화면 — 작성자 본인, open 상태만."""
    report = await report_service.get_mutable(db, report_id, current_user.id)
    return await report_service.build_response(db, report)


@router.post("/reports/{report_id}/edit")
async def edit_report(
    report_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    department: Annotated[str | None, Form()] = None,
    address: Annotated[str | None, Form()] = None,
    location_text: Annotated[str | None, Form(alias="locationText")] = None,
    latitude: Annotated[str | None, Form()] = None,
    longitude: Annotated[str | None, Form()] = None,
    photo: Annotated[UploadFile | None, File()] = None,
) -> dict:
    """신고 수정 — 전달된 필드만 변경, 새 사진은 선택."""
    report = await report_service.get_mutable(db, report_id, current_user.id)

    # 전달된 필드만 — Only fields present in the form
    submitted: dict = {
        "title": title,
        "description": description,
        "department": department,
        "address": address,
        "location_text": location_text,
    }
    changes: dict = {field: value for field, value in submitted.items() if value is not None}
    if latitude is not None:
        changes["latitude"] = parse_coordinate("latitude", latitude)
    if longitude is not None:
        changes["longitude"] = parse_coordinate("longitude", longitude)

    new_media: StoredMedia | None = None
    if photo is not None and photo.filename:
        new_media = await media_service.ingest_upload(
            photo, REPORT_FOLDER, settings.REPORT_MAX_UPLOAD_BYTES
        )
    report = await report_service.edit_report(db, report, ReportUpdate(**changes), new_media)
    return await report_service.build_response(db, report)


@router.post("/reports/{report_id}/delete")
async def delete_report(
    report_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> RedirectResponse:
    """신고 삭제 — 작성자 본인, open 상태만."""
    report = await report_service.get_mutable(db, report_id, current_user.id)
    await report_service.delete_report(db, report)
    return RedirectResponse(url="/reports", status_code=303)
