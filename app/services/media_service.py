"""미디어 수집 서비스 — 업로드/캡처 이미지 검증 및 저장.

Media Ingest Service — Validates an uploaded file or a base64 camera
capture and writes it to durable storage.
Nothing is written until every check has passed. Once a file is written,
the caller owns it: on any later failure it must call discard().
"""

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from pathlib import PurePath

from fastapi import UploadFile

from app.services.storage_service import storage_service
from app.utils.exceptions import (
    InvalidMediaTypeError,
    MalformedEncodingError,
    PayloadTooLargeError,
    ValidationFailedError,
)
from app.utils.ids import generate_media_name

logger = logging.getLogger(__name__)

# 허용 MIME → 저장 확장자 — Allowed MIME types and the extension used for captures
ALLOWED_MIME_TYPES: dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
}
ALLOWED_EXTENSIONS: frozenset[str] = frozenset({".jpg", ".jpeg", ".png", ".webp"})

# data:image/<type>;base64,<data>
_DATA_URI = re.compile(r"^data:(image/[A-Za-z0-9.+-]+);base64,([A-Za-z0-9+/=\s]+)$")

REPORT_FOLDER: str = "reports"
CONTRIBUTION_FOLDER: str = "contributions"


@dataclass(frozen=True)
class StoredMedia:
    """저장된 미디어 참조.

    Attributes:
        path: 웹 경로 (Relative reference, e.g. "/uploads/reports/x.jpg")
        fresh: 이번 요청에서 새로 저장됨 (Written during the current call;
               only fresh media is deleted when the call fails)
    """

    path: str
    fresh: bool = True


class MediaService:

    async def ingest_upload(
        self,
        upload: UploadFile | None,
        folder: str,
        max_bytes: int,
        field: str = "photo",
    ) -> StoredMedia:
        """멀티파트 업로드 파일을 검증하고 저장합니다.

        Validate a multipart upload and store it.

        Args:
            upload: 업로드 파일 (Multipart file, None when the field was omitted)
            folder: 저장 폴더 (Storage folder, e.g. "reports")
            max_bytes: 최대 크기 (Size limit for this call site)
            field: 폼 필드 이름 (Form field name used in error details)

        Returns:
            StoredMedia: 새로 저장된 미디어 (Freshly stored media)

        Raises:
            ValidationFailedError: 파일이 없거나 비어있음 (Missing or empty file)
            InvalidMediaTypeError: MIME 또는 확장자가 허용 목록 밖 (MIME/extension not allowed)
            PayloadTooLargeError: 크기 초과 (Over max_bytes)
        """
        if upload is None or not upload.filename:
            raise ValidationFailedError(field, "required", "Photo is required")

        extension = PurePath(upload.filename).suffix.lower()
        content_type = (upload.content_type or "").split(";")[0].strip().lower()
        # MIME과 확장자 모두 통과해야 함 — Both MIME type and extension must pass
        if content_type not in ALLOWED_MIME_TYPES or extension not in ALLOWED_EXTENSIONS:
            raise InvalidMediaTypeError()

        data: bytes = await upload.read(max_bytes + 1)
        if len(data) > max_bytes:
            raise PayloadTooLargeError(f"File exceeds {max_bytes // (1024 * 1024)}MB limit")
        if not data:
            raise ValidationFailedError(field, "required", "Photo is empty")

        return self._store(data, folder, extension, content_type)

    def ingest_data_uri(
        self,
        data_uri: str | None,
        folder: str,
        max_bytes: int,
    ) -> StoredMedia:
        """base64 data URI 캡처를 검증하고 저장합니다.

        Validate a "data:image/<type>;base64,<data>" capture and store it.

        Raises:
            MalformedEncodingError: 형식 불일치 또는 디코딩 실패 (Pattern mismatch or bad base64)
            InvalidMediaTypeError: 허용되지 않은 이미지 형식 (Image type not allowed)
            PayloadTooLargeError: 디코딩 크기 초과 (Decoded size over max_bytes)
        """
        match = _DATA_URI.match((data_uri or "").strip())
        if match is None:
            raise MalformedEncodingError()

        content_type = match.group(1).lower()
        if content_type not in ALLOWED_MIME_TYPES:
            raise InvalidMediaTypeError()

        payload = re.sub(r"\s+", "", match.group(2))
        # 디코딩 전 대략적 크기 검사 — Cheap upper bound before decoding
        if len(payload) * 3 // 4 > max_bytes + 2:
            raise PayloadTooLargeError(f"Image exceeds {max_bytes // (1024 * 1024)}MB limit")
        try:
            data = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError):
            raise MalformedEncodingError("Image data is not valid base64")
        if not data:
            raise MalformedEncodingError("Image data is empty")
        if len(data) > max_bytes:
            raise PayloadTooLargeError(f"Image exceeds {max_bytes // (1024 * 1024)}MB limit")

        return self._store(data, folder, ALLOWED_MIME_TYPES[content_type], content_type)

    def _store(self, data: bytes, folder: str, extension: str, content_type: str) -> StoredMedia:
        key = f"{folder}/{generate_media_name(extension)}"
        return StoredMedia(path=storage_service.save(key, data, content_type), fresh=True)

    def discard(self, media: StoredMedia | None) -> None:
        """실패 시 정리 — Delete media written in the current call (no-op otherwise)."""
        if media is not None and media.fresh:
            self.remove(media.path)

    def remove(self, path: str | None) -> None:
        """최선 노력 삭제 — Best-effort delete; failures are logged, never raised."""
        if not path:
            return
        try:
            storage_service.delete(path)
        except Exception:
            logger.warning("Could not delete stored media %s", path, exc_info=True)


media_service: MediaService = MediaService()
