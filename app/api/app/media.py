"""미디어 라우터 — 저장된 신고/기여 사진 제공.

Media Router — Serves stored report and contribution images.
로컬 모드에서는 파일을 직접 반환하고, S3 모드에서는 presigned URL로 리다이렉트합니다.
"""

from fastapi import APIRouter
from fastapi.responses import FileResponse, RedirectResponse

from app.services.storage_service import storage_service
from app.utils.exceptions import NotFoundError

router: APIRouter = APIRouter()


@router.get("/{key:path}", response_model=None)
async def get_media(key: str) -> FileResponse | RedirectResponse:
    """저장된 사진 조회 — 404 when the file does not exist."""
    reference: str = storage_service.reference_for(key)
    if storage_service.key_for(reference) is None:
        raise NotFoundError("File not found")

    if not storage_service.is_local:
        return RedirectResponse(url=storage_service.presigned_url(key), status_code=307)

    path = storage_service.local_path(key)
    if path is None or not path.is_file():
        raise NotFoundError("File not found")
    return FileResponse(path)
