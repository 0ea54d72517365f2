"""스토리지 서비스 — S3 또는 로컬 파일 저장.

Storage Service — Durable media storage on the local disk or S3.
AWS 키가 비어있으면 자동으로 로컬 모드로 전환됩니다.
Every stored object is addressed by a relative reference
"/uploads/<folder>/<name>" that the web tier serves from GET /uploads/...
"""

from pathlib import Path

from app.config import settings

# 로컬 업로드 디렉토리 — .env의 LOCAL_UPLOADS_DIR 또는 <project>/uploads/
_PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent.parent


def _default_root() -> Path:
    return Path(settings.LOCAL_UPLOADS_DIR) if settings.LOCAL_UPLOADS_DIR else _PROJECT_ROOT / "uploads"


class StorageService:
    """파일 저장 서비스 — S3 또는 로컬 모드 자동 선택.

    Attributes:
        root: 로컬 모드 저장 루트 (Local storage root directory)
    """

    def __init__(self, root: Path | None = None) -> None:
        self.root: Path = root or _default_root()
        self._client = None

    @property
    def is_local(self) -> bool:
        return not settings.AWS_ACCESS_KEY_ID or not settings.AWS_S3_BUCKET

    @property
    def client(self):
        if self.is_local:
            return None
        if self._client is None:
            import boto3
            from botocore.config import Config as BotoConfig

            self._client = boto3.client(
                "s3",
                region_name=settings.AWS_S3_REGION,
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                config=BotoConfig(signature_version="s3v4"),
            )
        return self._client

    # --- 경로 변환 (reference <-> key) ---

    def reference_for(self, key: str) -> str:
        """storage key → 웹 경로 ("reports/a.jpg" → "/uploads/reports/a.jpg")."""
        return f"{settings.UPLOADS_URL_PREFIX}/{key}"

    def key_for(self, reference: str) -> str | None:
        """웹 경로 → storage key. /uploads/ 밖의 경로는 None."""
        prefix = f"{settings.UPLOADS_URL_PREFIX}/"
        if not reference or not reference.startswith(prefix):
            return None
        key = reference[len(prefix):]
        if not key or ".." in Path(key).parts:
            return None
        return key

    def local_path(self, key: str) -> Path | None:
        """key의 로컬 파일 경로. 루트 밖을 가리키면 None."""
        root = self.root.resolve()
        path = (root / key).resolve()
        if root not in path.parents:
            return None
        return path

    # --- 저장/삭제 ---

    def save(self, key: str, data: bytes, content_type: str) -> str:
        """파일을 저장하고 웹 경로를 반환합니다.

        Write the bytes under key and return the relative reference.
        """
        if self.is_local:
            path = self.local_path(key)
            if path is None:
                raise ValueError(f"Invalid storage key: {key}")
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        else:
            self.client.put_object(
                Bucket=settings.AWS_S3_BUCKET,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        return self.reference_for(key)

    def delete(self, reference: str) -> bool:
        """웹 경로의 파일을 삭제합니다. 이미 없으면 False (오류 아님).

        Delete the object behind a reference. A missing object is not an
        error; the return value tells whether something was removed.
        """
        key = self.key_for(reference)
        if key is None:
            return False
        if self.is_local:
            path = self.local_path(key)
            if path is None or not path.exists():
                return False
            path.unlink()
            return True
        self.client.delete_object(Bucket=settings.AWS_S3_BUCKET, Key=key)
        return True

    def exists(self, reference: str) -> bool:
        key = self.key_for(reference)
        if key is None:
            return False
        if self.is_local:
            path = self.local_path(key)
            return path is not None and path.is_file()
        from botocore.exceptions import ClientError

        try:
            self.client.head_object(Bucket=settings.AWS_S3_BUCKET, Key=key)
        except ClientError:
            return False
        return True

    def presigned_url(self, key: str, expires: int = 3600) -> str:
        """S3 모드 전용 — presigned GET URL."""
        return self.client.generate_presigned_url(
            "get_object",
            Params={"Bucket": settings.AWS_S3_BUCKET, "Key": key},
            ExpiresIn=expires,
        )


storage_service: StorageService = StorageService()
