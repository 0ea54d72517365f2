"""테스트 인프라 — 임시 DB, 세션, httpx 클라이언트, 업로드 디렉토리 픽스처.

Test infrastructure — Temporary database, session, httpx client and upload
directory fixtures. TEST_DATABASE_URL selects the database (for example a
PostgreSQL test database); by default each test gets its own SQLite file.
Schema is created per test and dropped afterwards.
"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.config import settings
from app.database import Base, get_db
from app.main import app
from app.models import *  # noqa: F401,F403 — register all models with metadata
from app.models.report import Report
from app.models.user import User
from app.services.auth_service import auth_service
from app.services.storage_service import storage_service
from app.utils.ids import generate_media_name
from app.utils.password import hash_password

# 1x1 PNG — 업로드 테스트용 최소 이미지 (Smallest valid PNG for upload tests)
PNG_BYTES: bytes = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)

TITLE: str = "Broken streetlight on Main Street"
DESCRIPTION: str = " ".join(["word"] * 40)


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 스키마를 생성하고 종료 시 삭제합니다."""
    url = os.environ.get("TEST_DATABASE_URL") or f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    eng = create_async_engine(url, echo=False)

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture(autouse=True)
def uploads(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """로컬 업로드 디렉토리를 임시 경로로 교체합니다."""
    root = tmp_path / "uploads"
    monkeypatch.setattr(settings, "AWS_ACCESS_KEY_ID", "")
    monkeypatch.setattr(settings, "AWS_S3_BUCKET", "")
    monkeypatch.setattr(storage_service, "root", root)
    return root


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
async def create_user(db: AsyncSession, username: str, phone: str, is_admin: bool = False) -> User:
    user = User(
        first_name=username.capitalize(),
        last_name="Tester",
        username=username,
        email=f"{username}@test.com",
        phone_number=phone,
        password_hash=hash_password("secret123"),
        is_verified=True,
        is_admin=is_admin,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def user(db: AsyncSession) -> User:
    """일반 사용자(신고 작성자)를 생성합니다."""
    return await create_user(db, "citizen", "9000000001")


@pytest_asyncio.fixture
async def other_user(db: AsyncSession) -> User:
    """다른 일반 사용자를 생성합니다."""
    return await create_user(db, "neighbor", "9000000002")


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession) -> User:
    """관리자 사용자를 생성합니다."""
    return await create_user(db, "admin", "9000000003", is_admin=True)


async def make_token(db: AsyncSession, user: User) -> str:
    """세션 행을 만들고 그 세션 토큰을 반환합니다."""
    session = await auth_service.issue_session(db, user)
    await db.commit()
    return session.access_token


@pytest_asyncio.fixture
async def user_token(db: AsyncSession, user: User) -> str:
    return await make_token(db, user)


@pytest_asyncio.fixture
async def other_token(db: AsyncSession, other_user: User) -> str:
    return await make_token(db, other_user)


@pytest_asyncio.fixture
async def admin_token(db: AsyncSession, admin_user: User) -> str:
    return await make_token(db, admin_user)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def stored_files(root: Path) -> list[Path]:
    """업로드 루트 아래 저장된 파일 목록."""
    if not root.exists():
        return []
    return [p for p in root.rglob("*") if p.is_file()]


def photo(name: str = "pothole.png", content_type: str = "image/png", data: bytes = PNG_BYTES) -> dict:
    """multipart photo 필드."""
    return {"photo": (name, data, content_type)}


def report_fields(**overrides: str) -> dict[str, str]:
    """유효한 신고 폼 필드."""
    fields = {
        "title": TITLE,
        "description": DESCRIPTION,
        "department": "Public Works",
        "address": "12 Main Street",
        "latitude": "12.9716",
        "longitude": "77.5946",
    }
    fields.update(overrides)
    return fields


async def create_report(
    db: AsyncSession,
    owner: User,
    status: str = "open",
    with_file: bool = True,
    **overrides,
) -> Report:
    """저장된 사진과 함께 신고를 직접 생성합니다."""
    key = f"reports/{generate_media_name('.png')}"
    image_path = (
        storage_service.save(key, PNG_BYTES, "image/png")
        if with_file else storage_service.reference_for(key)
    )
    values = {
        "user_id": owner.id,
        "title": TITLE,
        "description": DESCRIPTION,
        "department": "Public Works",
        "address": "12 Main Street",
        "image_path": image_path,
        "status": status,
    }
    values.update(overrides)
    report = Report(**values)
    db.add(report)
    await db.commit()
    await db.refresh(report)
    return report
