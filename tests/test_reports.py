"""신고 제출 API 테스트 — 업로드, 캡처, 내 신고, 수정/삭제.

Report API tests — Direct photo upload and camera capture, media checks,
persistence failures, the user's own reports and owner edit/delete rules.
"""

import base64
from unittest.mock import AsyncMock, patch

from httpx import AsyncClient
from sqlalchemy import Text, func, select
from sqlalchemy.exc import SQLAlchemyError

from app.config import settings
from app.models.contribution import Contribution
from app.models.report import Report
from app.repositories.report_repository import report_repository
from app.services.storage_service import storage_service
from tests.conftest import (
    PNG_BYTES,
    auth_header,
    create_report,
    photo,
    report_fields,
    stored_files,
)


async def count_reports(db) -> int:
    return (await db.execute(select(func.count()).select_from(Report))).scalar()


def data_uri(content_type: str = "image/png", data: bytes = PNG_BYTES) -> str:
    return f"data:{content_type};base64,{base64.b64encode(data).decode()}"


# ===== Direct upload =====

class TestUploadReport:
    """사진 업로드 신고 제출."""

    async def test_upload_success(self, client: AsyncClient, db, user_token, uploads):
        """정상 제출 — open 상태, 사진 저장."""
        res = await client.post(
            "/report/upload",
            data=report_fields(locationText="Near the bus stop"),
            files=photo(),
            headers=auth_header(user_token),
        )
        assert res.status_code == 201
        data = res.json()
        assert data["status"] == "open"
        assert data["report_id"].startswith("R")
        assert data["location_text"] == "Near the bus stop"
        assert data["image_path"].startswith("/uploads/reports/")
        assert data["reporter"] == "Citizen"
        assert storage_service.exists(data["image_path"])
        assert await count_reports(db) == 1

    async def test_requires_authentication(self, client: AsyncClient, uploads):
        """세션 없이 제출 시 403."""
        res = await client.post("/report/upload", data=report_fields(), files=photo())
        assert res.status_code == 403
        assert stored_files(uploads) == []

    async def test_authentication_checked_before_fields(self, client: AsyncClient, uploads):
        """세션 없는 요청은 필드 오류보다 403이 먼저."""
        res = await client.post(
            "/report/upload", data=report_fields(latitude="abc"), files=photo(),
        )
        assert res.status_code == 403
        assert stored_files(uploads) == []

    async def test_missing_photo(self, client: AsyncClient, user_token):
        """사진 누락 시 400."""
        res = await client.post(
            "/report/upload", data=report_fields(), headers=auth_header(user_token),
        )
        assert res.status_code == 400
        assert res.json()["detail"]["field"] == "photo"

    async def test_disguised_executable_rejected(self, client: AsyncClient, db, user_token, uploads):
        """실행 파일은 415, 아무것도 저장되지 않음."""
        res = await client.post(
            "/report/upload",
            data=report_fields(),
            files=photo("invoice.pdf.exe", "application/octet-stream", b"MZ\x90\x00"),
            headers=auth_header(user_token),
        )
        assert res.status_code == 415
        assert stored_files(uploads) == []
        assert await count_reports(db) == 0

    async def test_image_mime_with_bad_extension(self, client: AsyncClient, user_token, uploads):
        """MIME이 이미지여도 확장자가 허용 목록 밖이면 415."""
        res = await client.post(
            "/report/upload",
            data=report_fields(),
            files=photo("photo.exe", "image/png"),
            headers=auth_header(user_token),
        )
        assert res.status_code == 415
        assert stored_files(uploads) == []

    async def test_oversized_photo(self, client: AsyncClient, user_token, uploads, monkeypatch):
        """크기 초과 시 413."""
        monkeypatch.setattr(settings, "REPORT_MAX_UPLOAD_BYTES", 16)
        res = await client.post(
            "/report/upload",
            data=report_fields(),
            files=photo(data=PNG_BYTES * 2),
            headers=auth_header(user_token),
        )
        assert res.status_code == 413
        assert stored_files(uploads) == []

    async def test_invalid_title_discards_photo(self, client: AsyncClient, db, user_token, uploads):
        """필드 검증 실패 시 저장된 사진도 삭제."""
        res = await client.post(
            "/report/upload",
            data=report_fields(title=" ".join(["long"] * 11)),
            files=photo(),
            headers=auth_header(user_token),
        )
        assert res.status_code == 400
        assert res.json()["detail"]["field"] == "title"
        assert stored_files(uploads) == []
        assert await count_reports(db) == 0

    async def test_out_of_range_latitude(self, client: AsyncClient, user_token, uploads):
        res = await client.post(
            "/report/upload",
            data=report_fields(latitude="91"),
            files=photo(),
            headers=auth_header(user_token),
        )
        assert res.status_code == 400
        assert res.json()["detail"]["field"] == "latitude"
        assert stored_files(uploads) == []

    async def test_persistence_failure_leaves_nothing(self, client: AsyncClient, db, user_token, uploads):
        """DB 저장 실패 시 레코드도 파일도 남지 않음."""
        with patch.object(
            report_repository, "create", AsyncMock(side_effect=SQLAlchemyError("disk full"))
        ):
            res = await client.post(
                "/report/upload",
                data=report_fields(),
                files=photo(),
                headers=auth_header(user_token),
            )
        assert res.status_code == 500
        assert stored_files(uploads) == []
        assert await count_reports(db) == 0

    async def test_blank_department_stored_as_null(self, client: AsyncClient, user_token):
        """빈 부서는 None으로 저장."""
        res = await client.post(
            "/report/upload",
            data=report_fields(department="  "),
            files=photo(),
            headers=auth_header(user_token),
        )
        assert res.status_code == 201
        assert res.json()["department"] is None

    async def test_long_free_text_fields_accepted(self, client: AsyncClient, db, user_token):
        """부서/주소/위치 설명은 길이 제한 없는 텍스트."""
        res = await client.post(
            "/report/upload",
            data=report_fields(
                department="Roads and Drainage " * 15,
                address="Plot 7, " * 80,
                locationText="Opposite the old mill " * 25,
            ),
            files=photo(),
            headers=auth_header(user_token),
        )
        assert res.status_code == 201
        assert len(res.json()["address"]) > 500
        for column in ("title", "department", "address", "location_text"):
            assert isinstance(Report.__table__.c[column].type, Text)


# ===== Camera capture =====

class TestCaptureReport:
    """base64 캡처 신고 제출."""

    async def test_capture_success(self, client: AsyncClient, user_token):
        res = await client.post(
            "/report/capture",
            data={**report_fields(), "imageBase64": data_uri()},
            headers=auth_header(user_token),
        )
        assert res.status_code == 201
        assert res.json()["image_path"].endswith(".png")
        assert storage_service.exists(res.json()["image_path"])

    async def test_malformed_data_uri(self, client: AsyncClient, user_token, uploads):
        """data URI 형식이 아니면 400."""
        res = await client.post(
            "/report/capture",
            data={**report_fields(), "imageBase64": "not-a-data-uri"},
            headers=auth_header(user_token),
        )
        assert res.status_code == 400
        assert stored_files(uploads) == []

    async def test_invalid_base64(self, client: AsyncClient, user_token, uploads):
        res = await client.post(
            "/report/capture",
            data={**report_fields(), "imageBase64": "data:image/png;base64,abc=def"},
            headers=auth_header(user_token),
        )
        assert res.status_code == 400
        assert stored_files(uploads) == []

    async def test_unsupported_image_type(self, client: AsyncClient, user_token, uploads):
        """gif는 415."""
        res = await client.post(
            "/report/capture",
            data={**report_fields(), "imageBase64": data_uri("image/gif")},
            headers=auth_header(user_token),
        )
        assert res.status_code == 415
        assert stored_files(uploads) == []

    async def test_missing_capture(self, client: AsyncClient, user_token):
        res = await client.post(
            "/report/capture", data=report_fields(), headers=auth_header(user_token),
        )
        assert res.status_code == 400


# ===== My reports =====

class TestMyReports:
    """내 신고 목록 및 상세."""

    async def test_list_only_own(self, client: AsyncClient, db, user, other_user, user_token):
        """다른 사용자의 신고는 목록에 없음."""
        mine = await create_report(db, user)
        await create_report(db, other_user, department="Water")

        res = await client.get("/reports", headers=auth_header(user_token))
        assert res.status_code == 200
        data = res.json()
        assert data["total"] == 1
        assert data["items"][0]["id"] == str(mine.id)

    async def test_detail_of_other_users_report(self, client: AsyncClient, db, other_user, user_token):
        """타인의 신고 상세는 404."""
        report = await create_report(db, other_user)
        res = await client.get(f"/reports/{report.id}", headers=auth_header(user_token))
        assert res.status_code == 404

    async def test_detail_own(self, client: AsyncClient, db, user, user_token):
        report = await create_report(db, user)
        res = await client.get(f"/reports/{report.id}", headers=auth_header(user_token))
        assert res.status_code == 200
        assert res.json()["report_id"] == report.report_code


# ===== Edit =====

class TestEditReport:
    """작성자 수정 — open 상태만."""

    async def test_edit_fields(self, client: AsyncClient, db, user, user_token):
        report = await create_report(db, user)
        res = await client.post(
            f"/reports/{report.id}/edit",
            data={"title": "Streetlight still broken", "department": "Electrical"},
            headers=auth_header(user_token),
        )
        assert res.status_code == 200
        data = res.json()
        assert data["title"] == "Streetlight still broken"
        assert data["department"] == "Electrical"
        assert data["address"] == "12 Main Street"

    async def test_edit_with_new_photo_removes_old(self, client: AsyncClient, db, user, user_token):
        """새 사진 저장 후 기존 사진 삭제."""
        report = await create_report(db, user)
        old_path = report.image_path

        res = await client.post(
            f"/reports/{report.id}/edit",
            data={"title": "New angle"},
            files=photo("new.png"),
            headers=auth_header(user_token),
        )
        assert res.status_code == 200
        new_path = res.json()["image_path"]
        assert new_path != old_path
        assert storage_service.exists(new_path)
        assert not storage_service.exists(old_path)

    async def test_invalid_edit_keeps_old_photo(self, client: AsyncClient, db, user, user_token, uploads):
        """검증 실패 시 새 사진은 버리고 기존 사진은 유지."""
        report = await create_report(db, user)
        old_path = report.image_path

        res = await client.post(
            f"/reports/{report.id}/edit",
            data={"description": "too short"},
            files=photo("new.png"),
            headers=auth_header(user_token),
        )
        assert res.status_code == 400
        assert storage_service.exists(old_path)
        assert len(stored_files(uploads)) == 1

    async def test_edit_persistence_failure_keeps_old_photo(
        self, client: AsyncClient, db, user, user_token, uploads
    ):
        """DB 오류 시 새 사진은 삭제되고 기존 사진과 레코드는 유지."""
        report = await create_report(db, user)
        report_id, old_path = report.id, report.image_path

        with patch.object(
            report_repository, "update", AsyncMock(side_effect=SQLAlchemyError("connection lost"))
        ):
            res = await client.post(
                f"/reports/{report_id}/edit",
                data={"title": "New angle"},
                files=photo("new.png"),
                headers=auth_header(user_token),
            )
        assert res.status_code == 500
        assert storage_service.exists(old_path)
        assert len(stored_files(uploads)) == 1
        stored = await db.execute(select(Report.image_path).where(Report.id == report_id))
        assert stored.scalar_one() == old_path

    async def test_edit_by_non_owner(self, client: AsyncClient, db, user, other_token):
        """작성자가 아니면 403."""
        report = await create_report(db, user)
        res = await client.post(
            f"/reports/{report.id}/edit", data={"title": "Hijacked"},
            headers=auth_header(other_token),
        )
        assert res.status_code == 403

    async def test_edit_non_open_by_owner(self, client: AsyncClient, db, user, user_token):
        """open이 아니면 작성자도 409."""
        report = await create_report(db, user, status="in_progress")
        res = await client.post(
            f"/reports/{report.id}/edit", data={"title": "Too late"},
            headers=auth_header(user_token),
        )
        assert res.status_code == 409

    async def test_edit_non_open_by_non_owner(self, client: AsyncClient, db, user, other_token):
        """open이 아니면 작성자 여부와 관계없이 409."""
        report = await create_report(db, user, status="resolved")
        res = await client.post(
            f"/reports/{report.id}/edit", data={"title": "Too late"},
            headers=auth_header(other_token),
        )
        assert res.status_code == 409

    async def test_edit_form_unknown_report(self, client: AsyncClient, user_token):
        res = await client.get(
            "/reports/00000000-0000-0000-0000-000000000000/edit",
            headers=auth_header(user_token),
        )
        assert res.status_code == 404


# ===== Delete =====

class TestDeleteReport:
    """작성자 삭제 — open 상태만, 사진 포함."""

    async def test_delete_removes_record_and_photo(self, client: AsyncClient, db, user, user_token):
        report = await create_report(db, user)
        report_id, image_path = report.id, report.image_path

        res = await client.post(f"/reports/{report_id}/delete", headers=auth_header(user_token))
        assert res.status_code == 303
        assert res.headers["location"] == "/reports"
        assert await db.get(Report, report_id) is None
        assert not storage_service.exists(image_path)

    async def test_delete_with_missing_file(self, client: AsyncClient, db, user, user_token):
        """사진 파일이 이미 없어도 삭제 성공."""
        report = await create_report(db, user, with_file=False)
        res = await client.post(f"/reports/{report.id}/delete", headers=auth_header(user_token))
        assert res.status_code == 303

    async def test_delete_removes_contributions(
        self, client: AsyncClient, db, user, other_user, user_token, uploads,
    ):
        """기여와 기여 사진도 함께 삭제."""
        report = await create_report(db, user)
        evidence = storage_service.save("contributions/e.png", PNG_BYTES, "image/png")
        db.add(Contribution(
            report_id=report.id, contributor_id=other_user.id,
            title="Seen it", description="Still there today", images=[evidence],
        ))
        await db.commit()

        res = await client.post(f"/reports/{report.id}/delete", headers=auth_header(user_token))
        assert res.status_code == 303
        count = (await db.execute(select(func.count()).select_from(Contribution))).scalar()
        assert count == 0
        assert stored_files(uploads) == []

    async def test_delete_by_non_owner(self, client: AsyncClient, db, user, other_token):
        report = await create_report(db, user)
        res = await client.post(f"/reports/{report.id}/delete", headers=auth_header(other_token))
        assert res.status_code == 403
        assert storage_service.exists(report.image_path)

    async def test_delete_closed_report(self, client: AsyncClient, db, user, user_token):
        """closed 신고는 삭제 불가 (409)."""
        report = await create_report(db, user, status="closed")
        res = await client.post(f"/reports/{report.id}/delete", headers=auth_header(user_token))
        assert res.status_code == 409
