"""관리자 API 테스트 — 로그인, 대시보드, 신고 상태, 기여 검토, 사용자, 설정.

Admin API tests — Admin-only login, overview counts, report status
lifecycle and export, contribution moderation, user admin flag and
organisation settings.
"""

from io import BytesIO

import pytest
from httpx import AsyncClient
from openpyxl import load_workbook

from app.models.contribution import Contribution
from tests.conftest import auth_header, create_report


# ===== Access =====

class TestAdminAccess:
    """관리자 로그인 및 접근 제어."""

    async def test_admin_login(self, client: AsyncClient, admin_user):
        res = await client.post("/admin/login", json={"username": "admin", "password": "secret123"})
        assert res.status_code == 200
        assert res.json()["is_admin"] is True

    async def test_citizen_rejected_from_admin_login(self, client: AsyncClient, user):
        """일반 계정은 올바른 비밀번호여도 403."""
        res = await client.post("/admin/login", json={"username": "citizen", "password": "secret123"})
        assert res.status_code == 403

    async def test_wrong_password(self, client: AsyncClient, admin_user):
        res = await client.post("/admin/login", json={"username": "admin", "password": "nope"})
        assert res.status_code == 401

    @pytest.mark.parametrize("path", ["/admin", "/admin/reports", "/admin/users", "/admin/settings"])
    async def test_citizen_forbidden(self, client: AsyncClient, user_token, path: str):
        res = await client.get(path, headers=auth_header(user_token))
        assert res.status_code == 403


# ===== Overview =====

class TestOverview:
    """관리자 대시보드."""

    async def test_counts_and_rate(self, client: AsyncClient, db, user, admin_token):
        await create_report(db, user)
        await create_report(db, user, status="resolved", department="Water")
        await create_report(db, user, status="closed", department=None)
        await create_report(db, user, status="resolved")

        res = await client.get("/admin", headers=auth_header(admin_token))
        assert res.status_code == 200
        data = res.json()
        assert data["users_count"] == 2
        assert data["reports_count"] == 4
        assert data["open_count"] == 1
        assert data["resolved_count"] == 2
        assert data["resolution_rate"] == 50.0
        assert data["status_breakdown"] == {"open": 1, "in_progress": 0, "resolved": 2, "closed": 1}
        assert data["department_breakdown"]["Unassigned"] == 1

    async def test_empty_rate(self, client: AsyncClient, admin_token):
        data = (await client.get("/admin", headers=auth_header(admin_token))).json()
        assert data["resolution_rate"] == 0


# ===== Reports =====

class TestAdminReports:
    """신고 관리."""

    async def test_list_filters(self, client: AsyncClient, db, user, admin_token):
        await create_report(db, user)
        await create_report(db, user, status="in_progress", department="Roads")

        res = await client.get("/admin/reports?status=in_progress", headers=auth_header(admin_token))
        assert [i["department"] for i in res.json()["items"]] == ["Roads"]

        res = await client.get("/admin/reports?status=all&department=all", headers=auth_header(admin_token))
        assert res.json()["total"] == 2

    async def test_resolve_sets_timestamp(self, client: AsyncClient, db, user, admin_token):
        report = await create_report(db, user)
        res = await client.post(
            f"/admin/reports/{report.id}/status", json={"status": "resolved"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 200
        assert res.json()["status"] == "resolved"
        assert res.json()["resolved_at"] is not None

    async def test_reopen_clears_timestamp(self, client: AsyncClient, db, user, admin_token):
        """resolved에서 벗어나면 resolved_at 초기화."""
        report = await create_report(db, user)
        url = f"/admin/reports/{report.id}/status"
        await client.post(url, json={"status": "resolved"}, headers=auth_header(admin_token))
        res = await client.post(url, json={"status": "in_progress"}, headers=auth_header(admin_token))
        assert res.json()["status"] == "in_progress"
        assert res.json()["resolved_at"] is None

    async def test_closed_is_final(self, client: AsyncClient, db, user, admin_token):
        """closed에서는 어떤 전이도 불가 (409)."""
        report = await create_report(db, user, status="closed")
        res = await client.post(
            f"/admin/reports/{report.id}/status", json={"status": "open"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 409

    async def test_resolved_cannot_reopen_directly(self, client: AsyncClient, db, user, admin_token):
        report = await create_report(db, user, status="resolved")
        res = await client.post(
            f"/admin/reports/{report.id}/status", json={"status": "open"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 409

    async def test_unknown_status(self, client: AsyncClient, db, user, admin_token):
        report = await create_report(db, user)
        res = await client.post(
            f"/admin/reports/{report.id}/status", json={"status": "archived"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 400

    async def test_owner_cannot_edit_after_admin_moves_it(
        self, client: AsyncClient, db, user, user_token, admin_token,
    ):
        """관리자가 진행중으로 바꾸면 작성자 수정 불가."""
        report = await create_report(db, user)
        await client.post(
            f"/admin/reports/{report.id}/status", json={"status": "in_progress"},
            headers=auth_header(admin_token),
        )
        res = await client.post(
            f"/reports/{report.id}/edit", data={"title": "Changed"},
            headers=auth_header(user_token),
        )
        assert res.status_code == 409

    async def test_export_excel(self, client: AsyncClient, db, user, admin_token):
        await create_report(db, user, title="Fallen tree")
        res = await client.get("/admin/reports/export", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        sheet = load_workbook(BytesIO(res.content)).active
        assert sheet.cell(row=1, column=1).value == "Report ID"
        assert sheet.cell(row=2, column=2).value == "Fallen tree"


# ===== Contributions =====

class TestModeration:
    """기여 검토."""

    async def test_approve_and_mark_helpful(self, client: AsyncClient, db, user, other_user, admin_token):
        report = await create_report(db, user)
        contribution = Contribution(
            report_id=report.id, contributor_id=other_user.id,
            title="Photo from today", description="Still blocked", images=["/uploads/contributions/a.png"],
        )
        db.add(contribution)
        await db.commit()

        res = await client.post(
            f"/admin/contributions/{contribution.id}/status",
            json={"status": "approved", "helpful": True},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 200
        assert res.json()["status"] == "approved"
        assert res.json()["helpful"] is True

    async def test_invalid_status(self, client: AsyncClient, admin_token):
        res = await client.post(
            "/admin/contributions/00000000-0000-0000-0000-000000000000/status",
            json={"status": "maybe"},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 422


# ===== Users =====

class TestAdminUsers:
    """사용자 관리."""

    async def test_list_users(self, client: AsyncClient, user, admin_token):
        res = await client.get("/admin/users", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert {u["username"] for u in res.json()["items"]} == {"citizen", "admin"}

    async def test_toggle_admin(self, client: AsyncClient, user, admin_token):
        res = await client.post(f"/admin/users/{user.id}/toggle-admin", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["is_admin"] is True

        res = await client.post(f"/admin/users/{user.id}/toggle-admin", headers=auth_header(admin_token))
        assert res.json()["is_admin"] is False

    async def test_cannot_toggle_self(self, client: AsyncClient, admin_user, admin_token):
        res = await client.post(
            f"/admin/users/{admin_user.id}/toggle-admin", headers=auth_header(admin_token),
        )
        assert res.status_code == 403


# ===== Settings =====

class TestAppSettings:
    """조직 설정."""

    async def test_defaults_created_on_read(self, client: AsyncClient, admin_token):
        res = await client.get("/admin/settings", headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["org_name"] == "CivicConnect"

    async def test_update(self, client: AsyncClient, admin_token):
        res = await client.post(
            "/admin/settings",
            json={"org_name": "Ward 12", "primary_color": "#112233", "session_timeout_minutes": 30},
            headers=auth_header(admin_token),
        )
        assert res.status_code == 200
        data = res.json()
        assert data["org_name"] == "Ward 12"
        assert data["primary_color"] == "#112233"
        assert data["session_timeout_minutes"] == 30

        again = await client.get("/admin/settings", headers=auth_header(admin_token))
        assert again.json()["org_name"] == "Ward 12"

    @pytest.mark.parametrize("payload,field", [
        ({"org_name": "  "}, "org_name"),
        ({"org_email": "not-an-email"}, "org_email"),
        ({"accent_color": "teal"}, "accent_color"),
        ({"session_timeout_minutes": 4}, "session_timeout_minutes"),
        ({"session_timeout_minutes": 1441}, "session_timeout_minutes"),
    ])
    async def test_invalid_values(self, client: AsyncClient, admin_token, payload: dict, field: str):
        res = await client.post("/admin/settings", json=payload, headers=auth_header(admin_token))
        assert res.status_code == 400
        assert res.json()["detail"]["field"] == field
