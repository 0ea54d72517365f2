"""기여 API 테스트 — 공개 신고 탐색, 기여 제출, 투표.

Contribute API tests — Public report browser filters, contributions on
other users' reports (image limits and cleanup) and vote counters.
"""

from unittest.mock import AsyncMock, patch

from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from app.config import settings
from app.models.contribution import Contribution
from app.repositories.contribution_repository import contribution_repository
from app.services.storage_service import storage_service
from tests.conftest import PNG_BYTES, auth_header, create_report, stored_files


def images(count: int, name: str = "evidence", content_type: str = "image/png") -> list:
    return [
        ("images", (f"{name}{i}.png", PNG_BYTES, content_type))
        for i in range(count)
    ]


EVIDENCE: dict[str, str] = {"title": "Still broken", "description": "Walked past this morning."}


async def count_contributions(db) -> int:
    return (await db.execute(select(func.count()).select_from(Contribution))).scalar()


# ===== Browse =====

class TestBrowse:
    """공개 신고 탐색."""

    async def test_defaults_to_open_reports(self, client: AsyncClient, db, user, other_token):
        open_report = await create_report(db, user)
        await create_report(db, user, status="closed")

        res = await client.get("/contribute", headers=auth_header(other_token))
        assert res.status_code == 200
        data = res.json()
        assert [item["id"] for item in data["items"]] == [str(open_report.id)]
        assert data["filters"]["status"] == "open"
        assert data["departments"] == ["Public Works"]

    async def test_status_all(self, client: AsyncClient, db, user, other_token):
        await create_report(db, user)
        await create_report(db, user, status="resolved")
        res = await client.get("/contribute?status=all", headers=auth_header(other_token))
        assert res.json()["pagination"]["total"] == 2

    async def test_unknown_status(self, client: AsyncClient, other_token):
        res = await client.get("/contribute?status=lost", headers=auth_header(other_token))
        assert res.status_code == 400

    async def test_department_and_search_filters(self, client: AsyncClient, db, user, other_token):
        await create_report(db, user, department="Water Supply", title="Leaking pipe")
        await create_report(db, user, department="Roads", title="Deep pothole")

        res = await client.get("/contribute?department=water", headers=auth_header(other_token))
        assert [i["title"] for i in res.json()["items"]] == ["Leaking pipe"]

        res = await client.get("/contribute?search=pothole", headers=auth_header(other_token))
        assert [i["department"] for i in res.json()["items"]] == ["Roads"]

        res = await client.get("/contribute?department=all", headers=auth_header(other_token))
        assert res.json()["pagination"]["total"] == 2

    async def test_pagination(self, client: AsyncClient, db, user, other_token):
        """페이지당 12건."""
        for i in range(13):
            await create_report(db, user, title=f"Issue number {i}")

        first = (await client.get("/contribute", headers=auth_header(other_token))).json()
        assert len(first["items"]) == 12
        assert first["pagination"]["total_pages"] == 2
        assert first["pagination"]["has_next"] is True

        second = (await client.get("/contribute?page=2", headers=auth_header(other_token))).json()
        assert len(second["items"]) == 1
        assert second["pagination"]["has_prev"] is True

    async def test_report_detail_flags_owner(self, client: AsyncClient, db, user, user_token, other_token):
        """본인 신고에는 can_contribute=False."""
        report = await create_report(db, user)
        mine = (await client.get(f"/contribute/{report.id}", headers=auth_header(user_token))).json()
        theirs = (await client.get(f"/contribute/{report.id}", headers=auth_header(other_token))).json()
        assert mine["can_contribute"] is False
        assert theirs["can_contribute"] is True
        assert theirs["contributions"] == []


# ===== Create =====

class TestCreateContribution:
    """기여 제출."""

    async def test_create_success(self, client: AsyncClient, db, user, other_token):
        report = await create_report(db, user)
        res = await client.post(
            f"/contribute/{report.id}", data=EVIDENCE, files=images(2),
            headers=auth_header(other_token),
        )
        assert res.status_code == 201
        data = res.json()
        assert data["status"] == "pending"
        assert data["upvotes"] == 0
        assert len(data["images"]) == 2
        assert all(path.startswith("/uploads/contributions/") for path in data["images"])
        assert all(storage_service.exists(path) for path in data["images"])

    async def test_own_report_forbidden(self, client: AsyncClient, db, user, user_token, uploads):
        """본인 신고에는 기여 불가 (403)."""
        report = await create_report(db, user)
        res = await client.post(
            f"/contribute/{report.id}", data=EVIDENCE, files=images(1),
            headers=auth_header(user_token),
        )
        assert res.status_code == 403
        assert len(stored_files(uploads)) == 1

    async def test_unknown_report(self, client: AsyncClient, other_token):
        res = await client.post(
            "/contribute/00000000-0000-0000-0000-000000000000",
            data=EVIDENCE, files=images(1), headers=auth_header(other_token),
        )
        assert res.status_code == 404

    async def test_requires_image(self, client: AsyncClient, db, user, other_token):
        report = await create_report(db, user)
        res = await client.post(
            f"/contribute/{report.id}", data=EVIDENCE, headers=auth_header(other_token),
        )
        assert res.status_code == 400
        assert res.json()["detail"]["field"] == "images"

    async def test_too_many_images(self, client: AsyncClient, db, user, other_token, uploads):
        """6장은 거부, 아무것도 저장하지 않음."""
        report = await create_report(db, user)
        res = await client.post(
            f"/contribute/{report.id}", data=EVIDENCE, files=images(6),
            headers=auth_header(other_token),
        )
        assert res.status_code == 400
        assert res.json()["detail"]["rule"] == "count"
        assert len(stored_files(uploads)) == 1

    async def test_title_too_long(self, client: AsyncClient, db, user, other_token):
        report = await create_report(db, user)
        res = await client.post(
            f"/contribute/{report.id}",
            data={**EVIDENCE, "title": "x" * 101},
            files=images(1),
            headers=auth_header(other_token),
        )
        assert res.status_code == 400
        assert res.json()["detail"]["field"] == "title"

    async def test_bad_image_discards_stored_ones(self, client: AsyncClient, db, user, other_token, uploads):
        """세 번째 사진이 거부되면 앞서 저장한 사진도 삭제."""
        report = await create_report(db, user)
        files = images(2) + [("images", ("payload.exe", b"MZ", "application/octet-stream"))]
        res = await client.post(
            f"/contribute/{report.id}", data=EVIDENCE, files=files,
            headers=auth_header(other_token),
        )
        assert res.status_code == 415
        assert len(stored_files(uploads)) == 1
        assert await count_contributions(db) == 0

    async def test_oversized_image(self, client: AsyncClient, db, user, other_token, uploads, monkeypatch):
        monkeypatch.setattr(settings, "CONTRIBUTION_MAX_UPLOAD_BYTES", 8)
        report = await create_report(db, user)
        res = await client.post(
            f"/contribute/{report.id}", data=EVIDENCE, files=images(1),
            headers=auth_header(other_token),
        )
        assert res.status_code == 413
        assert len(stored_files(uploads)) == 1

    async def test_persistence_failure(self, client: AsyncClient, db, user, other_token, uploads):
        """DB 실패 시 저장된 사진 모두 삭제."""
        report = await create_report(db, user)
        report_id = report.id
        with patch.object(
            contribution_repository, "create", AsyncMock(side_effect=SQLAlchemyError("boom"))
        ):
            res = await client.post(
                f"/contribute/{report_id}", data=EVIDENCE, files=images(3),
                headers=auth_header(other_token),
            )
        assert res.status_code == 500
        assert len(stored_files(uploads)) == 1
        assert await count_contributions(db) == 0


# ===== Votes =====

class TestVotes:
    """투표 — 중복 제한 없음."""

    async def _contribution(self, db, user, other_user) -> Contribution:
        report = await create_report(db, user)
        contribution = Contribution(
            report_id=report.id, contributor_id=other_user.id,
            title="Seen it", description="Still there", images=["/uploads/contributions/x.png"],
        )
        db.add(contribution)
        await db.commit()
        await db.refresh(contribution)
        return contribution

    async def test_votes_accumulate(self, client: AsyncClient, db, user, other_user, user_token):
        """같은 사용자의 반복 투표도 모두 집계."""
        contribution = await self._contribution(db, user, other_user)
        url = f"/contribute/{contribution.id}/vote"

        await client.post(url, data={"vote": "up"}, headers=auth_header(user_token))
        await client.post(url, data={"vote": "up"}, headers=auth_header(user_token))
        res = await client.post(url, data={"vote": "down"}, headers=auth_header(user_token))

        assert res.status_code == 200
        assert res.json() == {"success": True, "upvotes": 2, "downvotes": 1}

    async def test_invalid_vote(self, client: AsyncClient, db, user, other_user, user_token):
        contribution = await self._contribution(db, user, other_user)
        res = await client.post(
            f"/contribute/{contribution.id}/vote", data={"vote": "sideways"},
            headers=auth_header(user_token),
        )
        assert res.status_code == 400

    async def test_unknown_contribution(self, client: AsyncClient, user_token):
        res = await client.post(
            "/contribute/00000000-0000-0000-0000-000000000000/vote",
            data={"vote": "up"}, headers=auth_header(user_token),
        )
        assert res.status_code == 404

    async def test_contributions_listed_on_report(self, client: AsyncClient, db, user, other_user, other_token):
        contribution = await self._contribution(db, user, other_user)
        res = await client.get(
            f"/contribute/{contribution.report_id}", headers=auth_header(other_token),
        )
        assert [c["id"] for c in res.json()["contributions"]] == [str(contribution.id)]
