"""역지오코딩 및 미디어 제공 테스트.

Reverse geocoding proxy and stored media serving tests.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
from httpx import AsyncClient

from app.config import settings
from app.services.storage_service import storage_service
from tests.conftest import PNG_BYTES, auth_header


def _mock_http_client(response: MagicMock | None = None, error: Exception | None = None) -> MagicMock:
    """httpx.AsyncClient 컨텍스트 매니저 목."""
    inner = MagicMock()
    inner.get = AsyncMock(return_value=response, side_effect=error)
    client = MagicMock()
    client.__aenter__ = AsyncMock(return_value=inner)
    client.__aexit__ = AsyncMock(return_value=False)
    return client


class TestReverseGeocode:
    """좌표 → 주소."""

    async def test_success(self, client: AsyncClient, user_token):
        response = MagicMock()
        response.json.return_value = {"display_name": "MG Road, Bengaluru"}
        mock_client = _mock_http_client(response)

        with patch("app.services.geocoding_service.httpx.AsyncClient", return_value=mock_client):
            res = await client.get(
                "/geocode/reverse?lat=12.97&lon=77.59", headers=auth_header(user_token),
            )
        assert res.status_code == 200
        assert res.json()["display_name"] == "MG Road, Bengaluru"

        inner = await mock_client.__aenter__()
        _, kwargs = inner.get.call_args
        assert kwargs["params"]["format"] == "jsonv2"
        assert kwargs["headers"]["User-Agent"] == settings.GEOCODER_USER_AGENT

    async def test_missing_coordinates(self, client: AsyncClient, user_token):
        res = await client.get("/geocode/reverse?lat=12.97", headers=auth_header(user_token))
        assert res.status_code == 400
        assert res.json()["detail"]["field"] == "lon"

    async def test_out_of_range(self, client: AsyncClient, user_token):
        res = await client.get("/geocode/reverse?lat=95&lon=10", headers=auth_header(user_token))
        assert res.status_code == 400

    async def test_upstream_failure(self, client: AsyncClient, user_token):
        """외부 서비스 실패 시 502."""
        mock_client = _mock_http_client(error=httpx.ConnectError("down"))
        with patch("app.services.geocoding_service.httpx.AsyncClient", return_value=mock_client):
            res = await client.get(
                "/geocode/reverse?lat=12.97&lon=77.59", headers=auth_header(user_token),
            )
        assert res.status_code == 502
        assert res.json()["detail"] == "Failed to fetch location data"

    async def test_requires_authentication(self, client: AsyncClient):
        res = await client.get("/geocode/reverse?lat=12.97&lon=77.59")
        assert res.status_code == 403


class TestMedia:
    """저장된 사진 제공."""

    async def test_serves_stored_file(self, client: AsyncClient):
        path = storage_service.save("reports/served.png", PNG_BYTES, "image/png")
        res = await client.get(path)
        assert res.status_code == 200
        assert res.content == PNG_BYTES

    async def test_missing_file(self, client: AsyncClient):
        res = await client.get("/uploads/reports/nothing-here.png")
        assert res.status_code == 404


class TestHealth:
    async def test_health(self, client: AsyncClient):
        res = await client.get("/health")
        assert res.json() == {"status": "ok"}
