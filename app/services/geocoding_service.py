"""역지오코딩 서비스 — Nominatim 프록시.

Reverse geocoding proxy. The browser cannot call Nominatim directly
(CORS, mandatory User-Agent), so the server forwards the lookup.
"""

import logging

import httpx

from app.config import settings
from app.utils.exceptions import UpstreamServiceError, ValidationFailedError
from app.utils.validation import validate_coordinates

logger = logging.getLogger(__name__)


class GeocodingService:

    async def reverse(self, latitude: float | None, longitude: float | None) -> dict:
        """좌표 → 주소 문서 (Nominatim jsonv2).

        Raises:
            ValidationFailedError: 좌표 누락 또는 범위 밖 (Missing or out-of-range coordinates)
            UpstreamServiceError: 외부 서비스 실패 (Upstream failure)
        """
        if latitude is None or longitude is None:
            raise ValidationFailedError(
                "lat" if latitude is None else "lon",
                "required",
                "Latitude and longitude are required",
            )
        validate_coordinates(latitude, longitude)

        params = {"format": "jsonv2", "lat": latitude, "lon": longitude, "addressdetails": 1}
        headers = {"User-Agent": settings.GEOCODER_USER_AGENT}
        try:
            async with httpx.AsyncClient(timeout=settings.GEOCODER_TIMEOUT_SECONDS) as client:
                res = await client.get(settings.GEOCODER_URL, params=params, headers=headers)
                res.raise_for_status()
                return res.json()
        except (httpx.HTTPError, ValueError):
            logger.warning("Reverse geocoding failed for %s,%s", latitude, longitude, exc_info=True)
            raise UpstreamServiceError("Failed to fetch location data")


geocoding_service: GeocodingService = GeocodingService()
