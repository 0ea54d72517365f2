"""역지오코딩 라우터 — Reverse geocoding proxy."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_current_user
from app.models.user import User
from app.services.geocoding_service import geocoding_service

router: APIRouter = APIRouter()


@router.get("/reverse")
async def reverse_geocode(
    current_user: Annotated[User, Depends(get_current_user)],
    lat: Annotated[float | None, Query()] = None,
    lon: Annotated[float | None, Query()] = None,
) -> dict:
    """좌표로 주소 조회."""
    return await geocoding_service.reverse(lat, lon)
