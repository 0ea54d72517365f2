"""기여 라우터 — 공개 신고 탐색, 기여 제출, 투표.

Contribute Router — Public report browser, contributions on other users'
reports and contribution votes.
"""

from math import ceil
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.database import get_db
from app.models.user import User
from app.repositories.report_repository import report_repository
from app.schemas.contribution import VoteResponse
from app.services.contribution_service import contribution_service
from app.services.report_service import report_service

router: APIRouter = APIRouter()

BROWSE_PER_PAGE: int = 12


@router.get("")
async def browse_reports(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    department: str | None = None,
    location: str | None = None,
    search: str | None = None,
    status: str = "open",
    sort: str = "newest",
    page: int = 1,
) -> dict:
    """공개 신고 탐색 — 필터/정렬, 페이지당 12건."""
    page = max(page, 1)
    reports, total = await report_service.browse(
        db, department=department, location=location, search=search,
        status=status, sort=sort, page=page,
    )
    total_pages: int = ceil(total / BROWSE_PER_PAGE)
    return {
        "items": [await report_service.build_response(db, r) for r in reports],
        "departments": await report_repository.departments(db),
        "filters": {
            "department": department or "all",
            "location": location or "",
            "search": search or "",
            "status": status or "all",
            "sort": sort,
        },
        "pagination": {
            "current_page": page,
            "total_pages": total_pages,
            "total": total,
            "has_next": page < total_pages,
            "has_prev": page > 1,
        },
    }


@router.get("/{report_id}")
async def get_report_contributions(
    report_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """신고와 기여 목록 조회."""
    report, contributions = await contribution_service.list_for_report(db, report_id)
    return {
        "report": await report_service.build_response(db, report),
        "contributions": [contribution_service.build_response(c) for c in contributions],
        "can_contribute": report.user_id != current_user.id,
    }


@router.post("/{report_id}", status_code=201)
async def create_contribution(
    report_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    images: Annotated[list[UploadFile] | None, File()] = None,
) -> dict:
    """기여 제출 — 사진 1-5장, 각 5MB 이하."""
    contribution = await contribution_service.create_contribution(
        db, report_id, current_user.id, title, description, images or []
    )
    return contribution_service.build_response(contribution)


@router.post("/{contribution_id}/vote", response_model=VoteResponse)
async def vote_contribution(
    contribution_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    vote: Annotated[str | None, Form()] = None,
) -> VoteResponse:
    """기여 투표 — "up" 또는 "down"."""
    upvotes, downvotes = await contribution_service.vote(db, contribution_id, vote)
    await db.commit()
    return VoteResponse(upvotes=upvotes, downvotes=downvotes)
