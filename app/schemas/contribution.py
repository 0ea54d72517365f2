"""기여 Pydantic 스키마.

Contribution request/response schemas.
"""

from typing import Literal

from pydantic import BaseModel


class VoteResponse(BaseModel):
    success: bool = True
    upvotes: int
    downvotes: int


class ContributionStatusUpdate(BaseModel):
    status: Literal["pending", "approved", "rejected"]
    helpful: bool | None = None
