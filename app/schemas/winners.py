"""Winner assignment, announcement and reset schemas."""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from app.schemas.bounty import BountyWithWinners
from app.schemas.common import APIModel
from app.schemas.submission import SubmitterRead



def _require_json_number(value: Any) -> Any:
    """Accept JSON numbers only; whole floats like 1.0 still pass the int check."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError("must be a number")
    return value


PositiveInt = Annotated[int, BeforeValidator(_require_json_number), Field(gt=0)]


class PositionUpdateRequest(APIModel):
    """PATCH body: a positive position, or null to clear."""

    position: PositiveInt | None = Field(...)


class WinnerInput(APIModel):
    """One winner in an announcement request."""

    submission_id: int = Field(..., gt=0)
    position: PositiveInt
    amount: float = Field(..., gt=0)


class AnnounceWinnersRequest(APIModel):
    """POST body for announcing the full winner slate."""

    winners: list[WinnerInput] = Field(..., min_length=1)


class AnnounceWinnersResponse(APIModel):
    success: bool = True
    bounty: BountyWithWinners
    message: str


class AffectedSubmission(APIModel):
    id: int
    title: str | None = None
    submitter: SubmitterRead | None = None


class ResetWinnersResponse(APIModel):
    message: str
    reset_count: int
    affected_submissions: list[AffectedSubmission] = []
