"""Submission schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from app.models.submission import SubmissionStatus
from app.schemas.common import APIModel


class SubmitterRead(APIModel):
    """Public identity of a submitter."""

    id: int
    username: str
    email: str | None = None
    first_name: str | None = None


class SubmissionRead(APIModel):
    """Submission with its winner fields."""

    id: int
    bounty_id: int
    user_id: int
    title: str | None = None
    status: SubmissionStatus
    position: int | None = None
    winning_amount: float | None = None
    winning_amount_usd: float | None = None
    is_winner: bool
    reviewed_at: datetime | None = None
    created_at: datetime
    submitter: SubmitterRead | None = None


class SubmissionActionResponse(APIModel):
    """Response for single-submission mutations."""

    submission: SubmissionRead
    message: str


class ReviewRequest(APIModel):
    """PATCH body for the review endpoint."""

    status: Literal["SPAM", "SUBMITTED"]
