"""Payout schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from app.models.payment import PaymentStatus
from app.schemas.common import APIModel
from app.schemas.submission import SubmissionRead


class PaymentCreate(APIModel):
    """POST body for recording a payout."""

    submission_id: int = Field(..., gt=0)
    extrinsic_hash: str = Field(..., min_length=1, max_length=255)
    amount: float = Field(..., gt=0)
    token: str = Field(..., min_length=1, max_length=32)


class PaymentRead(APIModel):
    id: int
    submission_id: int
    organization_id: int
    recipient_address: str
    amount: float
    token: str
    extrinsic_hash: str
    status: PaymentStatus
    paid_by: int | None = None
    paid_at: datetime | None = None
    created_at: datetime
    submission: SubmissionRead | None = None


class PaymentRecordedResponse(APIModel):
    success: bool = True
    payment: PaymentRead
    message: str


class PaymentList(APIModel):
    payments: list[PaymentRead]
    total: int
