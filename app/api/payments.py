"""Payout API routes."""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_bounty_capability, get_bounty_or_404
from app.db.session import get_db
from app.models.bounty import Bounty
from app.schemas.payment import (
    PaymentCreate,
    PaymentList,
    PaymentRead,
    PaymentRecordedResponse,
)
from app.services.notifications import (
    build_payment_notification,
    dispatch_payment_notification,
)
from app.services.organization_access import BountyCapability
from app.services.payments import list_payments, record_payment

router = APIRouter()


@router.get("/{bounty_id}/payments", response_model=PaymentList)
def api_list_payments(
    bounty_id: int,
    db: Session = Depends(get_db),
    _capability: BountyCapability = Depends(get_bounty_capability),
) -> PaymentList:
    """List payouts recorded for the bounty (members and curators)."""
    payments = list_payments(db, bounty_id)
    return PaymentList(
        payments=[PaymentRead.model_validate(p) for p in payments],
        total=len(payments),
    )


@router.post("/{bounty_id}/payments", response_model=PaymentRecordedResponse)
def api_record_payment(
    bounty_id: int,
    body: PaymentCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    capability: BountyCapability = Depends(get_bounty_capability),
    bounty: Bounty = Depends(get_bounty_or_404),
) -> PaymentRecordedResponse:
    """Record a confirmed payout for a winning submission."""
    payment = record_payment(
        db,
        capability,
        bounty_id,
        body.submission_id,
        body.amount,
        body.token,
        body.extrinsic_hash,
    )

    notification = build_payment_notification(payment, bounty)
    if notification is not None:
        background_tasks.add_task(dispatch_payment_notification, notification)

    return PaymentRecordedResponse(
        payment=PaymentRead.model_validate(payment),
        message="Payment recorded successfully",
    )
