"""Payout recording for winning submissions."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.models.payment import ACTIVE_PAYMENT_STATUSES, Payment, PaymentStatus
from app.models.submission import Submission
from app.services.errors import InvalidInputError, NotFoundError
from app.services.organization_access import BountyCapability

logger = logging.getLogger(__name__)


def record_payment(
    db: Session,
    capability: BountyCapability,
    bounty_id: int,
    submission_id: int,
    amount: float,
    token: str,
    extrinsic_hash: str,
) -> Payment:
    """Record a confirmed payout for a winning submission.

    The caller supplies the on-chain transaction hash, so the payment is
    stored as CONFIRMED right away.
    """
    capability.require(
        capability.can_manage_winners,
        "You do not have permission to record payments for this bounty",
    )

    submission = db.query(Submission).filter(Submission.id == submission_id).first()
    if submission is None:
        raise NotFoundError("Submission not found")
    if submission.bounty_id != bounty_id:
        raise InvalidInputError(
            "Submission does not belong to this bounty",
            details={"field": "submissionId", "value": submission_id},
        )
    if submission.position is None:
        raise InvalidInputError(
            "Cannot record payment for non-winning submission",
            details={"field": "submissionId", "value": submission_id},
        )

    existing = (
        db.query(Payment)
        .filter(
            Payment.submission_id == submission_id,
            Payment.status.in_(ACTIVE_PAYMENT_STATUSES),
        )
        .first()
    )
    if existing is not None:
        raise InvalidInputError(
            "Payment already recorded for this submission",
            details={"field": "submissionId", "paymentId": existing.id},
        )

    now = datetime.now(timezone.utc)
    payment = Payment(
        submission_id=submission_id,
        organization_id=capability.organization_id,
        recipient_address=submission.submitter.wallet_address or "",
        amount=amount,
        token=token,
        extrinsic_hash=extrinsic_hash,
        status=PaymentStatus.CONFIRMED,
        paid_by=capability.user_id,
        paid_at=now,
    )
    db.add(payment)
    db.commit()
    db.refresh(payment)
    logger.info(
        "payment_recorded: bounty=%s submission=%s amount=%s token=%s",
        bounty_id,
        submission_id,
        amount,
        token,
    )
    return payment


def list_payments(db: Session, bounty_id: int) -> list[Payment]:
    """Payments for all submissions of a bounty, newest first."""
    return (
        db.query(Payment)
        .join(Submission, Payment.submission_id == Submission.id)
        .filter(Submission.bounty_id == bounty_id)
        .order_by(Payment.created_at.desc(), Payment.id.desc())
        .all()
    )
