"""Spam review of submissions (winner-protected)."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.models.submission import Submission, SubmissionStatus
from app.services.errors import InvalidInputError, NotFoundError
from app.services.organization_access import BountyCapability

logger = logging.getLogger(__name__)

REVIEW_MESSAGES = {
    SubmissionStatus.SPAM: "Submission marked as SPAM successfully",
    SubmissionStatus.SUBMITTED: "Submission restored to submitted successfully",
}


def review_submission(
    db: Session,
    capability: BountyCapability,
    bounty_id: int,
    submission_id: int,
    status: SubmissionStatus,
) -> Submission:
    """Mark a submission as SPAM or restore it to SUBMITTED.

    A submission holding a position cannot be marked SPAM; the position has
    to be cleared first. Winner fields are never modified here.
    """
    capability.require(
        capability.can_manage_winners, "You don't have permission to review submissions"
    )
    if status not in REVIEW_MESSAGES:
        raise InvalidInputError(
            "Invalid review status",
            details={"field": "status", "value": status.value},
        )

    submission = (
        db.query(Submission)
        .filter(Submission.id == submission_id, Submission.bounty_id == bounty_id)
        .first()
    )
    if submission is None:
        raise NotFoundError("Submission not found")

    if status == SubmissionStatus.SPAM and submission.position is not None:
        raise InvalidInputError(
            "Cannot mark winner as SPAM - submission has position assigned. "
            "Clear position first.",
            details={"field": "status", "reason": "submission_has_position"},
        )

    submission.status = status
    submission.reviewed_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(submission)
    logger.info(
        "submission_reviewed: bounty=%s submission=%s status=%s",
        bounty_id,
        submission_id,
        status.value,
    )
    return submission
