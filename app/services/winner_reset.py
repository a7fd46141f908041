"""Winner reset: revert every APPROVED submission of a bounty to SUBMITTED.

The trigger is lifecycle status APPROVED, not is_winner: approved submissions
that never received a position are reverted too. This differs from the
clearing step of the announcement path, which targets is_winner.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.models.submission import CLEARED_WINNER_FIELDS, Submission, SubmissionStatus
from app.services.bounties import lock_bounty
from app.services.errors import NotFoundError
from app.services.organization_access import BountyCapability

logger = logging.getLogger(__name__)


@dataclass
class WinnerResetResult:
    reset_count: int
    affected_submissions: list[Submission] = field(default_factory=list)

    @property
    def message(self) -> str:
        if self.reset_count == 0:
            return "No approved submissions found to reset"
        return (
            f"Successfully reset {self.reset_count} approved submissions to submitted status"
        )


def reset_winners(
    db: Session,
    capability: BountyCapability,
    bounty_id: int,
) -> WinnerResetResult:
    """Bulk-revert APPROVED submissions: status SUBMITTED, winner fields cleared."""
    capability.require(
        capability.can_manage_winners, "You don't have permission to manage submissions"
    )

    try:
        bounty = lock_bounty(db, bounty_id)
        if bounty is None:
            raise NotFoundError("Bounty not found")

        approved = (
            db.query(Submission)
            .filter(
                Submission.bounty_id == bounty_id,
                Submission.status == SubmissionStatus.APPROVED,
            )
            .order_by(Submission.id.asc())
            .all()
        )
        if not approved:
            db.commit()
            return WinnerResetResult(reset_count=0)

        now = datetime.now(timezone.utc)
        reset_count = (
            db.query(Submission)
            .filter(
                Submission.bounty_id == bounty_id,
                Submission.status == SubmissionStatus.APPROVED,
            )
            .update(
                {
                    Submission.status: SubmissionStatus.SUBMITTED,
                    Submission.reviewed_at: now,
                    **CLEARED_WINNER_FIELDS,
                },
                synchronize_session="fetch",
            )
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("winners_reset: bounty=%s reset_count=%d", bounty_id, reset_count)
    return WinnerResetResult(reset_count=reset_count, affected_submissions=approved)
