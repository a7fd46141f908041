"""Batch winner announcement.

Replaces the whole winner set of a bounty in one transaction: every current
winner (is_winner = true) is cleared, the requested slate is applied, and
the bounty moves to COMPLETED. No currency conversion happens on this path;
announced winners carry winning_amount only.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.config import get_settings
from app.models.bounty import ANNOUNCEABLE_STATUSES, Bounty, BountyStatus
from app.models.submission import CLEARED_WINNER_FIELDS, Submission, SubmissionStatus
from app.schemas.winners import WinnerInput
from app.services.bounties import lock_bounty
from app.services.errors import InvalidInputError, NotFoundError
from app.services.organization_access import BountyCapability

logger = logging.getLogger(__name__)


def _check_slate(winners: list[WinnerInput]) -> None:
    """Reject duplicate submissions or positions within one request."""
    submission_ids = [w.submission_id for w in winners]
    if len(set(submission_ids)) != len(submission_ids):
        raise InvalidInputError(
            "Each submission can only win once",
            details={"field": "winners", "reason": "duplicate_submission"},
        )
    positions = [w.position for w in winners]
    if len(set(positions)) != len(positions):
        raise InvalidInputError(
            "Each position can only be assigned once",
            details={"field": "winners", "reason": "duplicate_position"},
        )


def announce_winners(
    db: Session,
    capability: BountyCapability,
    bounty_id: int,
    winners: list[WinnerInput],
    epsilon: float | None = None,
) -> Bounty:
    """Announce the full winner slate for a bounty and complete it.

    Validation (before any write): bounty exists and is OPEN/REVIEWING, the
    slate has no duplicates, requested amounts sum to the prize pool within
    `epsilon`, and every submission belongs to the bounty and is APPROVED.
    """
    capability.require(
        capability.can_manage_winners,
        "You do not have permission to announce winners for this bounty",
    )
    if epsilon is None:
        epsilon = get_settings().prize_pool_epsilon

    try:
        bounty = lock_bounty(db, bounty_id)
        if bounty is None:
            raise NotFoundError("Bounty not found")

        if bounty.status not in ANNOUNCEABLE_STATUSES:
            raise InvalidInputError(
                "Cannot announce winners for a bounty that is not open or under review",
                details={"field": "status", "value": bounty.status.value},
            )

        _check_slate(winners)

        requested_total = sum(w.amount for w in winners)
        prize_pool = bounty.total_prize_pool()
        if abs(requested_total - prize_pool) > epsilon:
            raise InvalidInputError(
                "Total winner amounts must match the bounty prize pool",
                details={
                    "field": "winners",
                    "requestedTotal": requested_total,
                    "prizePool": prize_pool,
                },
            )

        submission_ids = [w.submission_id for w in winners]
        submissions = (
            db.query(Submission)
            .filter(
                Submission.id.in_(submission_ids),
                Submission.bounty_id == bounty_id,
                Submission.status == SubmissionStatus.APPROVED,
            )
            .all()
        )
        if len(submissions) != len(submission_ids):
            found = {s.id for s in submissions}
            raise InvalidInputError(
                "One or more submissions are invalid or not in approved status",
                details={
                    "field": "winners",
                    "invalidSubmissionIds": sorted(set(submission_ids) - found),
                },
            )

        now = datetime.now(timezone.utc)
        cleared = (
            db.query(Submission)
            .filter(Submission.bounty_id == bounty_id, Submission.is_winner == True)  # noqa: E712
            .update(CLEARED_WINNER_FIELDS, synchronize_session="fetch")
        )

        by_id = {s.id: s for s in submissions}
        for winner in winners:
            submission = by_id[winner.submission_id]
            submission.set_winning(winner.position, winner.amount)
            submission.status = SubmissionStatus.APPROVED
            submission.reviewed_at = now

        bounty.transition_to(BountyStatus.COMPLETED)
        bounty.winners_announced_at = now
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "winners_announced: bounty=%s winners=%d previous_cleared=%d",
        bounty_id,
        len(winners),
        cleared,
    )
    db.refresh(bounty)
    return bounty
