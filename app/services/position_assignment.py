"""Single-submission winner position assignment.

Assigning a position that another submission of the same bounty already
holds displaces that holder (its winner fields are cleared) in the same
transaction. The USD amount is computed from a freshly fetched exchange
rate; if the rate cannot be resolved the whole transaction, displacement
included, is rolled back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from app.models.submission import Submission, SubmissionStatus
from app.services.bounties import lock_bounty
from app.services.errors import InvalidInputError, NotFoundError
from app.services.exchange_rates import ExchangeRateGateway, resolve_usd_rate
from app.services.organization_access import BountyCapability

logger = logging.getLogger(__name__)

INVALID_POSITION = "Invalid winner position"
INVALID_AMOUNT = "Invalid winning amount: must be greater than 0"


@dataclass
class PositionAssignmentResult:
    """Outcome of assign_position."""

    submission: Submission
    position: int | None
    displaced_submission_id: int | None = None

    @property
    def displaced(self) -> bool:
        return self.displaced_submission_id is not None

    @property
    def message(self) -> str:
        return build_position_message(self.position, self.displaced)


def build_position_message(position: int | None, displaced: bool) -> str:
    """Human-readable result message for the position endpoint."""
    if position is None:
        return "Position cleared successfully"
    if displaced:
        return f"Position {position} reassigned successfully"
    return f"Position {position} assigned successfully"


def winning_amount_for_position(winnings: dict[str, Any] | None, position: int) -> float:
    """Return winnings[position] as a positive amount.

    Raises InvalidInputError when the position is not a key of the table or
    its value is not a positive number.
    """
    key = str(position)
    if not winnings or key not in winnings:
        raise InvalidInputError(
            INVALID_POSITION,
            details={"field": "position", "value": position, "reason": "not_in_winnings"},
        )
    value = winnings[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise InvalidInputError(
            INVALID_AMOUNT,
            details={"field": "position", "value": position, "reason": "non_positive_amount"},
        )
    return float(value)


def assign_position(
    db: Session,
    capability: BountyCapability,
    gateway: ExchangeRateGateway,
    bounty_id: int,
    submission_id: int,
    position: int | None,
) -> PositionAssignmentResult:
    """Assign (or clear, when position is None) a submission's winner position.

    Preconditions checked before any write: caller may manage winners,
    the bounty exists, the submission belongs to it and is SUBMITTED.
    Submission status is never changed here.
    """
    capability.require(
        capability.can_manage_winners, "You don't have permission to assign positions"
    )

    try:
        bounty = lock_bounty(db, bounty_id)
        if bounty is None:
            raise NotFoundError("Bounty not found")

        submission = (
            db.query(Submission)
            .filter(Submission.id == submission_id, Submission.bounty_id == bounty_id)
            .first()
        )
        if submission is None or submission.status != SubmissionStatus.SUBMITTED:
            raise NotFoundError("Submission not found")

        if position is None:
            submission.clear_winning()
            db.commit()
            logger.info(
                "position_cleared: bounty=%s submission=%s", bounty_id, submission_id
            )
            return PositionAssignmentResult(submission=submission, position=None)

        amount = winning_amount_for_position(bounty.winnings, position)

        holder = (
            db.query(Submission)
            .filter(
                Submission.bounty_id == bounty_id,
                Submission.position == position,
                Submission.id != submission_id,
            )
            .first()
        )
        displaced_id: int | None = None
        if holder is not None:
            displaced_id = holder.id
            holder.clear_winning()
            # Free the position before the new holder takes it
            db.flush()

        rate = resolve_usd_rate(gateway, bounty.token)
        submission.set_winning(position, amount, amount * rate)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "position_assigned: bounty=%s submission=%s position=%s amount=%s displaced=%s",
        bounty_id,
        submission_id,
        position,
        amount,
        displaced_id,
    )
    return PositionAssignmentResult(
        submission=submission,
        position=position,
        displaced_submission_id=displaced_id,
    )
