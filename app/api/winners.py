"""Winner management API routes: position, announcement, reset, review."""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_bounty_capability
from app.db.session import get_db
from app.models.submission import SubmissionStatus
from app.schemas.bounty import BountyRead, BountyWithWinners
from app.schemas.submission import ReviewRequest, SubmissionActionResponse, SubmissionRead
from app.schemas.winners import (
    AffectedSubmission,
    AnnounceWinnersRequest,
    AnnounceWinnersResponse,
    PositionUpdateRequest,
    ResetWinnersResponse,
)
from app.services.bounties import list_winners
from app.services.exchange_rates import ExchangeRateGateway, get_exchange_rate_gateway
from app.services.notifications import (
    build_winner_notifications,
    dispatch_winner_notifications,
)
from app.services.organization_access import BountyCapability
from app.services.position_assignment import assign_position
from app.services.submission_review import REVIEW_MESSAGES, review_submission
from app.services.winner_announcement import announce_winners
from app.services.winner_reset import reset_winners

router = APIRouter()


@router.patch(
    "/{bounty_id}/submissions/{submission_id}/position",
    response_model=SubmissionActionResponse,
)
def api_assign_position(
    bounty_id: int,
    submission_id: int,
    body: PositionUpdateRequest,
    db: Session = Depends(get_db),
    capability: BountyCapability = Depends(get_bounty_capability),
    gateway: ExchangeRateGateway = Depends(get_exchange_rate_gateway),
) -> SubmissionActionResponse:
    """Assign a winner position to a submission, or clear it with null."""
    result = assign_position(db, capability, gateway, bounty_id, submission_id, body.position)
    return SubmissionActionResponse(
        submission=SubmissionRead.model_validate(result.submission),
        message=result.message,
    )


@router.post("/{bounty_id}/winners", response_model=AnnounceWinnersResponse)
def api_announce_winners(
    bounty_id: int,
    body: AnnounceWinnersRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    capability: BountyCapability = Depends(get_bounty_capability),
) -> AnnounceWinnersResponse:
    """Announce the winner slate and complete the bounty."""
    bounty = announce_winners(db, capability, bounty_id, body.winners)
    winners = list_winners(db, bounty_id)

    background_tasks.add_task(
        dispatch_winner_notifications, build_winner_notifications(bounty, winners)
    )

    bounty_data = BountyRead.model_validate(bounty).model_dump()
    return AnnounceWinnersResponse(
        bounty=BountyWithWinners(
            **bounty_data,
            winners=[SubmissionRead.model_validate(s) for s in winners],
        ),
        message="Winners announced successfully",
    )


@router.patch("/{bounty_id}/winners/reset", response_model=ResetWinnersResponse)
def api_reset_winners(
    bounty_id: int,
    db: Session = Depends(get_db),
    capability: BountyCapability = Depends(get_bounty_capability),
) -> ResetWinnersResponse:
    """Revert all APPROVED submissions of the bounty to SUBMITTED."""
    result = reset_winners(db, capability, bounty_id)
    return ResetWinnersResponse(
        message=result.message,
        reset_count=result.reset_count,
        affected_submissions=[
            AffectedSubmission.model_validate(s) for s in result.affected_submissions
        ],
    )


@router.patch(
    "/{bounty_id}/submissions/{submission_id}/review",
    response_model=SubmissionActionResponse,
)
def api_review_submission(
    bounty_id: int,
    submission_id: int,
    body: ReviewRequest,
    db: Session = Depends(get_db),
    capability: BountyCapability = Depends(get_bounty_capability),
) -> SubmissionActionResponse:
    """Mark a submission as SPAM or restore it to SUBMITTED."""
    status = SubmissionStatus(body.status)
    submission = review_submission(db, capability, bounty_id, submission_id, status)
    return SubmissionActionResponse(
        submission=SubmissionRead.model_validate(submission),
        message=REVIEW_MESSAGES[status],
    )
