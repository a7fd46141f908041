"""Bounty lookups shared by the winner engines and API routes."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.models.bounty import Bounty
from app.models.submission import Submission


def get_bounty(db: Session, bounty_id: int) -> Bounty | None:
    """Return the bounty or None."""
    return db.query(Bounty).filter(Bounty.id == bounty_id).first()


def get_bounty_for_organization(
    db: Session, organization_id: int, bounty_id: int
) -> Bounty | None:
    """Return the bounty only if it belongs to organization."""
    return (
        db.query(Bounty)
        .filter(Bounty.id == bounty_id, Bounty.organization_id == organization_id)
        .first()
    )


def lock_bounty(db: Session, bounty_id: int) -> Bounty | None:
    """Load the bounty with a row lock (SELECT ... FOR UPDATE).

    Every winner mutation takes this lock first, so winner changes on one
    bounty are serialized until the surrounding transaction ends.
    """
    return (
        db.query(Bounty)
        .filter(Bounty.id == bounty_id)
        .populate_existing()
        .with_for_update()
        .first()
    )


def list_winners(db: Session, bounty_id: int) -> list[Submission]:
    """Winning submissions of a bounty ordered by position."""
    return (
        db.query(Submission)
        .filter(Submission.bounty_id == bounty_id, Submission.position.is_not(None))
        .order_by(Submission.position.asc())
        .all()
    )
