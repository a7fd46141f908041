"""Curator grants: add, list, remove."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.models.bounty import Bounty, BountyStatus
from app.models.curator import Curator
from app.services.errors import InvalidInputError, NotFoundError
from app.services.organization_access import BountyCapability, get_membership

logger = logging.getLogger(__name__)

FINISHED_STATUSES = frozenset(
    {BountyStatus.COMPLETED, BountyStatus.CLOSED, BountyStatus.CANCELLED}
)


def list_curators(db: Session, bounty: Bounty) -> list[Curator]:
    return (
        db.query(Curator)
        .filter(Curator.bounty_id == bounty.id)
        .order_by(Curator.created_at.asc(), Curator.id.asc())
        .all()
    )


def add_curator(
    db: Session,
    capability: BountyCapability,
    bounty: Bounty,
    user_id: int,
) -> Curator:
    """Grant curator rights on bounty to an organization member."""
    capability.require(
        capability.can_manage_curators, "Only owners and admins can add curators"
    )
    if bounty.status in FINISHED_STATUSES:
        raise InvalidInputError(
            "Cannot add curators to a bounty that is completed, closed, or cancelled",
            details={"field": "status", "value": bounty.status.value},
        )

    member = get_membership(db, user_id, bounty.organization_id)
    if member is None:
        raise InvalidInputError(
            "User is not a member of this organization",
            details={"field": "userId", "value": user_id},
        )

    existing = (
        db.query(Curator)
        .filter(Curator.bounty_id == bounty.id, Curator.user_id == user_id)
        .first()
    )
    if existing is not None:
        raise InvalidInputError(
            "User is already a curator for this bounty",
            details={"field": "userId", "value": user_id},
        )

    curator = Curator(bounty_id=bounty.id, user_id=user_id, contact=member.user.email or "")
    db.add(curator)
    db.commit()
    db.refresh(curator)
    logger.info("curator_added: bounty=%s user=%s", bounty.id, user_id)
    return curator


def remove_curator(
    db: Session,
    capability: BountyCapability,
    bounty: Bounty,
    curator_id: int,
) -> None:
    capability.require(
        capability.can_manage_curators, "Only owners and admins can remove curators"
    )
    curator = db.query(Curator).filter(Curator.id == curator_id).first()
    if curator is None or curator.bounty_id != bounty.id:
        raise NotFoundError("Curator not found")
    db.delete(curator)
    db.commit()
    logger.info("curator_removed: bounty=%s curator=%s", bounty.id, curator_id)
