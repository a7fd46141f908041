"""Organization and curator access control.

Resolves what a caller may do with a bounty from two independent lookups:
organization membership (role) and the per-bounty curator grant. Engines
consume the resulting BountyCapability and never query these tables
themselves.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.models.bounty import Bounty, BountyStatus
from app.models.curator import Curator
from app.models.member import Member, OrgRole
from app.models.user import User
from app.services.errors import ForbiddenError, UnauthenticatedError

logger = logging.getLogger(__name__)

MANAGER_ROLES = frozenset({OrgRole.OWNER, OrgRole.ADMIN})


@dataclass(frozen=True)
class BountyCapability:
    """Resolved capability of one caller over one organization (and bounty)."""

    user_id: int
    organization_id: int
    role: OrgRole | None
    bounty_id: int | None = None
    is_curator: bool = False

    @property
    def is_manager(self) -> bool:
        return self.role in MANAGER_ROLES

    @property
    def can_manage_winners(self) -> bool:
        """Announce, assign/clear positions, reset, review and record payouts."""
        return self.is_manager or self.is_curator

    @property
    def can_create_bounty(self) -> bool:
        return self.is_manager

    @property
    def can_delete_bounty(self) -> bool:
        return self.is_manager

    @property
    def can_manage_curators(self) -> bool:
        return self.is_manager

    def can_edit_financials(self, bounty_status: BountyStatus) -> bool:
        """Curators lose financial edits once the bounty is CLOSED."""
        if self.is_manager:
            return True
        return self.is_curator and bounty_status != BountyStatus.CLOSED

    def require(self, allowed: bool, message: str) -> None:
        """Raise ForbiddenError with `message` unless `allowed`."""
        if not allowed:
            raise ForbiddenError(message)


def get_membership(db: Session, user_id: int, organization_id: int) -> Member | None:
    """Return the membership row of user in organization, if any."""
    return (
        db.query(Member)
        .filter(Member.user_id == user_id, Member.organization_id == organization_id)
        .first()
    )


def is_bounty_curator(db: Session, user_id: int, bounty_id: int) -> bool:
    """Return True if user holds a curator grant for bounty."""
    return (
        db.query(Curator)
        .filter(Curator.user_id == user_id, Curator.bounty_id == bounty_id)
        .first()
        is not None
    )


def resolve_organization_capability(
    db: Session,
    user: User | None,
    organization_id: int,
) -> BountyCapability:
    """Resolve an organization-scoped capability (no curator grant considered).

    Raises UnauthenticatedError when there is no caller or no membership.
    """
    if user is None:
        raise UnauthenticatedError()
    membership = get_membership(db, user.id, organization_id)
    if membership is None:
        raise UnauthenticatedError()
    return BountyCapability(
        user_id=user.id,
        organization_id=organization_id,
        role=membership.role,
    )


def resolve_bounty_capability(
    db: Session,
    user: User | None,
    bounty: Bounty,
) -> BountyCapability:
    """Resolve caller capability for a bounty.

    - No caller: UnauthenticatedError.
    - Neither a member of the bounty's organization nor a curator of the
      bounty: UnauthenticatedError.
    - Otherwise returns the capability; callers check the specific
      permission they need (ForbiddenError when insufficient).
    """
    if user is None:
        raise UnauthenticatedError()

    membership = get_membership(db, user.id, bounty.organization_id)
    curator = is_bounty_curator(db, user.id, bounty.id)
    if membership is None and not curator:
        logger.info(
            "bounty_access_denied: user=%s bounty=%s (no membership, no curator grant)",
            user.id,
            bounty.id,
        )
        raise UnauthenticatedError()

    return BountyCapability(
        user_id=user.id,
        organization_id=bounty.organization_id,
        role=membership.role if membership is not None else None,
        bounty_id=bounty.id,
        is_curator=curator,
    )
