"""Curator management API routes (organization-scoped)."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import require_auth
from app.db.session import get_db
from app.models.bounty import Bounty
from app.models.user import User
from app.schemas.curator import CuratorCreate, CuratorList, CuratorRead, CuratorResponse
from app.services.bounties import get_bounty_for_organization
from app.services.curators import add_curator, list_curators, remove_curator
from app.services.errors import NotFoundError
from app.services.organization_access import (
    BountyCapability,
    resolve_organization_capability,
)

router = APIRouter()


def _organization_bounty(
    organization_id: int,
    bounty_id: int,
    user: User = Depends(require_auth),
    db: Session = Depends(get_db),
) -> tuple[BountyCapability, Bounty]:
    capability = resolve_organization_capability(db, user, organization_id)
    bounty = get_bounty_for_organization(db, organization_id, bounty_id)
    if bounty is None:
        raise NotFoundError("Bounty not found")
    return capability, bounty


@router.get("/{organization_id}/bounties/{bounty_id}/curators", response_model=CuratorList)
def api_list_curators(
    db: Session = Depends(get_db),
    scope: tuple[BountyCapability, Bounty] = Depends(_organization_bounty),
) -> CuratorList:
    _, bounty = scope
    return CuratorList(
        curators=[CuratorRead.model_validate(c) for c in list_curators(db, bounty)]
    )


@router.post("/{organization_id}/bounties/{bounty_id}/curators", response_model=CuratorResponse)
def api_add_curator(
    body: CuratorCreate,
    db: Session = Depends(get_db),
    scope: tuple[BountyCapability, Bounty] = Depends(_organization_bounty),
) -> CuratorResponse:
    """Grant curator rights on the bounty to an organization member."""
    capability, bounty = scope
    curator = add_curator(db, capability, bounty, body.user_id)
    return CuratorResponse(curator=CuratorRead.model_validate(curator))


@router.delete("/{organization_id}/bounties/{bounty_id}/curators/{curator_id}")
def api_remove_curator(
    curator_id: int,
    db: Session = Depends(get_db),
    scope: tuple[BountyCapability, Bounty] = Depends(_organization_bounty),
) -> dict:
    capability, bounty = scope
    remove_curator(db, capability, bounty, curator_id)
    return {"success": True}
