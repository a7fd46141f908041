"""Bounty schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from app.models.bounty import BountyStatus
from app.schemas.common import APIModel
from app.schemas.submission import SubmissionRead


class OrganizationRead(APIModel):
    id: int
    name: str


class BountyRead(APIModel):
    """Bounty with its prize schedule and announcement state."""

    id: int
    organization_id: int
    title: str
    status: BountyStatus
    token: str | None = None
    amount: float | None = None
    winnings: dict[str, Any] | None = None
    winners_announced_at: datetime | None = None
    organization: OrganizationRead | None = None


class BountyWithWinners(BountyRead):
    """Bounty plus its current winning submissions."""

    winners: list[SubmissionRead] = []
