"""Curator schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from app.schemas.common import APIModel
from app.schemas.submission import SubmitterRead


class CuratorCreate(APIModel):
    user_id: int = Field(..., gt=0)


class CuratorRead(APIModel):
    id: int
    bounty_id: int
    user_id: int
    contact: str
    created_at: datetime
    user: SubmitterRead | None = None


class CuratorResponse(APIModel):
    curator: CuratorRead


class CuratorList(APIModel):
    curators: list[CuratorRead]
