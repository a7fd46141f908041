"""Session schemas: login, issued token and the caller's profile."""

from __future__ import annotations

from pydantic import Field

from app.models.member import OrgRole
from app.schemas.common import APIModel


class LoginRequest(APIModel):
    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class TokenResponse(APIModel):
    """Bearer token for API clients; browsers also receive it as a cookie."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int


class MembershipRead(APIModel):
    organization_id: int
    role: OrgRole


class ProfileRead(APIModel):
    """The caller, with the organizations whose bounties they can manage."""

    id: int
    username: str
    email: str | None = None
    first_name: str | None = None
    wallet_address: str | None = None
    memberships: list[MembershipRead] = []
