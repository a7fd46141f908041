"""Shared FastAPI dependencies for API routes."""

from __future__ import annotations

from fastapi import Cookie, Depends, Header, Request
from sqlalchemy.orm import Session

from app.db.session import get_db  # re-export
from app.models.bounty import Bounty
from app.models.user import User
from app.services.auth import get_user_from_token
from app.services.bounties import get_bounty
from app.services.errors import NotFoundError, UnauthenticatedError
from app.services.organization_access import BountyCapability, resolve_bounty_capability

__all__ = [
    "get_db",
    "get_current_user",
    "require_auth",
    "get_bounty_or_404",
    "get_bounty_capability",
]


# Cookie name for browser sessions
AUTH_COOKIE = "access_token"


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    authorization: str | None = Header(None),
    access_token: str | None = Cookie(None),
) -> User | None:
    """Return the authenticated user or None.

    Checks (in order):
    1. Authorization: Bearer <token> header
    2. access_token cookie
    """
    token: str | None = None

    # Check Authorization header
    if authorization and authorization.startswith("Bearer "):
        token = authorization[len("Bearer ") :]

    # Fall back to cookie
    if token is None and access_token:
        token = access_token

    if token is None:
        return None

    return get_user_from_token(db, token)


def require_auth(
    user: User | None = Depends(get_current_user),
) -> User:
    """Dependency that requires authentication (401 otherwise)."""
    if user is None:
        raise UnauthenticatedError()
    return user


def get_bounty_or_404(bounty_id: int, db: Session = Depends(get_db)) -> Bounty:
    """Load the bounty named in the path or raise 404."""
    bounty = get_bounty(db, bounty_id)
    if bounty is None:
        raise NotFoundError("Bounty not found")
    return bounty


def get_bounty_capability(
    user: User = Depends(require_auth),
    bounty: Bounty = Depends(get_bounty_or_404),
    db: Session = Depends(get_db),
) -> BountyCapability:
    """Resolve what the caller may do with the bounty in the path."""
    return resolve_bounty_capability(db, user, bounty)
