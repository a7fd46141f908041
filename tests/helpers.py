"""Builders for test rows and a scripted exchange rate gateway."""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from app.models.bounty import Bounty, BountyStatus
from app.models.curator import Curator
from app.models.member import Member, OrgRole
from app.models.organization import Organization
from app.models.submission import Submission, SubmissionStatus
from app.models.user import User
from app.services.auth import create_access_token
from app.services.organization_access import BountyCapability

DEFAULT_WINNINGS = {"1": 1000, "2": 500}


class FakeGateway:
    """Exchange rate gateway double: fixed rates, optional failure, call log."""

    def __init__(self, rates: dict[str, float] | None = None, error: Exception | None = None):
        self.rates = dict(rates or {})
        self.error = error
        self.calls: list[list[str]] = []

    def get_exchange_rates(self, tokens: list[str]) -> dict[str, float]:
        self.calls.append(list(tokens))
        if self.error is not None:
            raise self.error
        return {t.upper(): self.rates[t.upper()] for t in tokens if t.upper() in self.rates}


def make_user(
    db: Session,
    username: str,
    email: str | None = None,
    wallet_address: str | None = None,
) -> User:
    # Skip bcrypt: these users never log in
    user = User(
        username=username,
        password_hash="!",
        email=email,
        wallet_address=wallet_address,
    )
    db.add(user)
    db.commit()
    return user


def make_organization(db: Session, name: str = "Acme Labs") -> Organization:
    org = Organization(name=name)
    db.add(org)
    db.commit()
    return org


def add_member(
    db: Session, org: Organization, user: User, role: OrgRole = OrgRole.OWNER
) -> Member:
    member = Member(organization_id=org.id, user_id=user.id, role=role)
    db.add(member)
    db.commit()
    return member


def make_bounty(
    db: Session,
    org: Organization,
    winnings: dict[str, Any] | None = DEFAULT_WINNINGS,
    token: str | None = "DOT",
    status: BountyStatus = BountyStatus.OPEN,
    amount: float | None = None,
    title: str = "Build a parachain explorer",
) -> Bounty:
    bounty = Bounty(
        organization_id=org.id,
        title=title,
        status=status,
        token=token,
        amount=amount,
        winnings=winnings,
    )
    db.add(bounty)
    db.commit()
    return bounty


def make_submission(
    db: Session,
    bounty: Bounty,
    user: User,
    status: SubmissionStatus = SubmissionStatus.SUBMITTED,
    position: int | None = None,
    amount: float | None = None,
    amount_usd: float | None = None,
    title: str | None = None,
) -> Submission:
    """Create a submission; a position makes it a consistent winner."""
    submission = Submission(
        bounty_id=bounty.id,
        user_id=user.id,
        status=status,
        title=title or f"Entry by {user.username}",
    )
    if position is not None:
        submission.set_winning(position, amount or 0.0, amount_usd)
    db.add(submission)
    db.commit()
    return submission


def add_curator(db: Session, bounty: Bounty, user: User) -> Curator:
    curator = Curator(bounty_id=bounty.id, user_id=user.id, contact=user.email or "")
    db.add(curator)
    db.commit()
    return curator


def capability_for(
    bounty: Bounty,
    role: OrgRole | None = OrgRole.OWNER,
    is_curator: bool = False,
    user_id: int = 1,
) -> BountyCapability:
    return BountyCapability(
        user_id=user_id,
        organization_id=bounty.organization_id,
        role=role,
        bounty_id=bounty.id,
        is_curator=is_curator,
    )


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(data={"sub": user.username})
    return {"Authorization": f"Bearer {token}"}
