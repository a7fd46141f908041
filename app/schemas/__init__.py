"""Pydantic schemas for request/response validation."""

from app.schemas.auth import LoginRequest, MembershipRead, ProfileRead, TokenResponse
from app.schemas.bounty import BountyRead, BountyWithWinners, OrganizationRead
from app.schemas.common import APIModel, ErrorResponse
from app.schemas.curator import CuratorCreate, CuratorList, CuratorRead, CuratorResponse
from app.schemas.payment import (
    PaymentCreate,
    PaymentList,
    PaymentRead,
    PaymentRecordedResponse,
)
from app.schemas.submission import (
    ReviewRequest,
    SubmissionActionResponse,
    SubmissionRead,
    SubmitterRead,
)
from app.schemas.winners import (
    AffectedSubmission,
    AnnounceWinnersRequest,
    AnnounceWinnersResponse,
    PositionUpdateRequest,
    ResetWinnersResponse,
    WinnerInput,
)

__all__ = [
    # Common
    "APIModel",
    "ErrorResponse",
    # Auth
    "LoginRequest",
    "MembershipRead",
    "ProfileRead",
    "TokenResponse",
    # Bounty / submission
    "BountyRead",
    "BountyWithWinners",
    "OrganizationRead",
    "ReviewRequest",
    "SubmissionActionResponse",
    "SubmissionRead",
    "SubmitterRead",
    # Winners
    "AffectedSubmission",
    "AnnounceWinnersRequest",
    "AnnounceWinnersResponse",
    "PositionUpdateRequest",
    "ResetWinnersResponse",
    "WinnerInput",
    # Payments
    "PaymentCreate",
    "PaymentList",
    "PaymentRead",
    "PaymentRecordedResponse",
    # Curators
    "CuratorCreate",
    "CuratorList",
    "CuratorRead",
    "CuratorResponse",
]
