from app.models.bounty import Bounty, BountyStatus
from app.models.curator import Curator
from app.models.member import Member, OrgRole
from app.models.organization import Organization
from app.models.payment import Payment, PaymentStatus
from app.models.submission import Submission, SubmissionStatus
from app.models.user import User

__all__ = [
    "Bounty",
    "BountyStatus",
    "Curator",
    "Member",
    "OrgRole",
    "Organization",
    "Payment",
    "PaymentStatus",
    "Submission",
    "SubmissionStatus",
    "User",
]
