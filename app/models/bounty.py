"""Bounty model: a funded task with a prize schedule keyed by position."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.session import Base
from app.services.errors import InvalidInputError

if TYPE_CHECKING:
    from app.models.organization import Organization
    from app.models.submission import Submission


class BountyStatus(str, Enum):
    """Bounty lifecycle status."""

    OPEN = "OPEN"
    REVIEWING = "REVIEWING"
    COMPLETED = "COMPLETED"
    CLOSED = "CLOSED"
    CANCELLED = "CANCELLED"


# Legal lifecycle moves; the winner subsystem only uses OPEN/REVIEWING -> COMPLETED.
ALLOWED_TRANSITIONS: dict[BountyStatus, frozenset[BountyStatus]] = {
    BountyStatus.OPEN: frozenset(
        {
            BountyStatus.REVIEWING,
            BountyStatus.COMPLETED,
            BountyStatus.CLOSED,
            BountyStatus.CANCELLED,
        }
    ),
    BountyStatus.REVIEWING: frozenset(
        {
            BountyStatus.OPEN,
            BountyStatus.COMPLETED,
            BountyStatus.CLOSED,
            BountyStatus.CANCELLED,
        }
    ),
    BountyStatus.COMPLETED: frozenset({BountyStatus.CLOSED}),
    BountyStatus.CLOSED: frozenset(),
    BountyStatus.CANCELLED: frozenset(),
}

# Statuses from which winners may be announced
ANNOUNCEABLE_STATUSES = frozenset({BountyStatus.OPEN, BountyStatus.REVIEWING})

# Winnings JSON: JSONB on PostgreSQL, generic JSON elsewhere
WinningsType = JSON().with_variant(JSONB(), "postgresql")


class Bounty(Base):
    """Funded task owned by an organization."""

    __tablename__ = "bounties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    organization_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[BountyStatus] = mapped_column(
        SAEnum(
            BountyStatus,
            name="bounty_status",
            native_enum=False,
            length=20,
            values_callable=lambda e: [m.value for m in e],
        ),
        default=BountyStatus.OPEN,
        nullable=False,
    )
    token: Mapped[str | None] = mapped_column(String(32), nullable=True)
    amount: Mapped[float | None] = mapped_column(
        Numeric(20, 8, asdecimal=False), nullable=True
    )
    winnings: Mapped[dict[str, Any] | None] = mapped_column(WinningsType, nullable=True)
    winners_announced_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    organization: Mapped[Organization] = relationship("Organization", lazy="select")
    submissions: Mapped[list[Submission]] = relationship(
        "Submission", back_populates="bounty", lazy="select"
    )

    def total_prize_pool(self) -> float:
        """Sum of the winnings table, or the bounty amount when there is no table.

        A null tier counts as zero. Any other non-numeric tier is rejected.
        """
        if self.winnings:
            total = 0.0
            for position, value in self.winnings.items():
                if value is None:
                    continue
                try:
                    if isinstance(value, bool):
                        raise TypeError(value)
                    total += float(value)
                except (TypeError, ValueError) as exc:
                    raise InvalidInputError(
                        "Bounty prize schedule contains a non-numeric amount",
                        details={"field": "winnings", "position": position, "value": str(value)},
                    ) from exc
            return total
        return float(self.amount or 0)

    def transition_to(self, status: BountyStatus) -> None:
        """Move to `status`, rejecting transitions the lifecycle does not allow."""
        if status not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidInputError(
                f"Cannot move bounty from {self.status.value} to {status.value}",
                details={"field": "status", "from": self.status.value, "to": status.value},
            )
        self.status = status
