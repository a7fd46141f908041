"""Submission model: one builder's entry to one bounty.

`position` is the source of truth for "is this submission a winner";
`is_winner` is a denormalized copy that every write path keeps in lockstep
through `set_winning` / `clear_winning`.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.session import Base
from app.models.user import User

if TYPE_CHECKING:
    from app.models.bounty import Bounty


class SubmissionStatus(str, Enum):
    """Submission lifecycle status (orthogonal to winner state)."""

    SUBMITTED = "SUBMITTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    SPAM = "SPAM"
    WITHDRAWN = "WITHDRAWN"


class Submission(Base):
    """Builder submission to a bounty, with winner position and prize."""

    __tablename__ = "submissions"

    __table_args__ = (
        # At most one holder per position within a bounty (NULLs never collide)
        Index("uq_submissions_bounty_position", "bounty_id", "position", unique=True),
        Index("ix_submissions_bounty_status", "bounty_id", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    bounty_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("bounties.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    content: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[SubmissionStatus] = mapped_column(
        SAEnum(
            SubmissionStatus,
            name="submission_status",
            native_enum=False,
            length=20,
            values_callable=lambda e: [m.value for m in e],
        ),
        default=SubmissionStatus.SUBMITTED,
        nullable=False,
    )
    position: Mapped[int | None] = mapped_column(Integer, nullable=True)
    winning_amount: Mapped[float | None] = mapped_column(
        Numeric(20, 8, asdecimal=False), nullable=True
    )
    winning_amount_usd: Mapped[float | None] = mapped_column(
        Numeric(20, 8, asdecimal=False), nullable=True
    )
    is_winner: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    winner_user_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    bounty: Mapped[Bounty] = relationship("Bounty", back_populates="submissions")
    submitter: Mapped[User] = relationship("User", foreign_keys=[user_id], lazy="joined")

    def set_winning(
        self,
        position: int,
        amount: float,
        amount_usd: float | None = None,
    ) -> None:
        """Mark as winner at `position`; is_winner follows position."""
        self.position = position
        self.winning_amount = amount
        self.winning_amount_usd = amount_usd
        self.is_winner = True
        self.winner_user_id = self.user_id

    def clear_winning(self) -> None:
        """Drop all winner fields. Lifecycle status is left untouched."""
        self.position = None
        self.winning_amount = None
        self.winning_amount_usd = None
        self.is_winner = False
        self.winner_user_id = None


# Column values written by bulk UPDATEs that clear winner state
CLEARED_WINNER_FIELDS = {
    Submission.position: None,
    Submission.winning_amount: None,
    Submission.winning_amount_usd: None,
    Submission.is_winner: False,
    Submission.winner_user_id: None,
}
