"""Payment model: recorded on-chain payout to a winning submission."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.session import Base

if TYPE_CHECKING:
    from app.models.submission import Submission


class PaymentStatus(str, Enum):
    """Payout status."""

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    CONFIRMED = "CONFIRMED"
    FAILED = "FAILED"


# A submission with a payment in one of these states is considered paid
ACTIVE_PAYMENT_STATUSES = (PaymentStatus.CONFIRMED, PaymentStatus.PROCESSING)


class Payment(Base):
    """Payout record for a winning submission."""

    __tablename__ = "payments"

    __table_args__ = (Index("ix_payments_submission_id", "submission_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    submission_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False
    )
    organization_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    recipient_address: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    amount: Mapped[float] = mapped_column(Numeric(20, 8, asdecimal=False), nullable=False)
    token: Mapped[str] = mapped_column(String(32), nullable=False)
    extrinsic_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[PaymentStatus] = mapped_column(
        SAEnum(
            PaymentStatus,
            name="payment_status",
            native_enum=False,
            length=20,
            values_callable=lambda e: [m.value for m in e],
        ),
        default=PaymentStatus.PENDING,
        nullable=False,
    )
    paid_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    submission: Mapped[Submission] = relationship("Submission", lazy="joined")
