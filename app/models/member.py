"""Member model: user membership and role in an organization."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.session import Base
from app.models.user import User


class OrgRole(str, Enum):
    """Organization role of a member."""

    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"


class Member(Base):
    """User membership in an organization (one row per user/organization)."""

    __tablename__ = "members"

    __table_args__ = (
        UniqueConstraint("organization_id", "user_id", name="uq_members_organization_user"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    organization_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    role: Mapped[OrgRole] = mapped_column(
        SAEnum(
            OrgRole,
            name="org_role",
            native_enum=False,
            length=20,
            values_callable=lambda e: [m.value for m in e],
        ),
        default=OrgRole.MEMBER,
        nullable=False,
    )

    user: Mapped[User] = relationship("User", back_populates="memberships", lazy="joined")
