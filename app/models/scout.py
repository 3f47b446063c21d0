"""
Scout model.

Represents a promoter who refers artists and earns commissions.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.models.enums import ScoutStatus
from app.models.types import MoneyType


if TYPE_CHECKING:
    from app.models.artist_discovery import ArtistDiscovery
    from app.models.listener import ListenerReferral
    from app.models.scout_commission import ScoutCommission


class Scout(Base):
    """
    Scout entity.

    Lifetime counters are credited only by payout settlement.

    Attributes:
        id: Primary key
        name: Display name
        email: Contact email for earnings notifications
        payout_account_id: Payment processor destination (bank/external account)
        status: ACTIVE or INACTIVE
        total_earnings: Lifetime paid earnings
        total_commissions: Lifetime paid commissions
        created_at: Registration time
        updated_at: Last modification time
    """

    __tablename__ = "scouts"
    __table_args__ = (
        CheckConstraint(
            "status IN ('ACTIVE', 'INACTIVE')",
            name="check_scout_status_valid",
        ),
        CheckConstraint(
            "total_earnings >= 0",
            name="check_scout_total_earnings_non_negative",
        ),
        CheckConstraint(
            "total_commissions >= 0",
            name="check_scout_total_commissions_non_negative",
        ),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Profile
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    payout_account_id: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )

    # Status
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ScoutStatus.ACTIVE.value,
        index=True,
    )

    # Lifetime counters
    total_earnings: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False, default=Decimal("0")
    )
    total_commissions: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False, default=Decimal("0")
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Relationships
    discoveries: Mapped[list["ArtistDiscovery"]] = relationship(
        "ArtistDiscovery", back_populates="scout"
    )
    listener_referrals: Mapped[list["ListenerReferral"]] = relationship(
        "ListenerReferral", back_populates="scout"
    )
    commissions: Mapped[list["ScoutCommission"]] = relationship(
        "ScoutCommission", back_populates="scout"
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Scout(id={self.id}, name={self.name!r}, "
            f"status={self.status}, total_earnings={self.total_earnings})>"
        )
