"""
ScoutCommission model.

The commission ledger. Exactly one row per (scout, artist, period).
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.models.enums import CommissionStatus, CommissionType
from app.models.types import MoneyType, RateType


if TYPE_CHECKING:
    from app.models.artist import Artist
    from app.models.scout import Scout


class ScoutCommission(Base):
    """
    ScoutCommission entity.

    Created PENDING by the monthly aggregator, moved to PAID or FAILED by
    payout settlement. Rows are never recomputed or deleted.

    Attributes:
        id: Primary key
        scout_id: Earning scout
        artist_id: Paying artist
        discovery_id: Discovery the commission derives from
        commission_type: Ledger row type (RECURRING)
        period: Settlement period ("YYYY-MM")
        artist_tier: Artist tier at computation time
        artist_payment: Tier price at computation time
        commission_rate: Rate applied (fraction)
        commission_amount: Base commission (payment * rate)
        bonus_amount: Upgrade + influence bonuses
        total_amount: commission_amount + bonus_amount
        is_upgrade_bonus: Upgrade bonus included
        is_influence_bonus: Influence bonus included
        months_since_conversion: Elapsed months used for the rate
        status: PENDING, PAID or FAILED
        payout_id: Payment processor payout reference
        failure_reason: Error captured when settlement failed
        paid_at: When the row was paid
        created_at: When the row was created
        updated_at: Last status change
    """

    __tablename__ = "scout_commissions"
    __table_args__ = (
        UniqueConstraint(
            "scout_id", "artist_id", "period",
            name="uq_scout_commission_scout_artist_period",
        ),
        CheckConstraint(
            "status IN ('PENDING', 'PAID', 'FAILED')",
            name="check_scout_commission_status_valid",
        ),
        CheckConstraint(
            "commission_amount >= 0",
            name="check_scout_commission_amount_non_negative",
        ),
        CheckConstraint(
            "bonus_amount >= 0",
            name="check_scout_commission_bonus_non_negative",
        ),
        CheckConstraint(
            "months_since_conversion >= 0",
            name="check_scout_commission_months_non_negative",
        ),
        Index("idx_scout_commission_period_status", "period", "status"),
        Index("idx_scout_commission_scout_period", "scout_id", "period"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    scout_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("scouts.id", ondelete="CASCADE"),
        nullable=False,
    )
    artist_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("artists.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    discovery_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("artist_discoveries.id", ondelete="SET NULL"),
        nullable=True,
    )

    commission_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=CommissionType.RECURRING.value,
    )
    period: Mapped[str] = mapped_column(String(7), nullable=False)

    # Snapshot at computation time
    artist_tier: Mapped[str] = mapped_column(String(20), nullable=False)
    artist_payment: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    commission_rate: Mapped[Decimal] = mapped_column(RateType, nullable=False)
    months_since_conversion: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )

    # Amounts
    commission_amount: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False
    )
    bonus_amount: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False, default=Decimal("0")
    )
    total_amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    is_upgrade_bonus: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    is_influence_bonus: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )

    # Settlement
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=CommissionStatus.PENDING.value,
    )
    payout_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    failure_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    paid_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
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

    scout: Mapped["Scout"] = relationship(
        "Scout", back_populates="commissions"
    )
    artist: Mapped["Artist"] = relationship("Artist")

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ScoutCommission(id={self.id}, scout_id={self.scout_id}, "
            f"artist_id={self.artist_id}, period={self.period}, "
            f"total={self.total_amount}, status={self.status})>"
        )
