"""
Artist and AirplayPayment models.

Artists pay a monthly airplay tier; every tier payment is recorded
as an AirplayPayment event.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.models.enums import AirplayTier
from app.models.types import MoneyType


class Artist(Base):
    """
    Artist entity.

    Attributes:
        id: Primary key
        name: Artist name
        email: Contact email
        airplay_tier: Current airplay tier (FREE or a paid tier)
        last_tier_upgrade: When the tier was last raised (nullable)
        created_at: When artist was created
    """

    __tablename__ = "artists"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str | None] = mapped_column(
        String(255), nullable=True, unique=True
    )

    airplay_tier: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AirplayTier.FREE.value,
        index=True,
    )
    last_tier_upgrade: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    payments: Mapped[list["AirplayPayment"]] = relationship(
        "AirplayPayment",
        back_populates="artist",
        order_by="AirplayPayment.created_at",
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Artist(id={self.id}, name={self.name!r}, "
            f"tier={self.airplay_tier})>"
        )

    @property
    def is_free_tier(self) -> bool:
        """Check if artist is on the free tier."""
        return self.airplay_tier == AirplayTier.FREE


class AirplayPayment(Base):
    """
    Airplay tier payment event.

    Attributes:
        id: Primary key
        artist_id: Paying artist
        tier: Tier paid for
        period: Billing period ("YYYY-MM")
        amount: Amount charged
        created_at: When the payment was recorded
    """

    __tablename__ = "airplay_payments"
    __table_args__ = (
        Index("idx_airplay_payments_artist_period", "artist_id", "period"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    artist_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("artists.id", ondelete="CASCADE"),
        nullable=False,
    )
    tier: Mapped[str] = mapped_column(String(20), nullable=False)
    period: Mapped[str] = mapped_column(String(7), nullable=False)
    amount: Mapped[Decimal] = mapped_column(
        MoneyType, nullable=False, default=Decimal("0")
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    artist: Mapped[Artist] = relationship("Artist", back_populates="payments")

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<AirplayPayment(id={self.id}, artist_id={self.artist_id}, "
            f"tier={self.tier}, period={self.period})>"
        )
