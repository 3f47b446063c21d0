"""
ArtistDiscovery model.

Referral relationship between a scout and an artist they brought in.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.models.enums import DiscoveryStatus


if TYPE_CHECKING:
    from app.models.artist import Artist
    from app.models.scout import Scout


@dataclass(frozen=True)
class NotConverted:
    """Artist has not started a paid subscription yet."""


@dataclass(frozen=True)
class Converted:
    """Artist converted at a known moment.

    Prepurchase conversions lock the lifetime commission rate.
    """

    at: datetime
    is_prepurchase: bool = False


Conversion = NotConverted | Converted


class ArtistDiscovery(Base):
    """
    ArtistDiscovery entity.

    Commissions are only computed for converted discoveries. The check
    constraint rules out has_converted=true without a conversion time.

    Attributes:
        id: Primary key
        scout_id: Referring scout
        artist_id: Referred artist
        status: Pipeline status (DISCOVERED ... CONVERTED, CHURNED)
        has_converted: Whether the artist started paying
        converted_at: Conversion time (nullable)
        is_prepurchase: Upfront purchase, locks the lifetime rate
        created_at: When the discovery was submitted
    """

    __tablename__ = "artist_discoveries"
    __table_args__ = (
        UniqueConstraint(
            "scout_id", "artist_id",
            name="uq_artist_discovery_scout_artist",
        ),
        CheckConstraint(
            "has_converted = false OR converted_at IS NOT NULL",
            name="check_discovery_conversion_has_timestamp",
        ),
        Index("idx_artist_discovery_scout_status", "scout_id", "status"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    scout_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("scouts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    artist_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("artists.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=DiscoveryStatus.DISCOVERED.value,
    )
    has_converted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    converted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_prepurchase: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    scout: Mapped["Scout"] = relationship(
        "Scout", back_populates="discoveries"
    )
    artist: Mapped["Artist"] = relationship("Artist")

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ArtistDiscovery(id={self.id}, scout_id={self.scout_id}, "
            f"artist_id={self.artist_id}, status={self.status})>"
        )

    @property
    def conversion(self) -> Conversion:
        """Conversion state as a tagged variant."""
        if self.has_converted and self.converted_at is not None:
            return Converted(
                at=self.converted_at,
                is_prepurchase=bool(self.is_prepurchase),
            )
        return NotConverted()
