"""
Listener network models.

ListenerReferral links a scout to listeners they referred.
ListenerPlayback records listeners playing an artist's tracks.
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base


if TYPE_CHECKING:
    from app.models.scout import Scout


class ListenerReferral(Base):
    """
    Listener referred by a scout.

    Attributes:
        id: Primary key
        scout_id: Referring scout
        listener_id: Referred listener (listener records live elsewhere)
        created_at: When the referral was recorded
    """

    __tablename__ = "listener_referrals"
    __table_args__ = (
        UniqueConstraint(
            "scout_id", "listener_id",
            name="uq_listener_referral_scout_listener",
        ),
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
    listener_id: Mapped[int] = mapped_column(
        Integer, nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    scout: Mapped["Scout"] = relationship(
        "Scout", back_populates="listener_referrals"
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ListenerReferral(scout_id={self.scout_id}, "
            f"listener_id={self.listener_id})>"
        )


class ListenerPlayback(Base):
    """
    Playback event of an artist's track by a listener.

    Attributes:
        id: Primary key
        listener_id: Listener who played the track
        artist_id: Artist whose track was played
        track_id: Track identifier (optional)
        track_title: Track title
        session_id: Listening session (optional)
        duration: Seconds listened (optional)
        completed_track: Whether the track was played to the end
        played_at: When the playback happened
    """

    __tablename__ = "listener_playbacks"
    __table_args__ = (
        Index(
            "idx_listener_playback_listener_artist_played",
            "listener_id", "artist_id", "played_at",
        ),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    listener_id: Mapped[int] = mapped_column(Integer, nullable=False)
    artist_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("artists.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    track_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    track_title: Mapped[str] = mapped_column(
        String(300), nullable=False, default=""
    )
    session_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    completed_track: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    played_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ListenerPlayback(listener_id={self.listener_id}, "
            f"artist_id={self.artist_id}, played_at={self.played_at})>"
        )
