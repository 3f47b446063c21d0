"""
Listener influence service.

Records listener playbacks and reports how a scout's referred listener
network engaged with an artist. The influence bonus reads the same data.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.listener import ListenerPlayback
from app.repositories.playback_repository import PlaybackRepository


@dataclass
class PlaybackTrackInfo:
    """Track played by a listener."""

    artist_id: int
    track_title: str
    track_id: str | None = None
    session_id: str | None = None
    duration: int | None = None
    completed_track: bool = False
    played_at: datetime | None = None


@dataclass
class NetworkInfluence:
    """Engagement of a scout's listener network with an artist."""

    has_influence: bool
    listener_count: int
    playback_count: int


@dataclass
class NetworkPlaybackStats:
    """Playback totals of a scout's network for one artist."""

    total_referrals: int
    listeners_who_played: int
    total_playbacks: int
    average_playbacks_per_listener: Decimal


class InfluenceService:
    """Listener playback tracking and network influence queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize influence service."""
        self.session = session
        self.playback_repo = PlaybackRepository(session)

    @staticmethod
    def _playback_data(listener_id: int, track: PlaybackTrackInfo) -> dict:
        data = {
            "listener_id": listener_id,
            "artist_id": track.artist_id,
            "track_id": track.track_id,
            "track_title": track.track_title,
            "session_id": track.session_id,
            "duration": track.duration,
            "completed_track": track.completed_track,
        }
        if track.played_at is not None:
            data["played_at"] = track.played_at
        return data

    async def track_listener_playback(
        self, listener_id: int, track: PlaybackTrackInfo
    ) -> ListenerPlayback:
        """
        Record a listener's playback.

        Args:
            listener_id: Listener ID
            track: Played track

        Returns:
            Created playback
        """
        playbacks = await self.playback_repo.add_playbacks(
            [self._playback_data(listener_id, track)]
        )
        await self.session.commit()
        return playbacks[0]

    async def batch_track_playbacks(
        self, items: list[tuple[int, PlaybackTrackInfo]]
    ) -> int:
        """
        Record many playbacks in one transaction.

        Args:
            items: (listener_id, track) pairs

        Returns:
            Number of playbacks recorded
        """
        if not items:
            return 0

        await self.playback_repo.add_playbacks(
            [self._playback_data(listener_id, track) for listener_id, track in items]
        )
        await self.session.commit()

        logger.debug(f"Recorded {len(items)} listener playbacks")
        return len(items)

    async def has_listener_influence(
        self, listener_id: int, artist_id: int, before: datetime
    ) -> bool:
        """Check if one listener played the artist before a moment."""
        stmt = (
            select(ListenerPlayback.id)
            .where(
                ListenerPlayback.listener_id == listener_id,
                ListenerPlayback.artist_id == artist_id,
                ListenerPlayback.played_at < before,
            )
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def get_network_influence(
        self, scout_id: int, artist_id: int, before: datetime
    ) -> NetworkInfluence:
        """
        Measure network engagement with an artist before a moment.

        Args:
            scout_id: Scout whose referred listeners are counted
            artist_id: Artist ID
            before: Exclusive upper bound for played_at

        Returns:
            NetworkInfluence
        """
        if await self.playback_repo.count_referred_listeners(scout_id) == 0:
            return NetworkInfluence(
                has_influence=False, listener_count=0, playback_count=0
            )

        listener_count, playback_count = (
            await self.playback_repo.get_network_playback_counts(
                scout_id, artist_id, before
            )
        )
        return NetworkInfluence(
            has_influence=playback_count > 0,
            listener_count=listener_count,
            playback_count=playback_count,
        )

    async def get_scout_network_playback_stats(
        self, scout_id: int, artist_id: int
    ) -> NetworkPlaybackStats:
        """
        Get playback totals of a scout's network for an artist.

        Returns:
            NetworkPlaybackStats (average rounded to 2 places)
        """
        total_referrals = await self.playback_repo.count_referred_listeners(
            scout_id
        )
        if total_referrals == 0:
            return NetworkPlaybackStats(0, 0, 0, Decimal("0"))

        listeners, playbacks = await self.playback_repo.get_network_playback_counts(
            scout_id, artist_id
        )
        average = Decimal("0")
        if listeners:
            average = (Decimal(playbacks) / Decimal(listeners)).quantize(
                Decimal("0.01"), rounding=ROUND_HALF_UP
            )

        return NetworkPlaybackStats(
            total_referrals=total_referrals,
            listeners_who_played=listeners,
            total_playbacks=playbacks,
            average_playbacks_per_listener=average,
        )
