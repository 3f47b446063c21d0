"""
Playback repository.

Data access for a scout's listener network: referrals and the playback
events of referred listeners.
"""

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.listener import ListenerPlayback, ListenerReferral
from app.repositories.base import BaseRepository


class PlaybackRepository(BaseRepository[ListenerPlayback]):
    """Playback repository with listener network queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize playback repository."""
        super().__init__(ListenerPlayback, session)

    def _network_listener_ids(self, scout_id: int):
        return select(ListenerReferral.listener_id).where(
            ListenerReferral.scout_id == scout_id
        )

    async def count_referred_listeners(self, scout_id: int) -> int:
        """
        Count listeners referred by a scout.

        Args:
            scout_id: Scout ID

        Returns:
            Number of referred listeners
        """
        stmt = select(func.count(ListenerReferral.id)).where(
            ListenerReferral.scout_id == scout_id
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def has_network_playback_before(
        self, scout_id: int, artist_id: int, before: datetime
    ) -> bool:
        """
        Check if any referred listener played the artist before a moment.

        Args:
            scout_id: Scout whose network is checked
            artist_id: Artist whose tracks were played
            before: Exclusive upper bound for played_at

        Returns:
            True if at least one qualifying playback exists
        """
        stmt = (
            select(ListenerPlayback.id)
            .where(
                ListenerPlayback.artist_id == artist_id,
                ListenerPlayback.played_at < before,
                ListenerPlayback.listener_id.in_(
                    self._network_listener_ids(scout_id)
                ),
            )
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def get_network_playback_counts(
        self,
        scout_id: int,
        artist_id: int,
        before: datetime | None = None,
    ) -> tuple[int, int]:
        """
        Count distinct listeners and playbacks from a scout's network.

        Args:
            scout_id: Scout ID
            artist_id: Artist ID
            before: Optional exclusive upper bound for played_at

        Returns:
            Tuple of (listener_count, playback_count)
        """
        stmt = select(
            func.count(func.distinct(ListenerPlayback.listener_id)),
            func.count(ListenerPlayback.id),
        ).where(
            ListenerPlayback.artist_id == artist_id,
            ListenerPlayback.listener_id.in_(
                self._network_listener_ids(scout_id)
            ),
        )
        if before is not None:
            stmt = stmt.where(ListenerPlayback.played_at < before)

        result = await self.session.execute(stmt)
        listener_count, playback_count = result.one()
        return listener_count or 0, playback_count or 0

    async def add_playbacks(
        self, items: list[dict]
    ) -> list[ListenerPlayback]:
        """
        Append playback events.

        Args:
            items: Playback column dicts

        Returns:
            Created playbacks (flushed, with IDs)
        """
        playbacks = [ListenerPlayback(**item) for item in items]
        self.session.add_all(playbacks)
        await self.session.flush()
        return playbacks
