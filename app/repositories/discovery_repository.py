"""
Artist discovery repository.

Data access layer for ArtistDiscovery model.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.artist_discovery import ArtistDiscovery
from app.models.enums import DiscoveryStatus
from app.repositories.base import BaseRepository


class DiscoveryRepository(BaseRepository[ArtistDiscovery]):
    """Discovery repository with conversion queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize discovery repository."""
        super().__init__(ArtistDiscovery, session)

    async def get_for_pair(
        self, scout_id: int, artist_id: int
    ) -> ArtistDiscovery | None:
        """
        Get discovery for a (scout, artist) pair.

        Args:
            scout_id: Scout ID
            artist_id: Artist ID

        Returns:
            Discovery or None
        """
        return await self.get_by(scout_id=scout_id, artist_id=artist_id)

    async def get_converted_by_scout(
        self, scout_id: int
    ) -> list[ArtistDiscovery]:
        """
        Get scout's converted discoveries with status CONVERTED.

        Args:
            scout_id: Scout ID

        Returns:
            Discoveries ordered by ID
        """
        stmt = (
            select(ArtistDiscovery)
            .where(
                ArtistDiscovery.scout_id == scout_id,
                ArtistDiscovery.has_converted.is_(True),
                ArtistDiscovery.status == DiscoveryStatus.CONVERTED.value,
            )
            .order_by(ArtistDiscovery.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
