"""
Artist repository.

Data access layer for Artist and AirplayPayment models.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.artist import AirplayPayment, Artist
from app.repositories.base import BaseRepository


class ArtistRepository(BaseRepository[Artist]):
    """Artist repository with tier payment queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize artist repository."""
        super().__init__(Artist, session)

    async def get_payments_for_period(
        self, artist_id: int, period: str
    ) -> list[AirplayPayment]:
        """
        Get artist's tier payments recorded for a period.

        Args:
            artist_id: Artist ID
            period: Period token ("YYYY-MM")

        Returns:
            Payments ordered by creation time, oldest first
        """
        stmt = (
            select(AirplayPayment)
            .where(
                AirplayPayment.artist_id == artist_id,
                AirplayPayment.period == period,
            )
            .order_by(AirplayPayment.created_at, AirplayPayment.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def add_payment(
        self, artist_id: int, tier: str, period: str, **data
    ) -> AirplayPayment:
        """Record a tier payment event."""
        payment = AirplayPayment(
            artist_id=artist_id, tier=tier, period=period, **data
        )
        self.session.add(payment)
        await self.session.flush()
        return payment
