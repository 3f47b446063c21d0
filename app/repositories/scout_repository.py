"""
Scout repository.

Data access layer for Scout model.
"""

from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import ScoutStatus
from app.models.scout import Scout
from app.repositories.base import BaseRepository


class ScoutRepository(BaseRepository[Scout]):
    """Scout repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize scout repository."""
        super().__init__(Scout, session)

    async def get_active_scouts(self) -> list[Scout]:
        """
        Get all ACTIVE scouts ordered by ID.

        Returns:
            List of active scouts
        """
        stmt = (
            select(Scout)
            .where(Scout.status == ScoutStatus.ACTIVE.value)
            .order_by(Scout.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def credit_earnings(self, scout_id: int, amount: Decimal) -> bool:
        """
        Atomically add a payout to the scout's lifetime counters.

        Uses UPDATE ... SET x = x + :amount so concurrent credits never
        overwrite each other.

        Args:
            scout_id: Scout ID
            amount: Paid amount

        Returns:
            True if the scout row was updated
        """
        stmt = (
            update(Scout)
            .where(Scout.id == scout_id)
            .values(
                total_earnings=Scout.total_earnings + amount,
                total_commissions=Scout.total_commissions + amount,
            )
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0
