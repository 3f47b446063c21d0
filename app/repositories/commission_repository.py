"""
Commission repository.

Data access layer for the ScoutCommission ledger.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from loguru import logger
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import CommissionStatus
from app.models.scout_commission import ScoutCommission
from app.repositories.base import BaseRepository
from app.utils.exceptions import DuplicateCommissionError


class CommissionRepository(BaseRepository[ScoutCommission]):
    """Ledger repository. Rows are inserted once and only move out of PENDING."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize commission repository."""
        super().__init__(ScoutCommission, session)

    async def exists_for(
        self, scout_id: int, artist_id: int, period: str
    ) -> bool:
        """Check if a ledger row exists for (scout, artist, period)."""
        return await self.exists(
            scout_id=scout_id, artist_id=artist_id, period=period
        )

    async def create_commission(self, **data: Any) -> ScoutCommission:
        """
        Insert a ledger row inside a savepoint.

        The unique constraint on (scout_id, artist_id, period) is the
        idempotency guarantee; a violation rolls back only the savepoint.

        Args:
            **data: ScoutCommission columns

        Returns:
            Created commission

        Raises:
            DuplicateCommissionError: Row already exists
        """
        entity = ScoutCommission(**data)
        try:
            async with self.session.begin_nested():
                self.session.add(entity)
                await self.session.flush()
        except IntegrityError as e:
            logger.warning(
                f"Duplicate commission for scout {data.get('scout_id')}, "
                f"artist {data.get('artist_id')}, period {data.get('period')}",
                extra={"error": str(e.orig)},
            )
            raise DuplicateCommissionError(
                data.get("scout_id"), data.get("artist_id"), data.get("period")
            ) from e
        return entity

    async def get_pending_totals_by_scout(
        self, period: str
    ) -> list[tuple[int, Decimal]]:
        """
        Sum PENDING ledger rows per scout for a period.

        Args:
            period: Period token

        Returns:
            List of (scout_id, pending_total) ordered by scout ID
        """
        stmt = (
            select(
                ScoutCommission.scout_id,
                func.sum(ScoutCommission.total_amount).label("total"),
            )
            .where(
                ScoutCommission.period == period,
                ScoutCommission.status == CommissionStatus.PENDING.value,
            )
            .group_by(ScoutCommission.scout_id)
            .order_by(ScoutCommission.scout_id)
        )
        result = await self.session.execute(stmt)
        return [
            (row.scout_id, Decimal(str(row.total or 0)))
            for row in result.all()
        ]

    async def mark_paid(
        self,
        scout_id: int,
        period: str,
        payout_id: str,
        paid_at: datetime,
    ) -> int:
        """
        Transition scout's PENDING rows for a period to PAID.

        Returns:
            Number of rows updated
        """
        stmt = (
            update(ScoutCommission)
            .where(
                ScoutCommission.scout_id == scout_id,
                ScoutCommission.period == period,
                ScoutCommission.status == CommissionStatus.PENDING.value,
            )
            .values(
                status=CommissionStatus.PAID.value,
                payout_id=payout_id,
                paid_at=paid_at,
                updated_at=paid_at,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def mark_failed(
        self,
        scout_id: int,
        period: str,
        reason: str,
        failed_at: datetime,
        payout_id: str | None = None,
    ) -> int:
        """
        Transition scout's PENDING rows for a period to FAILED.

        payout_id is kept when the processor paid but the PAID write was lost.

        Returns:
            Number of rows updated
        """
        stmt = (
            update(ScoutCommission)
            .where(
                ScoutCommission.scout_id == scout_id,
                ScoutCommission.period == period,
                ScoutCommission.status == CommissionStatus.PENDING.value,
            )
            .values(
                status=CommissionStatus.FAILED.value,
                failure_reason=reason[:1000],
                payout_id=payout_id,
                updated_at=failed_at,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def get_scout_commissions(
        self, scout_id: int, period: str | None = None
    ) -> list[ScoutCommission]:
        """
        Get scout's ledger rows, optionally for one period.

        Returns:
            Rows ordered by period (newest first), then artist
        """
        stmt = select(ScoutCommission).where(
            ScoutCommission.scout_id == scout_id
        )
        if period is not None:
            stmt = stmt.where(ScoutCommission.period == period)
        stmt = stmt.order_by(
            ScoutCommission.period.desc(), ScoutCommission.artist_id
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_status_totals(
        self, scout_id: int, period: str | None = None
    ) -> dict[str, tuple[Decimal, int]]:
        """
        Sum scout's ledger by status.

        Returns:
            Dict of status -> (amount, row count)
        """
        stmt = (
            select(
                ScoutCommission.status,
                func.sum(ScoutCommission.total_amount).label("total"),
                func.count(ScoutCommission.id).label("count"),
            )
            .where(ScoutCommission.scout_id == scout_id)
            .group_by(ScoutCommission.status)
        )
        if period is not None:
            stmt = stmt.where(ScoutCommission.period == period)

        result = await self.session.execute(stmt)
        return {
            row.status: (Decimal(str(row.total or 0)), row.count)
            for row in result.all()
        }

    async def get_period_totals(
        self, scout_id: int
    ) -> list[tuple[str, Decimal, int]]:
        """
        Sum scout's ledger per period.

        Returns:
            List of (period, amount, count), newest period first
        """
        stmt = (
            select(
                ScoutCommission.period,
                func.sum(ScoutCommission.total_amount).label("total"),
                func.count(ScoutCommission.id).label("count"),
            )
            .where(ScoutCommission.scout_id == scout_id)
            .group_by(ScoutCommission.period)
            .order_by(ScoutCommission.period.desc())
        )
        result = await self.session.execute(stmt)
        return [
            (row.period, Decimal(str(row.total or 0)), row.count)
            for row in result.all()
        ]
