"""
Monthly commission aggregator.

Materializes calculator output as PENDING ledger rows for every active
scout. Re-running for a processed period creates nothing: existing rows
are skipped, and a concurrent duplicate insert is rejected by the unique
constraint and counted as already processed.
"""

from dataclasses import dataclass
from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import CommissionStatus, CommissionType
from app.repositories.artist_repository import ArtistRepository
from app.repositories.commission_repository import CommissionRepository
from app.repositories.discovery_repository import DiscoveryRepository
from app.repositories.scout_repository import ScoutRepository
from app.services.commission.calculator import (
    CommissionCalculation,
    CommissionCalculator,
)
from app.utils.exceptions import DuplicateCommissionError
from app.utils.period import parse_period


@dataclass
class MonthlyCommissionSummary:
    """Result of a monthly aggregation run."""

    period: str
    total_commissions: Decimal = Decimal("0")
    total_bonuses: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")
    scout_count: int = 0
    record_count: int = 0
    skipped_count: int = 0


class MonthlyCommissionAggregator:
    """Creates the period's ledger rows, one transaction per scout."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize aggregator.

        Args:
            session: Async database session
        """
        self.session = session
        self.scout_repo = ScoutRepository(session)
        self.discovery_repo = DiscoveryRepository(session)
        self.artist_repo = ArtistRepository(session)
        self.commission_repo = CommissionRepository(session)
        self.calculator = CommissionCalculator(
            session,
            discovery_repo=self.discovery_repo,
            artist_repo=self.artist_repo,
        )

    async def calculate_monthly_scout_commissions(
        self, period: str
    ) -> MonthlyCommissionSummary:
        """
        Create PENDING commission rows for a period.

        Args:
            period: Period token ("YYYY-MM")

        Returns:
            Summary with totals of newly created rows

        Raises:
            InvalidPeriodError: Malformed period
        """
        parse_period(period)
        logger.info(f"Calculating scout commissions for period {period}")

        summary = MonthlyCommissionSummary(period=period)
        scouts = await self.scout_repo.get_active_scouts()
        summary.scout_count = len(scouts)

        for scout in scouts:
            scout_id = scout.id
            try:
                await self._process_scout(scout_id, period, summary)
                await self.session.commit()
            except Exception as e:
                await self.session.rollback()
                logger.exception(
                    f"Commission aggregation failed for scout {scout_id}: {e}",
                    extra={"scout_id": scout_id, "period": period},
                )
                raise

        summary.total_amount = summary.total_commissions + summary.total_bonuses

        logger.info(
            f"Commission calculation complete: {summary.record_count} records, "
            f"total {summary.total_amount}",
            extra={
                "period": period,
                "scout_count": summary.scout_count,
                "record_count": summary.record_count,
                "skipped_count": summary.skipped_count,
            },
        )
        return summary

    async def _process_scout(
        self, scout_id: int, period: str, summary: MonthlyCommissionSummary
    ) -> None:
        discoveries = await self.discovery_repo.get_converted_by_scout(scout_id)

        for discovery in discoveries:
            artist_id = discovery.artist_id

            artist = await self.artist_repo.get_by_id(artist_id)
            if artist is None or artist.is_free_tier:
                continue

            if await self.commission_repo.exists_for(scout_id, artist_id, period):
                logger.info(
                    f"Commission already exists for scout {scout_id}, "
                    f"artist {artist_id}, period {period}"
                )
                summary.skipped_count += 1
                continue

            calculation = await self.calculator.calculate_for_discovery(
                discovery, period
            )
            if calculation is None:
                continue

            try:
                await self._record(calculation)
            except DuplicateCommissionError:
                # Another run inserted the row after our check
                summary.skipped_count += 1
                continue

            summary.total_commissions += calculation.commission_amount
            summary.total_bonuses += calculation.bonus_amount
            summary.record_count += 1

            logger.info(
                f"Created commission for scout {scout_id}, artist {artist_id}: "
                f"{calculation.total_amount}"
            )

    async def _record(self, calculation: CommissionCalculation) -> None:
        await self.commission_repo.create_commission(
            scout_id=calculation.scout_id,
            artist_id=calculation.artist_id,
            discovery_id=calculation.discovery_id,
            commission_type=CommissionType.RECURRING.value,
            period=calculation.period,
            artist_tier=calculation.artist_tier,
            artist_payment=calculation.artist_payment,
            commission_rate=calculation.commission_rate,
            commission_amount=calculation.commission_amount,
            bonus_amount=calculation.bonus_amount,
            total_amount=calculation.total_amount,
            is_upgrade_bonus=calculation.has_upgrade_bonus,
            is_influence_bonus=calculation.has_influence_bonus,
            months_since_conversion=calculation.months_since_conversion,
            status=CommissionStatus.PENDING.value,
        )
