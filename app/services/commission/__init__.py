"""
Scout commission services package.

Contains modular services for scout commissions:
- rate_policy: Commission rate by prepurchase flag and elapsed months
- bonus_detector: Upgrade and influence bonus predicates
- calculator: Itemized commission per (scout, artist, period)
- aggregator: Monthly ledger materialization
- settlement: Per-scout payout settlement
- statistics: Ledger reporting
"""

from sqlalchemy.ext.asyncio import AsyncSession

from app.services.commission.aggregator import (
    MonthlyCommissionAggregator,
    MonthlyCommissionSummary,
)
from app.services.commission.bonus_detector import BonusDetector
from app.services.commission.calculator import (
    CommissionCalculation,
    CommissionCalculator,
    ScoutCommissionTotals,
)
from app.services.commission.rate_policy import get_commission_rate
from app.services.commission.settlement import (
    PayoutResult,
    PayoutSettlement,
    PayoutSummary,
)
from app.services.commission.statistics import (
    CommissionStatistics,
    ScoutCommissionSummary,
    ScoutLifetimeEarnings,
)


class ScoutCommissionService:
    """
    Scout commission service.

    Facade over calculator, aggregator, settlement and statistics.
    """

    def __init__(
        self,
        session: AsyncSession,
        payment_processor=None,
        notifier=None,
        lock=None,
    ) -> None:
        """Initialize scout commission service."""
        self.session = session

        self.calculator = CommissionCalculator(session)
        self.aggregator = MonthlyCommissionAggregator(session)
        self.statistics = CommissionStatistics(session)
        self._payment_processor = payment_processor
        self._notifier = notifier
        self._lock = lock
        self._settlement: PayoutSettlement | None = None

    @property
    def settlement(self) -> PayoutSettlement:
        """Settlement component, created on first payout run."""
        if self._settlement is None:
            self._settlement = PayoutSettlement(
                self.session,
                payment_processor=self._payment_processor,
                notifier=self._notifier,
                lock=self._lock,
            )
        return self._settlement

    async def calculate_scout_commission(
        self, scout_id: int, artist_id: int, period: str
    ) -> CommissionCalculation | None:
        """Calculate one scout/artist commission."""
        return await self.calculator.calculate_scout_commission(
            scout_id, artist_id, period
        )

    async def calculate_all_scout_commissions(
        self, scout_id: int, period: str
    ) -> ScoutCommissionTotals:
        """Calculate all commissions of a scout."""
        return await self.calculator.calculate_all_scout_commissions(
            scout_id, period
        )

    async def calculate_monthly_scout_commissions(
        self, period: str
    ) -> MonthlyCommissionSummary:
        """Create the period's ledger rows."""
        return await self.aggregator.calculate_monthly_scout_commissions(period)

    async def process_scout_payouts(self, period: str) -> PayoutSummary:
        """Settle the period's pending rows."""
        return await self.settlement.process_scout_payouts(period)

    async def get_scout_commission_summary(
        self, scout_id: int, period: str | None = None
    ) -> ScoutCommissionSummary:
        """Get scout's period summary."""
        return await self.statistics.get_scout_commission_summary(
            scout_id, period
        )

    async def get_scout_lifetime_earnings(
        self, scout_id: int
    ) -> ScoutLifetimeEarnings:
        """Get scout's lifetime earnings."""
        return await self.statistics.get_scout_lifetime_earnings(scout_id)


__all__ = [
    # Facade
    "ScoutCommissionService",
    # Components
    "BonusDetector",
    "CommissionCalculator",
    "CommissionStatistics",
    "MonthlyCommissionAggregator",
    "PayoutSettlement",
    "get_commission_rate",
    # Results
    "CommissionCalculation",
    "MonthlyCommissionSummary",
    "PayoutResult",
    "PayoutSummary",
    "ScoutCommissionSummary",
    "ScoutCommissionTotals",
    "ScoutLifetimeEarnings",
]
