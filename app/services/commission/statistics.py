"""
Commission statistics.

Read-only aggregations over the commission ledger.
"""

from dataclasses import dataclass, field
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import CommissionStatus
from app.models.scout_commission import ScoutCommission
from app.repositories.commission_repository import CommissionRepository
from app.utils.period import get_current_period, parse_period


@dataclass
class ScoutCommissionSummary:
    """Scout's ledger for one period."""

    scout_id: int
    period: str
    total_commissions: Decimal = Decimal("0")
    total_bonuses: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")
    commission_count: int = 0
    paid_amount: Decimal = Decimal("0")
    pending_amount: Decimal = Decimal("0")
    failed_amount: Decimal = Decimal("0")
    commissions: list[ScoutCommission] = field(default_factory=list)


@dataclass
class PeriodEarnings:
    """Ledger total of one period."""

    period: str
    amount: Decimal
    count: int


@dataclass
class ScoutLifetimeEarnings:
    """Scout's ledger across all periods."""

    scout_id: int
    total_earnings: Decimal = Decimal("0")
    paid_amount: Decimal = Decimal("0")
    pending_amount: Decimal = Decimal("0")
    commission_count: int = 0
    by_period: list[PeriodEarnings] = field(default_factory=list)


class CommissionStatistics:
    """Scout commission reporting."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize statistics service."""
        self.session = session
        self.commission_repo = CommissionRepository(session)

    async def get_scout_commission_summary(
        self, scout_id: int, period: str | None = None
    ) -> ScoutCommissionSummary:
        """
        Summarize scout's commissions for a period.

        Args:
            scout_id: Scout ID
            period: Period token (defaults to the current period)

        Returns:
            Period summary with itemized rows
        """
        period = period or get_current_period()
        parse_period(period)

        rows = await self.commission_repo.get_scout_commissions(scout_id, period)
        by_status = await self.commission_repo.get_status_totals(scout_id, period)

        summary = ScoutCommissionSummary(
            scout_id=scout_id,
            period=period,
            commission_count=len(rows),
            commissions=rows,
        )
        for row in rows:
            summary.total_commissions += row.commission_amount
            summary.total_bonuses += row.bonus_amount
            summary.total_amount += row.total_amount

        summary.paid_amount = by_status.get(
            CommissionStatus.PAID, (Decimal("0"), 0)
        )[0]
        summary.pending_amount = by_status.get(
            CommissionStatus.PENDING, (Decimal("0"), 0)
        )[0]
        summary.failed_amount = by_status.get(
            CommissionStatus.FAILED, (Decimal("0"), 0)
        )[0]
        return summary

    async def get_scout_lifetime_earnings(
        self, scout_id: int
    ) -> ScoutLifetimeEarnings:
        """
        Summarize scout's ledger across all periods.

        Args:
            scout_id: Scout ID

        Returns:
            Lifetime totals with per-period breakdown, newest first
        """
        by_status = await self.commission_repo.get_status_totals(scout_id)
        by_period = await self.commission_repo.get_period_totals(scout_id)

        earnings = ScoutLifetimeEarnings(
            scout_id=scout_id,
            by_period=[
                PeriodEarnings(period=period, amount=amount, count=count)
                for period, amount, count in by_period
            ],
        )
        for status, (amount, count) in by_status.items():
            earnings.total_earnings += amount
            earnings.commission_count += count
            if status == CommissionStatus.PAID:
                earnings.paid_amount = amount
            elif status == CommissionStatus.PENDING:
                earnings.pending_amount = amount

        return earnings
