"""
Payout settlement.

Pays each scout's PENDING ledger rows for a period. Every scout is
settled in its own transaction under its own lock, so one failure is
recorded as FAILED for that scout and the batch continues.
"""

import asyncio
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Literal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import MINIMUM_PAYOUT_AMOUNT
from app.config.settings import settings
from app.models.enums import CommissionStatus
from app.repositories.commission_repository import CommissionRepository
from app.repositories.scout_repository import ScoutRepository
from app.services.notifications import LoggingScoutNotifier
from app.services.payments import get_payment_processor
from app.utils.datetime_utils import utc_now
from app.utils.distributed_lock import DistributedLock
from app.utils.exceptions import (
    ScoutNotFoundError,
    is_isolated_settlement_error,
)
from app.utils.period import parse_period

PayoutStatus = Literal["success", "failed"]


@dataclass
class PayoutResult:
    """Outcome of one scout's payout."""

    scout_id: int
    amount: Decimal
    status: PayoutStatus
    payout_id: str | None = None
    error: str | None = None


@dataclass
class PayoutSummary:
    """Result of a settlement run."""

    period: str
    total_paid: Decimal = Decimal("0")
    payout_count: int = 0
    failed_count: int = 0
    skipped_count: int = 0
    results: list[PayoutResult] = field(default_factory=list)


class PayoutSettlement:
    """Settles PENDING commissions per scout."""

    def __init__(
        self,
        session: AsyncSession,
        payment_processor=None,
        notifier=None,
        lock: DistributedLock | None = None,
        payout_timeout: float | None = None,
    ) -> None:
        """
        Initialize payout settlement.

        Args:
            session: Async database session
            payment_processor: Processor with create_scout_payout
                (defaults to get_payment_processor())
            notifier: Notifier with notify_scout_earnings
            lock: Lock serializing writes per scout (process-local if omitted)
            payout_timeout: Seconds allowed per processor call
        """
        self.session = session
        self.commission_repo = CommissionRepository(session)
        self.scout_repo = ScoutRepository(session)
        self.payment_processor = payment_processor or get_payment_processor()
        self.notifier = notifier or LoggingScoutNotifier()
        self.lock = lock or DistributedLock()
        self.payout_timeout = payout_timeout or settings.payout_timeout_seconds

    async def process_scout_payouts(self, period: str) -> PayoutSummary:
        """
        Pay all scouts with PENDING commissions for a period.

        Sums below the minimum payout are skipped without a result entry.

        Args:
            period: Period token ("YYYY-MM")

        Returns:
            Summary with per-scout results

        Raises:
            InvalidPeriodError: Malformed period
        """
        parse_period(period)
        summary = PayoutSummary(period=period)

        if settings.emergency_stop_payouts:
            logger.warning(
                f"Emergency stop active, payouts for {period} not processed"
            )
            return summary

        logger.info(f"Processing scout payouts for period {period}")

        pending = await self.commission_repo.get_pending_totals_by_scout(period)

        for scout_id, amount in pending:
            if amount < MINIMUM_PAYOUT_AMOUNT:
                logger.debug(
                    f"Scout {scout_id} pending {amount} below minimum payout"
                )
                summary.skipped_count += 1
                continue

            async with self.lock.lock(
                f"scout_payout:{scout_id}",
                timeout=settings.payout_lock_timeout,
                blocking=False,
            ) as acquired:
                if not acquired:
                    logger.warning(
                        f"Payout for scout {scout_id} already in progress, skipping"
                    )
                    summary.skipped_count += 1
                    continue

                result = await self._settle_scout(scout_id, period)

            if result is None:
                summary.skipped_count += 1
                continue

            summary.results.append(result)
            if result.status == "success":
                summary.total_paid += result.amount
                summary.payout_count += 1
            else:
                summary.failed_count += 1

        logger.info(
            f"Payout processing complete: {summary.payout_count} successful, "
            f"{summary.failed_count} failed, total {summary.total_paid}",
            extra={"period": period, "skipped_count": summary.skipped_count},
        )
        return summary

    async def _settle_scout(
        self, scout_id: int, period: str
    ) -> PayoutResult | None:
        # Re-read under the lock; another worker may have settled meanwhile
        amount = await self._pending_amount(scout_id, period)
        if amount < MINIMUM_PAYOUT_AMOUNT:
            return None

        payout_id: str | None = None
        try:
            scout = await self.scout_repo.get_by_id(scout_id)
            if scout is None:
                raise ScoutNotFoundError(scout_id)

            try:
                payout_id = await asyncio.wait_for(
                    self.payment_processor.create_scout_payout(
                        scout, amount, period
                    ),
                    timeout=self.payout_timeout,
                )
            except TimeoutError as e:
                raise TimeoutError(
                    f"Payout timed out after {self.payout_timeout}s"
                ) from e

            paid_at = utc_now()
            await self.commission_repo.mark_paid(
                scout_id, period, payout_id, paid_at
            )
            await self.scout_repo.credit_earnings(scout_id, amount)
            await self.session.commit()

        except Exception as e:
            await self.session.rollback()
            error = str(e) or type(e).__name__

            if is_isolated_settlement_error(e):
                logger.error(
                    f"Payout failed for scout {scout_id}: {error}",
                    extra={"scout_id": scout_id, "period": period},
                )
            else:
                logger.exception(
                    f"Unexpected payout error for scout {scout_id}: {error}"
                )

            if payout_id is not None:
                # Money moved but the ledger write was lost
                logger.error(
                    f"Payout {payout_id} to scout {scout_id} issued but not "
                    f"recorded, reconcile manually",
                    extra={
                        "scout_id": scout_id,
                        "period": period,
                        "payout_id": payout_id,
                    },
                )

            await self._mark_failed(scout_id, period, error, payout_id)
            return PayoutResult(
                scout_id=scout_id,
                amount=amount,
                status="failed",
                payout_id=payout_id,
                error=error,
            )

        logger.info(
            f"Paid {amount} to scout {scout_id} for {period}",
            extra={"payout_id": payout_id},
        )

        try:
            await self.notifier.notify_scout_earnings(scout, period, amount)
        except Exception as e:
            logger.warning(f"Earnings notification failed for scout {scout_id}: {e}")

        return PayoutResult(
            scout_id=scout_id,
            amount=amount,
            status="success",
            payout_id=payout_id,
        )

    async def _pending_amount(self, scout_id: int, period: str) -> Decimal:
        totals = await self.commission_repo.get_status_totals(scout_id, period)
        amount, _ = totals.get(CommissionStatus.PENDING, (Decimal("0"), 0))
        return amount

    async def _mark_failed(
        self,
        scout_id: int,
        period: str,
        error: str,
        payout_id: str | None = None,
    ) -> None:
        try:
            await self.commission_repo.mark_failed(
                scout_id, period, error, utc_now(), payout_id=payout_id
            )
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.error(
                f"Could not mark commissions FAILED for scout {scout_id}: {e}"
            )
