"""
Scout commission tasks.

Monthly jobs: materialize the previous month's commission ledger, then
settle pending commissions. Each run holds a job-wide lock so
overlapping triggers for the same period do not race.
"""

from typing import Any

import dramatiq
from loguru import logger

from app.config.settings import settings
from app.services.commission import (
    MonthlyCommissionAggregator,
    PayoutSettlement,
)
from app.services.payments import get_payment_processor
from app.utils.distributed_lock import DistributedLock
from app.utils.period import get_previous_period, parse_period
from app.utils.redis_utils import get_redis_client
from jobs.async_runner import create_local_session, run_async
from jobs.broker import broker  # noqa: F401

AGGREGATION_LOCK_TIMEOUT = 1800  # 30 minutes
SETTLEMENT_LOCK_TIMEOUT = 3600  # 1 hour


async def _get_lock() -> tuple[DistributedLock, Any]:
    redis_client = None
    try:
        redis_client = await get_redis_client()
    except Exception as e:
        logger.warning(f"Failed to create Redis client for lock: {e}")
    return DistributedLock(redis_client=redis_client), redis_client


async def calculate_commissions_for_period(period: str) -> dict[str, Any]:
    """
    Run the monthly aggregation for a period under the job lock.

    Returns:
        Summary dict (amounts as strings), or {"skipped": True}
    """
    parse_period(period)
    lock, redis_client = await _get_lock()

    try:
        async with lock.lock(
            f"scout_commissions:calculate:{period}",
            timeout=AGGREGATION_LOCK_TIMEOUT,
            blocking=False,
        ) as acquired:
            if not acquired:
                logger.warning(
                    f"Commission calculation for {period} already running, skipping"
                )
                return {"period": period, "skipped": True}

            async with create_local_session() as session:
                aggregator = MonthlyCommissionAggregator(session)
                summary = await aggregator.calculate_monthly_scout_commissions(
                    period
                )

            return {
                "period": summary.period,
                "total_commissions": str(summary.total_commissions),
                "total_bonuses": str(summary.total_bonuses),
                "total_amount": str(summary.total_amount),
                "scout_count": summary.scout_count,
                "record_count": summary.record_count,
                "skipped_count": summary.skipped_count,
            }
    finally:
        if redis_client:
            await redis_client.aclose()


async def settle_payouts_for_period(period: str) -> dict[str, Any]:
    """
    Run payout settlement for a period under the job lock.

    Returns:
        Summary dict (amounts as strings), or {"skipped": True}
    """
    parse_period(period)
    lock, redis_client = await _get_lock()
    payment_processor = get_payment_processor()

    try:
        async with lock.lock(
            f"scout_commissions:payout:{period}",
            timeout=SETTLEMENT_LOCK_TIMEOUT,
            blocking=False,
        ) as acquired:
            if not acquired:
                logger.warning(
                    f"Payout settlement for {period} already running, skipping"
                )
                return {"period": period, "skipped": True}

            async with create_local_session() as session:
                settlement = PayoutSettlement(
                    session,
                    payment_processor=payment_processor,
                    lock=lock,
                )
                summary = await settlement.process_scout_payouts(period)

            return {
                "period": summary.period,
                "total_paid": str(summary.total_paid),
                "payout_count": summary.payout_count,
                "failed_count": summary.failed_count,
                "skipped_count": summary.skipped_count,
                "failed_scouts": [
                    {"scout_id": r.scout_id, "error": r.error}
                    for r in summary.results
                    if r.status == "failed"
                ],
            }
    finally:
        await payment_processor.close()
        if redis_client:
            await redis_client.aclose()


@dramatiq.actor(max_retries=3, time_limit=AGGREGATION_LOCK_TIMEOUT * 1000)
def calculate_monthly_commissions(period: str | None = None) -> dict[str, Any]:
    """
    Create PENDING ledger rows for a period (default: previous month).

    Safe to retry: existing rows are never recreated.
    """
    period = period or get_previous_period()
    logger.info(f"Starting scout commission calculation for {period}...")

    try:
        result = run_async(calculate_commissions_for_period(period))
        logger.info(f"Scout commission calculation complete: {result}")
        return result
    except Exception as e:
        logger.exception(f"Scout commission calculation failed: {e}")
        raise


# Processor calls are not idempotent; a crashed run is resumed by hand
@dramatiq.actor(max_retries=0, time_limit=SETTLEMENT_LOCK_TIMEOUT * 1000)
def process_scout_payouts(period: str | None = None) -> dict[str, Any]:
    """Settle PENDING ledger rows for a period (default: previous month)."""
    period = period or get_previous_period()

    if settings.emergency_stop_payouts:
        logger.warning(f"Emergency stop active, payout job for {period} skipped")
        return {"period": period, "skipped": True}

    logger.info(f"Starting scout payout settlement for {period}...")

    try:
        result = run_async(settle_payouts_for_period(period))
        logger.info(f"Scout payout settlement complete: {result}")
        return result
    except Exception as e:
        logger.exception(f"Scout payout settlement failed: {e}")
        raise
