"""
Integration tests for payout settlement.

Tests cover:
- Successful payouts (ledger PAID, scout totals credited)
- Minimum payout threshold
- Per-scout failure isolation
- Timeouts, missing scouts, notifier failures, emergency stop
"""

import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import select

from app.config.settings import settings
from app.models import Scout, ScoutCommission
from app.models.enums import CommissionStatus
from app.repositories.commission_repository import CommissionRepository
from app.services.commission import PayoutSettlement
from app.utils.exceptions import PaymentProcessorError

PERIOD = "2025-02"


async def add_commission(session, scout_id, artist_id, total, period=PERIOD):
    return await CommissionRepository(session).create_commission(
        scout_id=scout_id,
        artist_id=artist_id,
        period=period,
        artist_tier="TIER_20",
        artist_payment=Decimal("20"),
        commission_rate=Decimal("0.20"),
        commission_amount=Decimal(total),
        bonus_amount=Decimal("0"),
        total_amount=Decimal(total),
    )


async def statuses(session, scout_id) -> list[str]:
    result = await session.execute(
        select(ScoutCommission.status)
        .where(ScoutCommission.scout_id == scout_id)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def reload_scout(session, scout_id) -> Scout:
    result = await session.execute(
        select(Scout)
        .where(Scout.id == scout_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


class TestPayoutSettlement:
    """Test per-scout payout settlement."""

    @pytest.mark.asyncio
    async def test_successful_payout(
        self, db_session, factory, mock_payment_processor, mock_notifier
    ):
        """Pending rows become PAID and the scout is credited."""
        scout = await factory.scout("Ava")
        artist_a = await factory.artist("A")
        artist_b = await factory.artist("B")
        await add_commission(db_session, scout.id, artist_a.id, "4.00")
        await add_commission(db_session, scout.id, artist_b.id, "12.00")
        await db_session.commit()
        scout_id = scout.id

        settlement = PayoutSettlement(
            db_session,
            payment_processor=mock_payment_processor,
            notifier=mock_notifier,
        )
        summary = await settlement.process_scout_payouts(PERIOD)

        assert summary.payout_count == 1
        assert summary.failed_count == 0
        assert summary.total_paid == Decimal("16.00")
        assert len(summary.results) == 1

        result = summary.results[0]
        assert result.status == "success"
        assert result.scout_id == scout_id
        assert result.amount == Decimal("16.00")
        assert result.payout_id == f"po_{scout_id}_{PERIOD}"

        rows = (
            await db_session.execute(
                select(ScoutCommission).execution_options(populate_existing=True)
            )
        ).scalars().all()
        assert all(row.status == CommissionStatus.PAID for row in rows)
        assert all(row.paid_at is not None for row in rows)
        assert all(row.payout_id == result.payout_id for row in rows)

        paid_scout = await reload_scout(db_session, scout_id)
        assert paid_scout.total_earnings == Decimal("16.00")
        assert paid_scout.total_commissions == Decimal("16.00")

        mock_payment_processor.create_scout_payout.assert_awaited_once()
        mock_notifier.notify_scout_earnings.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_below_minimum_has_no_result(
        self, db_session, factory, mock_payment_processor, mock_notifier
    ):
        """A pending sum of 0.009 produces no result entry."""
        scout = await factory.scout("Ava")
        artist = await factory.artist("A")
        await add_commission(db_session, scout.id, artist.id, "0.009")
        await db_session.commit()
        scout_id = scout.id

        summary = await PayoutSettlement(
            db_session,
            payment_processor=mock_payment_processor,
            notifier=mock_notifier,
        ).process_scout_payouts(PERIOD)

        assert summary.results == []
        assert summary.payout_count == 0
        assert summary.failed_count == 0
        assert summary.skipped_count == 1
        assert await statuses(db_session, scout_id) == [CommissionStatus.PENDING]
        mock_payment_processor.create_scout_payout.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failure_is_isolated(self, db_session, factory, mock_notifier):
        """One failing scout does not stop the other from being paid."""
        failing = await factory.scout("Fail")
        paid = await factory.scout("Paid")
        artist = await factory.artist("A")
        await add_commission(db_session, failing.id, artist.id, "4.00")
        await add_commission(db_session, paid.id, artist.id, "6.00")
        await db_session.commit()

        failing_id = failing.id
        paid_id = paid.id

        async def create_scout_payout(scout, amount, period):
            if scout.id == failing_id:
                raise PaymentProcessorError("destination account closed")
            return f"po_{scout.id}"

        processor = AsyncMock()
        processor.create_scout_payout = AsyncMock(side_effect=create_scout_payout)

        summary = await PayoutSettlement(
            db_session, payment_processor=processor, notifier=mock_notifier
        ).process_scout_payouts(PERIOD)

        assert summary.payout_count == 1
        assert summary.failed_count == 1
        assert summary.total_paid == Decimal("6.00")

        by_scout = {r.scout_id: r for r in summary.results}
        assert by_scout[failing_id].status == "failed"
        assert by_scout[failing_id].error == "destination account closed"
        assert by_scout[paid_id].status == "success"

        assert await statuses(db_session, failing_id) == [CommissionStatus.FAILED]
        assert await statuses(db_session, paid_id) == [CommissionStatus.PAID]

        failed_row = (
            await db_session.execute(
                select(ScoutCommission).where(ScoutCommission.scout_id == failing_id)
            )
        ).scalar_one()
        assert failed_row.failure_reason == "destination account closed"

        failed_scout = await reload_scout(db_session, failing_id)
        assert failed_scout.total_earnings == Decimal("0")

    @pytest.mark.asyncio
    async def test_timeout_marks_failed(self, db_session, factory, mock_notifier):
        """A stuck processor call is abandoned and the scout marked FAILED."""
        scout = await factory.scout("Slow")
        artist = await factory.artist("A")
        await add_commission(db_session, scout.id, artist.id, "4.00")
        await db_session.commit()
        scout_id = scout.id

        async def slow_payout(scout, amount, period):
            await asyncio.sleep(5)
            return "never"

        processor = AsyncMock()
        processor.create_scout_payout = AsyncMock(side_effect=slow_payout)

        summary = await PayoutSettlement(
            db_session,
            payment_processor=processor,
            notifier=mock_notifier,
            payout_timeout=0.05,
        ).process_scout_payouts(PERIOD)

        assert summary.failed_count == 1
        assert "timed out" in summary.results[0].error
        assert await statuses(db_session, scout_id) == [CommissionStatus.FAILED]
        mock_notifier.notify_scout_earnings.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lost_ledger_write_keeps_payout_id(
        self, db_session, factory, mock_payment_processor, mock_notifier
    ):
        """A payout issued before a failed write is kept on the FAILED rows."""
        scout = await factory.scout("Ava")
        artist = await factory.artist("A")
        await add_commission(db_session, scout.id, artist.id, "4.00")
        await db_session.commit()
        scout_id = scout.id

        settlement = PayoutSettlement(
            db_session,
            payment_processor=mock_payment_processor,
            notifier=mock_notifier,
        )
        settlement.scout_repo.credit_earnings = AsyncMock(
            side_effect=RuntimeError("connection lost")
        )

        summary = await settlement.process_scout_payouts(PERIOD)

        assert summary.failed_count == 1
        result = summary.results[0]
        assert result.status == "failed"
        assert result.payout_id == f"po_{scout_id}_{PERIOD}"
        assert result.error == "connection lost"

        row = (
            await db_session.execute(
                select(ScoutCommission).execution_options(populate_existing=True)
            )
        ).scalar_one()
        assert row.status == CommissionStatus.FAILED
        assert row.payout_id == f"po_{scout_id}_{PERIOD}"
        assert row.paid_at is None
        assert row.failure_reason == "connection lost"

        unpaid_scout = await reload_scout(db_session, scout_id)
        assert unpaid_scout.total_earnings == Decimal("0")
        mock_notifier.notify_scout_earnings.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_scout_marks_failed(
        self, db_session, factory, mock_payment_processor, mock_notifier
    ):
        """Ledger rows for an unknown scout are marked FAILED."""
        artist = await factory.artist("A")
        await add_commission(db_session, 999, artist.id, "4.00")
        await db_session.commit()

        summary = await PayoutSettlement(
            db_session,
            payment_processor=mock_payment_processor,
            notifier=mock_notifier,
        ).process_scout_payouts(PERIOD)

        assert summary.failed_count == 1
        assert summary.results[0].error == "Scout 999 not found"
        assert await statuses(db_session, 999) == [CommissionStatus.FAILED]
        mock_payment_processor.create_scout_payout.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_notifier_failure_keeps_payout(
        self, db_session, factory, mock_payment_processor
    ):
        """Notification errors are logged and the payout stands."""
        scout = await factory.scout("Ava")
        artist = await factory.artist("A")
        await add_commission(db_session, scout.id, artist.id, "4.00")
        await db_session.commit()
        scout_id = scout.id

        notifier = AsyncMock()
        notifier.notify_scout_earnings = AsyncMock(side_effect=RuntimeError("smtp down"))

        summary = await PayoutSettlement(
            db_session,
            payment_processor=mock_payment_processor,
            notifier=notifier,
        ).process_scout_payouts(PERIOD)

        assert summary.payout_count == 1
        assert summary.results[0].status == "success"
        assert await statuses(db_session, scout_id) == [CommissionStatus.PAID]

    @pytest.mark.asyncio
    async def test_only_period_rows_settled(
        self, db_session, factory, mock_payment_processor, mock_notifier
    ):
        """Rows of other periods stay PENDING."""
        scout = await factory.scout("Ava")
        artist = await factory.artist("A")
        await add_commission(db_session, scout.id, artist.id, "4.00")
        await add_commission(db_session, scout.id, artist.id, "2.00", period="2025-03")
        await db_session.commit()
        scout_id = scout.id

        summary = await PayoutSettlement(
            db_session,
            payment_processor=mock_payment_processor,
            notifier=mock_notifier,
        ).process_scout_payouts(PERIOD)

        assert summary.total_paid == Decimal("4.00")
        assert sorted(await statuses(db_session, scout_id)) == [
            CommissionStatus.PAID,
            CommissionStatus.PENDING,
        ]

    @pytest.mark.asyncio
    async def test_second_run_pays_nothing(
        self, db_session, factory, mock_payment_processor, mock_notifier
    ):
        """Settled rows are not paid twice."""
        scout = await factory.scout("Ava")
        artist = await factory.artist("A")
        await add_commission(db_session, scout.id, artist.id, "4.00")
        await db_session.commit()
        scout_id = scout.id

        settlement = PayoutSettlement(
            db_session,
            payment_processor=mock_payment_processor,
            notifier=mock_notifier,
        )
        await settlement.process_scout_payouts(PERIOD)
        second = await settlement.process_scout_payouts(PERIOD)

        assert second.results == []
        assert mock_payment_processor.create_scout_payout.await_count == 1

    @pytest.mark.asyncio
    async def test_emergency_stop(
        self, db_session, factory, mock_payment_processor, mock_notifier, monkeypatch
    ):
        """Emergency stop returns an empty summary and pays nothing."""
        scout = await factory.scout("Ava")
        artist = await factory.artist("A")
        await add_commission(db_session, scout.id, artist.id, "4.00")
        await db_session.commit()
        scout_id = scout.id
        monkeypatch.setattr(settings, "emergency_stop_payouts", True)

        summary = await PayoutSettlement(
            db_session,
            payment_processor=mock_payment_processor,
            notifier=mock_notifier,
        ).process_scout_payouts(PERIOD)

        assert summary.results == []
        assert summary.payout_count == 0
        assert await statuses(db_session, scout_id) == [CommissionStatus.PENDING]
