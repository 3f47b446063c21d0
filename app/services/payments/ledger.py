"""
Ledger-only payment processor.

Used when no payout API is configured: the payout is recorded in the
commission ledger and the scout's lifetime totals only.
"""

from decimal import Decimal

from loguru import logger


class LedgerPaymentProcessor:
    """Payment processor that issues internal payout references."""

    async def create_scout_payout(self, scout, amount: Decimal, period: str) -> str:
        """
        Record an internal payout.

        Returns:
            Deterministic payout ID for (scout, period)
        """
        payout_id = f"ledger_{period}_{scout.id}"
        logger.info(
            f"Ledger payout {payout_id}: {amount} to scout {scout.id}",
            extra={"scout_id": scout.id, "period": period},
        )
        return payout_id

    async def close(self) -> None:
        """Nothing to release."""
