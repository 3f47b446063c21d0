"""
Scout earnings notifications.

Delivery channels live outside this service; the notifier records the
notification so settlement can call it unconditionally.
"""

from decimal import Decimal

from loguru import logger


class LoggingScoutNotifier:
    """Notifier that logs earnings notifications."""

    async def notify_scout_earnings(
        self, scout, period: str, amount: Decimal
    ) -> None:
        """
        Notify scout about a completed payout.

        Args:
            scout: Paid scout
            period: Settled period
            amount: Paid amount
        """
        if not scout.email:
            logger.debug(f"Scout {scout.id} has no email, notification skipped")
            return

        logger.info(
            f"Earnings notification queued for scout {scout.id}: "
            f"{amount} for {period}",
            extra={"scout_id": scout.id, "email": scout.email},
        )
