"""
Payment processors for scout payouts.

A processor exposes:

    async create_scout_payout(scout, amount, period) -> str

returning the payout ID and raising PaymentProcessorError on failure.
"""

from loguru import logger

from app.config.settings import settings
from app.services.payments.ledger import LedgerPaymentProcessor
from app.services.payments.manifest import ManifestPaymentProcessor


def get_payment_processor() -> ManifestPaymentProcessor | LedgerPaymentProcessor:
    """
    Get payment processor for the current configuration.

    Returns:
        Manifest client when an API key is configured, else ledger-only
    """
    if settings.manifest_configured:
        return ManifestPaymentProcessor()

    logger.warning(
        "Manifest API key not configured, payouts are recorded in the ledger only"
    )
    return LedgerPaymentProcessor()


__all__ = [
    "LedgerPaymentProcessor",
    "ManifestPaymentProcessor",
    "get_payment_processor",
]
