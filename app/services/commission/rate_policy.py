"""
Commission rate policy.

Maps (prepurchase flag, elapsed months) to the commission rate.
"""

from decimal import Decimal

from app.config.business_constants import (
    EARLY_COMMISSION_RATE,
    EARLY_WINDOW_MONTHS,
    PREPURCHASE_COMMISSION_RATE,
    RESIDUAL_COMMISSION_RATE,
)


def get_commission_rate(is_prepurchase: bool, months_elapsed: int) -> Decimal:
    """
    Get commission rate for a converted discovery.

    Prepurchase conversions keep a flat lifetime rate. Other conversions
    earn the early rate for months 0-2 and the residual rate afterwards.

    Args:
        is_prepurchase: Conversion was paid upfront
        months_elapsed: Anniversary-based months since conversion

    Returns:
        Rate as a fraction (e.g. Decimal("0.20"))
    """
    if is_prepurchase:
        return PREPURCHASE_COMMISSION_RATE
    if months_elapsed < EARLY_WINDOW_MONTHS:
        return EARLY_COMMISSION_RATE
    return RESIDUAL_COMMISSION_RATE
