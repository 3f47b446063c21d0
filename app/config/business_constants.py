"""
Business logic constants for scout commissions.

Central location for commission rates, bonuses and airplay tier prices.
This module can be imported by services, repositories and jobs without
circular dependencies.
"""

from decimal import Decimal

from app.models.enums import AirplayTier


# Monthly price (USD) of each airplay tier
AIRPLAY_TIER_PRICES: dict[str, Decimal] = {
    AirplayTier.FREE: Decimal("0"),
    AirplayTier.TIER_5: Decimal("5"),
    AirplayTier.TIER_20: Decimal("20"),
    AirplayTier.TIER_50: Decimal("50"),
    AirplayTier.TIER_120: Decimal("120"),
}

# Commission rates
PREPURCHASE_COMMISSION_RATE = Decimal("0.25")  # Lifetime flat rate
EARLY_COMMISSION_RATE = Decimal("0.20")  # Months 0, 1, 2
RESIDUAL_COMMISSION_RATE = Decimal("0.10")  # Month 3 onward
EARLY_WINDOW_MONTHS = 3

# Flat bonuses
UPGRADE_BONUS_AMOUNT = Decimal("10")
INFLUENCE_BONUS_AMOUNT = Decimal("2")

# Payouts below this amount are not issued
MINIMUM_PAYOUT_AMOUNT = Decimal("0.01")


def get_tier_price(tier: str | None) -> Decimal:
    """
    Get monthly price for an airplay tier.

    Unknown tiers are priced at zero.

    Args:
        tier: Airplay tier name (e.g. "TIER_20")

    Returns:
        Monthly tier price in USD
    """
    if tier is None:
        return Decimal("0")
    return AIRPLAY_TIER_PRICES.get(tier, Decimal("0"))
