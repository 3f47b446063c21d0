"""
Enumerations for database models.

Values are stored as plain strings so they stay readable in SQL.
"""

from enum import StrEnum


class ScoutStatus(StrEnum):
    """Scout account status."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class AirplayTier(StrEnum):
    """Artist airplay subscription tier."""

    FREE = "FREE"
    TIER_5 = "TIER_5"
    TIER_20 = "TIER_20"
    TIER_50 = "TIER_50"
    TIER_120 = "TIER_120"


class DiscoveryStatus(StrEnum):
    """Artist discovery pipeline status."""

    DISCOVERED = "DISCOVERED"
    CONTACTED = "CONTACTED"
    ONBOARDING = "ONBOARDING"
    CONVERTED = "CONVERTED"
    CHURNED = "CHURNED"


class CommissionType(StrEnum):
    """Scout commission ledger row type."""

    RECURRING = "RECURRING"


class CommissionStatus(StrEnum):
    """Scout commission settlement status.

    PENDING -> PAID | FAILED. PAID and FAILED are terminal.
    """

    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
