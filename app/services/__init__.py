"""
Services.

Business logic layer.
"""

from app.services.commission import (
    CommissionCalculator,
    CommissionStatistics,
    MonthlyCommissionAggregator,
    PayoutSettlement,
    ScoutCommissionService,
)
from app.services.influence_service import InfluenceService
from app.services.notifications import LoggingScoutNotifier
from app.services.payments import (
    LedgerPaymentProcessor,
    ManifestPaymentProcessor,
    get_payment_processor,
)


__all__ = [
    # Commissions
    "CommissionCalculator",
    "CommissionStatistics",
    "MonthlyCommissionAggregator",
    "PayoutSettlement",
    "ScoutCommissionService",
    # Influence
    "InfluenceService",
    # Payouts
    "LedgerPaymentProcessor",
    "LoggingScoutNotifier",
    "ManifestPaymentProcessor",
    "get_payment_processor",
]
