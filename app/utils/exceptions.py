"""
Commission engine exceptions.

Inapplicable calculations are not errors and return None instead.
These exceptions cover structural failures and per-scout settlement
failures that the settlement loop isolates.
"""


class CommissionError(Exception):
    """Base class for commission engine errors."""
    pass


class InvalidPeriodError(CommissionError, ValueError):
    """Raised when a period token is not a valid "YYYY-MM" month."""

    def __init__(self, period: object) -> None:
        self.period = period
        super().__init__(f"Invalid period {period!r}, expected YYYY-MM")


class DuplicateCommissionError(CommissionError):
    """Raised when a ledger row already exists for (scout, artist, period)."""

    def __init__(self, scout_id: int, artist_id: int, period: str) -> None:
        self.scout_id = scout_id
        self.artist_id = artist_id
        self.period = period
        super().__init__(
            f"Commission already recorded for scout {scout_id}, "
            f"artist {artist_id}, period {period}"
        )


class ScoutNotFoundError(CommissionError):
    """Raised when settlement references a missing scout."""

    def __init__(self, scout_id: int) -> None:
        self.scout_id = scout_id
        super().__init__(f"Scout {scout_id} not found")


class PaymentProcessorError(CommissionError):
    """Raised when the payment processor rejects or fails a payout."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


# Errors the settlement loop records as FAILED and moves past
SETTLEMENT_ISOLATED = (
    ScoutNotFoundError,
    PaymentProcessorError,
    TimeoutError,
)


def is_isolated_settlement_error(exc: Exception) -> bool:
    """
    Check if exception is an expected per-scout settlement failure.

    Unexpected errors are still isolated, but logged with a traceback.

    Args:
        exc: Exception to check

    Returns:
        True if exception is an expected settlement failure
    """
    return isinstance(exc, SETTLEMENT_ISOLATED)
