#!/usr/bin/env python3
"""
Run scout commission jobs without a dramatiq worker.

Intended for cron on the first day of each month.

Usage:
    python scripts/run_scout_settlement.py calculate            # previous month
    python scripts/run_scout_settlement.py payout --period 2025-01
    python scripts/run_scout_settlement.py all
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from loguru import logger

from app.utils.exceptions import InvalidPeriodError
from app.utils.period import get_previous_period, parse_period
from jobs.tasks.scout_commissions import (
    calculate_commissions_for_period,
    settle_payouts_for_period,
)

# Configure logger for script
logger.remove()
logger.add(sys.stderr, level="INFO", format="{time:HH:mm:ss} | {level} | {message}")


async def run(command: str, period: str) -> int:
    """Run the selected job(s) and return an exit code."""
    exit_code = 0

    if command in ("calculate", "all"):
        result = await calculate_commissions_for_period(period)
        logger.info(f"Calculation: {result}")

    if command in ("payout", "all"):
        result = await settle_payouts_for_period(period)
        logger.info(f"Payouts: {result}")
        if result.get("failed_count"):
            logger.warning(f"{result['failed_count']} scout payouts failed")
            exit_code = 2

    return exit_code


def main() -> None:
    """Parse arguments and run."""
    parser = argparse.ArgumentParser(
        description="Calculate and settle scout commissions"
    )
    parser.add_argument(
        "command",
        choices=["calculate", "payout", "all"],
        help="Job to run",
    )
    parser.add_argument(
        "--period",
        default=None,
        help="Period to process (YYYY-MM), defaults to previous month",
    )
    args = parser.parse_args()

    period = args.period or get_previous_period()
    try:
        parse_period(period)
    except InvalidPeriodError as e:
        logger.error(str(e))
        sys.exit(1)

    sys.exit(asyncio.run(run(args.command, period)))


if __name__ == "__main__":
    main()
