"""
Commission calculator.

Composes the rate policy and bonus detector into an itemized commission
for one (scout, artist, period) triple. Read-only.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.config.business_constants import (
    INFLUENCE_BONUS_AMOUNT,
    UPGRADE_BONUS_AMOUNT,
    get_tier_price,
)
from app.models.artist_discovery import ArtistDiscovery, Converted
from app.repositories.artist_repository import ArtistRepository
from app.repositories.discovery_repository import DiscoveryRepository
from app.repositories.playback_repository import PlaybackRepository
from app.services.commission.bonus_detector import BonusDetector
from app.services.commission.rate_policy import get_commission_rate
from app.utils.period import months_elapsed, parse_period

CENT = Decimal("0.01")


@dataclass
class CommissionCalculation:
    """Itemized commission for one scout, artist and period."""

    scout_id: int
    artist_id: int
    period: str
    artist_tier: str
    artist_payment: Decimal
    commission_rate: Decimal
    months_since_conversion: int
    commission_amount: Decimal
    bonus_amount: Decimal
    total_amount: Decimal
    has_upgrade_bonus: bool = False
    has_influence_bonus: bool = False
    discovery_id: int | None = None


@dataclass
class ScoutCommissionTotals:
    """Totals of a scout's commissions for one period."""

    total_commissions: Decimal = Decimal("0")
    total_bonuses: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")
    count: int = 0
    items: list[CommissionCalculation] = field(default_factory=list)


class CommissionCalculator:
    """
    Commission calculator.

    Repositories can be injected directly; otherwise they are built on
    the given session.
    """

    def __init__(
        self,
        session: AsyncSession | None = None,
        *,
        discovery_repo=None,
        artist_repo=None,
        playback_repo=None,
        bonus_detector: BonusDetector | None = None,
    ) -> None:
        """
        Initialize commission calculator.

        Args:
            session: Async database session (optional with injected repos)
            discovery_repo: Discovery repository override
            artist_repo: Artist repository override
            playback_repo: Playback repository override
            bonus_detector: Bonus detector override
        """
        if session is None and (discovery_repo is None or artist_repo is None):
            raise ValueError("Either session or repositories are required")

        self.session = session
        self.discovery_repo = discovery_repo or DiscoveryRepository(session)
        self.artist_repo = artist_repo or ArtistRepository(session)
        self.playback_repo = playback_repo or PlaybackRepository(session)
        self.bonus_detector = bonus_detector or BonusDetector(
            self.artist_repo, self.playback_repo
        )

    async def calculate_scout_commission(
        self, scout_id: int, artist_id: int, period: str
    ) -> CommissionCalculation | None:
        """
        Calculate commission for a (scout, artist, period) triple.

        Args:
            scout_id: Scout ID
            artist_id: Artist ID
            period: Period token ("YYYY-MM")

        Returns:
            Itemized calculation, or None when no commission applies
            (no discovery, not converted, free tier)

        Raises:
            InvalidPeriodError: Malformed period
        """
        parse_period(period)

        discovery = await self.discovery_repo.get_for_pair(scout_id, artist_id)
        if discovery is None:
            return None

        return await self.calculate_for_discovery(discovery, period)

    async def calculate_for_discovery(
        self, discovery: ArtistDiscovery, period: str
    ) -> CommissionCalculation | None:
        """Calculate commission for an already loaded discovery."""
        period_date = parse_period(period)

        conversion = discovery.conversion
        if not isinstance(conversion, Converted):
            return None

        artist = await self.artist_repo.get_by_id(discovery.artist_id)
        if artist is None or artist.is_free_tier:
            return None

        price = get_tier_price(artist.airplay_tier)
        elapsed = months_elapsed(conversion.at, period_date)
        rate = get_commission_rate(conversion.is_prepurchase, elapsed)
        commission_amount = (price * rate).quantize(CENT, rounding=ROUND_HALF_UP)

        has_upgrade = await self.bonus_detector.check_upgrade_bonus(
            discovery.artist_id, period
        )
        has_influence = await self.bonus_detector.check_influence_bonus(
            discovery.scout_id, discovery.artist_id
        )

        bonus_amount = Decimal("0")
        if has_upgrade:
            bonus_amount += UPGRADE_BONUS_AMOUNT
        if has_influence:
            bonus_amount += INFLUENCE_BONUS_AMOUNT

        return CommissionCalculation(
            scout_id=discovery.scout_id,
            artist_id=discovery.artist_id,
            period=period,
            artist_tier=str(artist.airplay_tier),
            artist_payment=price,
            commission_rate=rate,
            months_since_conversion=elapsed,
            commission_amount=commission_amount,
            bonus_amount=bonus_amount,
            total_amount=commission_amount + bonus_amount,
            has_upgrade_bonus=has_upgrade,
            has_influence_bonus=has_influence,
            discovery_id=discovery.id,
        )

    async def calculate_all_scout_commissions(
        self, scout_id: int, period: str
    ) -> ScoutCommissionTotals:
        """
        Calculate commissions for all of a scout's converted discoveries.

        Args:
            scout_id: Scout ID
            period: Period token ("YYYY-MM")

        Returns:
            Totals with itemized calculations
        """
        parse_period(period)

        totals = ScoutCommissionTotals()
        discoveries = await self.discovery_repo.get_converted_by_scout(scout_id)

        for discovery in discoveries:
            calculation = await self.calculate_for_discovery(discovery, period)
            if calculation is None:
                continue

            totals.total_commissions += calculation.commission_amount
            totals.total_bonuses += calculation.bonus_amount
            totals.total_amount += calculation.total_amount
            totals.count += 1
            totals.items.append(calculation)

        logger.debug(
            f"Scout {scout_id} commissions for {period}: "
            f"{totals.count} items, total {totals.total_amount}"
        )
        return totals
