"""
Bonus detector.

Two independent predicates over time-stamped events:

- upgrade bonus: the artist raised their tier within the period
- influence bonus: the scout's referred listeners played the artist
  before the artist's last upgrade
"""

from loguru import logger

from app.config.business_constants import get_tier_price
from app.utils.period import is_in_period, parse_period


class BonusDetector:
    """Evaluates upgrade and influence bonus conditions."""

    def __init__(self, artist_repo, playback_repo) -> None:
        """
        Initialize bonus detector.

        Args:
            artist_repo: Provides get_by_id and get_payments_for_period
            playback_repo: Provides count_referred_listeners and
                has_network_playback_before
        """
        self.artist_repo = artist_repo
        self.playback_repo = playback_repo

    async def check_upgrade_bonus(self, artist_id: int, period: str) -> bool:
        """
        Check if artist upgraded their tier during the period.

        Requires the last upgrade to fall in the period's month and at
        least two tier payments in that period, the last priced strictly
        above the first. Only the net first-to-last change is compared.

        Args:
            artist_id: Artist ID
            period: Period token ("YYYY-MM")

        Returns:
            True if the upgrade bonus applies
        """
        parse_period(period)

        artist = await self.artist_repo.get_by_id(artist_id)
        if not artist or artist.last_tier_upgrade is None:
            return False

        if not is_in_period(artist.last_tier_upgrade, period):
            return False

        payments = await self.artist_repo.get_payments_for_period(
            artist_id, period
        )
        if len(payments) < 2:
            return False

        first_price = get_tier_price(payments[0].tier)
        last_price = get_tier_price(payments[-1].tier)

        if last_price > first_price:
            logger.debug(
                f"Upgrade bonus for artist {artist_id} in {period}: "
                f"{payments[0].tier} -> {payments[-1].tier}"
            )
            return True
        return False

    async def check_influence_bonus(self, scout_id: int, artist_id: int) -> bool:
        """
        Check if scout's listener network engaged the artist before upgrade.

        Any single qualifying playback is enough; the count does not matter.

        Args:
            scout_id: Scout ID
            artist_id: Artist ID

        Returns:
            True if the influence bonus applies
        """
        referred = await self.playback_repo.count_referred_listeners(scout_id)
        if referred == 0:
            return False

        artist = await self.artist_repo.get_by_id(artist_id)
        if not artist or artist.last_tier_upgrade is None:
            return False

        return await self.playback_repo.has_network_playback_before(
            scout_id, artist_id, artist.last_tier_upgrade
        )
