"""
Unit tests for bonus detection.

Tests cover:
- Upgrade bonus: upgrade timing, payment count, first vs last price
- Influence bonus: referred listeners, upgrade presence, playback timing
"""

from datetime import UTC, datetime

import pytest

from app.services.commission.bonus_detector import BonusDetector
from app.utils.exceptions import InvalidPeriodError


def ts(day: int, month: int = 2, year: int = 2025) -> datetime:
    return datetime(year, month, day, 12, 0, tzinfo=UTC)


@pytest.fixture
def detector(artist_repo, playback_repo):
    """BonusDetector over in-memory repositories."""
    return BonusDetector(artist_repo, playback_repo)


class TestUpgradeBonus:
    """Test upgrade-in-period predicate."""

    @pytest.mark.asyncio
    async def test_upgrade_within_period(self, detector, artist_repo):
        """Upgrade in period with a higher last payment earns the bonus."""
        artist_repo.add_artist(1, "TIER_20", last_tier_upgrade=ts(10))
        artist_repo.add_payment(1, "TIER_5", "2025-02", ts(1))
        artist_repo.add_payment(1, "TIER_20", "2025-02", ts(10))

        assert await detector.check_upgrade_bonus(1, "2025-02") is True

    @pytest.mark.asyncio
    async def test_single_payment_no_bonus(self, detector, artist_repo):
        """Fewer than two payments means no bonus even with an upgrade."""
        artist_repo.add_artist(1, "TIER_20", last_tier_upgrade=ts(10))
        artist_repo.add_payment(1, "TIER_20", "2025-02", ts(10))

        assert await detector.check_upgrade_bonus(1, "2025-02") is False

    @pytest.mark.asyncio
    async def test_upgrade_outside_period(self, detector, artist_repo):
        """Upgrade in another month means no bonus."""
        artist_repo.add_artist(1, "TIER_20", last_tier_upgrade=ts(10, month=1))
        artist_repo.add_payment(1, "TIER_5", "2025-02", ts(1))
        artist_repo.add_payment(1, "TIER_20", "2025-02", ts(10))

        assert await detector.check_upgrade_bonus(1, "2025-02") is False

    @pytest.mark.asyncio
    async def test_no_upgrade_timestamp(self, detector, artist_repo):
        """Artists who never upgraded earn no bonus."""
        artist_repo.add_artist(1, "TIER_20")
        artist_repo.add_payment(1, "TIER_5", "2025-02", ts(1))
        artist_repo.add_payment(1, "TIER_20", "2025-02", ts(10))

        assert await detector.check_upgrade_bonus(1, "2025-02") is False

    @pytest.mark.asyncio
    async def test_downgrade_no_bonus(self, detector, artist_repo):
        """Last payment priced below the first is not an upgrade."""
        artist_repo.add_artist(1, "TIER_5", last_tier_upgrade=ts(10))
        artist_repo.add_payment(1, "TIER_50", "2025-02", ts(1))
        artist_repo.add_payment(1, "TIER_5", "2025-02", ts(10))

        assert await detector.check_upgrade_bonus(1, "2025-02") is False

    @pytest.mark.asyncio
    async def test_net_change_decides(self, detector, artist_repo):
        """Only first and last payments are compared."""
        artist_repo.add_artist(1, "TIER_20", last_tier_upgrade=ts(20))
        artist_repo.add_payment(1, "TIER_5", "2025-02", ts(1))
        artist_repo.add_payment(1, "TIER_120", "2025-02", ts(5))
        artist_repo.add_payment(1, "TIER_20", "2025-02", ts(20))

        assert await detector.check_upgrade_bonus(1, "2025-02") is True

    @pytest.mark.asyncio
    async def test_unknown_tier_priced_zero(self, detector, artist_repo):
        """Unknown tiers price as zero."""
        artist_repo.add_artist(1, "TIER_5", last_tier_upgrade=ts(10))
        artist_repo.add_payment(1, "LEGACY", "2025-02", ts(1))
        artist_repo.add_payment(1, "TIER_5", "2025-02", ts(10))

        assert await detector.check_upgrade_bonus(1, "2025-02") is True

    @pytest.mark.asyncio
    async def test_missing_artist(self, detector):
        """Unknown artist earns no bonus."""
        assert await detector.check_upgrade_bonus(99, "2025-02") is False

    @pytest.mark.asyncio
    async def test_invalid_period(self, detector):
        """Malformed period raises."""
        with pytest.raises(InvalidPeriodError):
            await detector.check_upgrade_bonus(1, "2025-2")


class TestInfluenceBonus:
    """Test network-influence predicate."""

    @pytest.mark.asyncio
    async def test_playback_before_upgrade(self, detector, artist_repo, playback_repo):
        """Referred listener played before upgrade earns the bonus."""
        artist_repo.add_artist(1, "TIER_20", last_tier_upgrade=ts(10))
        playback_repo.add_referral(7, 100)
        playback_repo.add_playback(100, 1, ts(5))

        assert await detector.check_influence_bonus(7, 1) is True

    @pytest.mark.asyncio
    async def test_no_referred_listeners(self, detector, artist_repo, playback_repo):
        """Scouts without a listener network earn no bonus."""
        artist_repo.add_artist(1, "TIER_20", last_tier_upgrade=ts(10))
        playback_repo.add_playback(100, 1, ts(5))

        assert await detector.check_influence_bonus(7, 1) is False

    @pytest.mark.asyncio
    async def test_no_upgrade(self, detector, artist_repo, playback_repo):
        """Artists without an upgrade yield no bonus."""
        artist_repo.add_artist(1, "TIER_20")
        playback_repo.add_referral(7, 100)
        playback_repo.add_playback(100, 1, ts(5))

        assert await detector.check_influence_bonus(7, 1) is False

    @pytest.mark.asyncio
    async def test_playback_after_upgrade(self, detector, artist_repo, playback_repo):
        """Playbacks at or after the upgrade do not count."""
        upgrade = ts(10)
        artist_repo.add_artist(1, "TIER_20", last_tier_upgrade=upgrade)
        playback_repo.add_referral(7, 100)
        playback_repo.add_playback(100, 1, upgrade)
        playback_repo.add_playback(100, 1, ts(11))

        assert await detector.check_influence_bonus(7, 1) is False

    @pytest.mark.asyncio
    async def test_playback_by_other_listener(self, detector, artist_repo, playback_repo):
        """Only the scout's referred listeners count."""
        artist_repo.add_artist(1, "TIER_20", last_tier_upgrade=ts(10))
        playback_repo.add_referral(7, 100)
        playback_repo.add_playback(200, 1, ts(5))

        assert await detector.check_influence_bonus(7, 1) is False

    @pytest.mark.asyncio
    async def test_playback_of_other_artist(self, detector, artist_repo, playback_repo):
        """Playbacks of another artist do not count."""
        artist_repo.add_artist(1, "TIER_20", last_tier_upgrade=ts(10))
        playback_repo.add_referral(7, 100)
        playback_repo.add_playback(100, 2, ts(5))

        assert await detector.check_influence_bonus(7, 1) is False
