"""
Shared fixtures for unit tests.

In-memory repositories with the same query methods the SQLAlchemy
repositories expose, so calculator and bonus logic run without a
database.
"""

from collections import defaultdict
from datetime import UTC, datetime

import pytest

from app.models import AirplayPayment, Artist, ArtistDiscovery
from app.models.enums import DiscoveryStatus


class FakeArtistRepository:
    """Artists and tier payments held in memory."""

    def __init__(self) -> None:
        self.artists: dict[int, Artist] = {}
        self.payments: dict[tuple[int, str], list[AirplayPayment]] = defaultdict(list)

    def add_artist(
        self,
        artist_id: int,
        tier: str = "TIER_20",
        last_tier_upgrade: datetime | None = None,
    ) -> Artist:
        artist = Artist(
            id=artist_id,
            name=f"Artist {artist_id}",
            airplay_tier=tier,
            last_tier_upgrade=last_tier_upgrade,
        )
        self.artists[artist_id] = artist
        return artist

    def add_payment(
        self, artist_id: int, tier: str, period: str, created_at: datetime
    ) -> None:
        self.payments[(artist_id, period)].append(
            AirplayPayment(
                artist_id=artist_id,
                tier=tier,
                period=period,
                created_at=created_at,
            )
        )

    async def get_by_id(self, artist_id: int) -> Artist | None:
        return self.artists.get(artist_id)

    async def get_payments_for_period(
        self, artist_id: int, period: str
    ) -> list[AirplayPayment]:
        return sorted(
            self.payments[(artist_id, period)], key=lambda p: p.created_at
        )


class FakeDiscoveryRepository:
    """Discoveries held in memory."""

    def __init__(self) -> None:
        self.discoveries: list[ArtistDiscovery] = []

    def add(
        self,
        scout_id: int,
        artist_id: int,
        converted_at: datetime | None = datetime(2024, 12, 15, tzinfo=UTC),
        is_prepurchase: bool = False,
        status: str = DiscoveryStatus.CONVERTED.value,
    ) -> ArtistDiscovery:
        discovery = ArtistDiscovery(
            id=len(self.discoveries) + 1,
            scout_id=scout_id,
            artist_id=artist_id,
            status=status,
            has_converted=converted_at is not None,
            converted_at=converted_at,
            is_prepurchase=is_prepurchase,
        )
        self.discoveries.append(discovery)
        return discovery

    async def get_for_pair(
        self, scout_id: int, artist_id: int
    ) -> ArtistDiscovery | None:
        for discovery in self.discoveries:
            if discovery.scout_id == scout_id and discovery.artist_id == artist_id:
                return discovery
        return None

    async def get_converted_by_scout(self, scout_id: int) -> list[ArtistDiscovery]:
        return [
            d for d in self.discoveries
            if d.scout_id == scout_id
            and d.has_converted
            and d.status == DiscoveryStatus.CONVERTED
        ]


class FakePlaybackRepository:
    """Listener referrals and playbacks held in memory."""

    def __init__(self) -> None:
        self.referrals: dict[int, set[int]] = defaultdict(set)
        self.playbacks: list[tuple[int, int, datetime]] = []

    def add_referral(self, scout_id: int, listener_id: int) -> None:
        self.referrals[scout_id].add(listener_id)

    def add_playback(
        self, listener_id: int, artist_id: int, played_at: datetime
    ) -> None:
        self.playbacks.append((listener_id, artist_id, played_at))

    async def count_referred_listeners(self, scout_id: int) -> int:
        return len(self.referrals[scout_id])

    async def has_network_playback_before(
        self, scout_id: int, artist_id: int, before: datetime
    ) -> bool:
        network = self.referrals[scout_id]
        return any(
            listener in network and artist == artist_id and played_at < before
            for listener, artist, played_at in self.playbacks
        )


@pytest.fixture
def artist_repo() -> FakeArtistRepository:
    """In-memory artist repository."""
    return FakeArtistRepository()


@pytest.fixture
def discovery_repo() -> FakeDiscoveryRepository:
    """In-memory discovery repository."""
    return FakeDiscoveryRepository()


@pytest.fixture
def playback_repo() -> FakePlaybackRepository:
    """In-memory playback repository."""
    return FakePlaybackRepository()
