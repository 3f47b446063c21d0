"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from app.models.artist import AirplayPayment, Artist
from app.models.artist_discovery import (
    ArtistDiscovery,
    Conversion,
    Converted,
    NotConverted,
)
from app.models.base import Base
from app.models.enums import (
    AirplayTier,
    CommissionStatus,
    CommissionType,
    DiscoveryStatus,
    ScoutStatus,
)
from app.models.listener import ListenerPlayback, ListenerReferral
from app.models.scout import Scout
from app.models.scout_commission import ScoutCommission


__all__ = [
    "AirplayPayment",
    "AirplayTier",
    "Artist",
    "ArtistDiscovery",
    "Base",
    "CommissionStatus",
    "CommissionType",
    "Conversion",
    "Converted",
    "DiscoveryStatus",
    "ListenerPlayback",
    "ListenerReferral",
    "NotConverted",
    "Scout",
    "ScoutCommission",
    "ScoutStatus",
]
