"""Life event models consumed by the progression coordinator

Adapters (GPS, NFC, QR, networking) decode raw input into one of these
values. Events carry facts only; point amounts come from RewardPolicy,
except where the user explicitly spends (purchases, event fees).
"""
from datetime import datetime
from typing import Annotated, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

from temple_passport.utils.datetime_helpers import now_utc


class Coordinate(BaseModel):
    """GPS coordinate pair"""
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class _Event(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=now_utc)


class CheckIn(_Event):
    """Check-in at a temple (GPS, QR code, or NFC tag)"""
    type: Literal["check_in"] = "check_in"
    temple_id: str
    coordinate: Optional[Coordinate] = None
    deity: Optional[str] = None  # main deity of the temple, if known


class PrayerSent(_Event):
    """User spent merit to pray for a friend or family member"""
    type: Literal["prayer_sent"] = "prayer_sent"
    to_user_id: str


class PrayerReceived(_Event):
    """Someone prayed for this user"""
    type: Literal["prayer_received"] = "prayer_received"
    from_user_id: str


class Purchase(_Event):
    """Shop item redeemed with merit points"""
    type: Literal["purchase"] = "purchase"
    product_id: str
    merit_spent: int


class EventRegistration(_Event):
    """Registration for a temple event (ceremony, festival)"""
    type: Literal["event_registration"] = "event_registration"
    event_id: str
    merit_fee: int = 0  # 0 means free


class AmuletBound(_Event):
    """Physical amulet (NFC) bound to the passport"""
    type: Literal["amulet_bound"] = "amulet_bound"
    amulet_id: str
    temple_id: Optional[str] = None


class DeitySelected(_Event):
    """User chose their patron deity"""
    type: Literal["deity_selected"] = "deity_selected"
    deity_id: str


LifeEvent = Annotated[
    Union[
        CheckIn,
        PrayerSent,
        PrayerReceived,
        Purchase,
        EventRegistration,
        AmuletBound,
        DeitySelected,
    ],
    Field(discriminator="type"),
]
