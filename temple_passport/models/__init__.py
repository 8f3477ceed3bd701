"""Pydantic models for the temple passport"""
from temple_passport.models.achievement import (
    AchievementCategory,
    AchievementDefinition,
    AchievementProgress,
    AchievementTier,
    RequirementKind,
)
from temple_passport.models.events import (
    AmuletBound,
    CheckIn,
    Coordinate,
    DeitySelected,
    EventRegistration,
    LifeEvent,
    PrayerReceived,
    PrayerSent,
    Purchase,
)
from temple_passport.models.ledger import MeritTransaction, TransactionKind
from temple_passport.models.notifications import (
    AchievementUnlocked,
    LevelUp,
    Notification,
    ProgressionResult,
)
from temple_passport.models.passport import (
    CheckInRecord,
    CheckInType,
    LevelInfo,
    StatisticsSnapshot,
    UserProgressionState,
)

__all__ = [
    "AchievementCategory",
    "AchievementDefinition",
    "AchievementProgress",
    "AchievementTier",
    "RequirementKind",
    "AmuletBound",
    "CheckIn",
    "Coordinate",
    "DeitySelected",
    "EventRegistration",
    "LifeEvent",
    "PrayerReceived",
    "PrayerSent",
    "Purchase",
    "MeritTransaction",
    "TransactionKind",
    "AchievementUnlocked",
    "LevelUp",
    "Notification",
    "ProgressionResult",
    "CheckInRecord",
    "CheckInType",
    "LevelInfo",
    "StatisticsSnapshot",
    "UserProgressionState",
]
