"""Cloud passport models: per-user progression state and derived views"""
from enum import Enum
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from temple_passport.models.achievement import AchievementProgress
from temple_passport.models.events import Coordinate
from temple_passport.models.ledger import MeritTransaction


class CheckInType(str, Enum):
    """Check-in classification used for visit bonuses"""
    NORMAL = "normal"
    CONSECUTIVE = "consecutive"
    FIRST_VISIT = "first_visit"


class CheckInRecord(BaseModel):
    """One accepted check-in"""
    model_config = ConfigDict(frozen=True)

    temple_id: str
    checked_in_at: datetime
    local_date: date
    local_hour: int = Field(ge=0, le=23)
    coordinate: Optional[Coordinate] = None
    deity: Optional[str] = None
    check_in_type: CheckInType = CheckInType.NORMAL
    earned_points: int = 0


class UserProgressionState(BaseModel):
    """Durable progression record for one user

    Only ProgressionCoordinator.apply produces new versions of this record;
    callers treat each instance as an immutable snapshot.
    """
    user_id: str
    timezone: str = "UTC"  # IANA timezone for local check-in dates
    merit_balance: int = Field(default=0, ge=0)
    lifetime_merit_earned: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)
    title: str = ""
    check_in_dates: list[date] = Field(default_factory=list)  # sorted, distinct
    check_in_streak: int = Field(default=0, ge=0)
    longest_streak: int = Field(default=0, ge=0)
    total_check_ins: int = 0
    total_prayers: int = 0
    prayers_received: int = 0
    total_purchases: int = 0
    total_event_registrations: int = 0
    amulets_bound: int = 0
    deity_selected: bool = False
    check_in_records: list[CheckInRecord] = Field(default_factory=list)
    achievements: dict[str, AchievementProgress] = Field(default_factory=dict)
    transactions: list[MeritTransaction] = Field(default_factory=list)

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Ensure valid IANA timezone"""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(
                f"Invalid timezone: '{v}'. "
                f"Use IANA timezone (e.g., 'Asia/Taipei', 'Europe/Stockholm')"
            )
        return v

    @field_validator('check_in_dates')
    @classmethod
    def normalize_check_in_dates(cls, v: list[date]) -> list[date]:
        """Keep check-in dates sorted and distinct"""
        return sorted(set(v))

    @property
    def visited_temples(self) -> set[str]:
        return {record.temple_id for record in self.check_in_records}

    def has_checked_in(self, temple_id: str, on: date) -> bool:
        """Whether the temple was already checked in on the given local date"""
        return any(
            record.temple_id == temple_id and record.local_date == on
            for record in self.check_in_records
        )


class StatisticsSnapshot(BaseModel):
    """Read-only statistics the achievement engine evaluates"""
    model_config = ConfigDict(frozen=True)

    total_check_ins: int = 0
    check_in_streak: int = 0
    longest_streak: int = 0
    total_prayers: int = 0
    prayers_received: int = 0
    temples_visited: int = 0
    deity_types_visited: int = 0
    lifetime_merit_earned: int = 0
    level: int = 1
    total_purchases: int = 0
    total_event_registrations: int = 0
    early_bird_check_ins: int = 0
    night_owl_check_ins: int = 0
    perfect_week_days: int = 0
    amulets_bound: int = 0
    deity_selected: int = 0
    max_single_check_in_points: int = 0


class LevelInfo(BaseModel):
    """Level, title and progress derived from lifetime merit"""
    model_config = ConfigDict(frozen=True)

    level: int
    title: str
    current_threshold: int
    next_threshold: Optional[int] = None  # None at max level
    points_needed_for_next_level: Optional[int] = None
    level_progress: float = Field(ge=0.0, le=1.0)

    @property
    def is_max_level(self) -> bool:
        return self.next_threshold is None
