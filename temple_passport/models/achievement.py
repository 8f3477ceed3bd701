"""Achievement models for the cloud passport"""
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class AchievementCategory(str, Enum):
    """Achievement categories"""
    CHECK_IN = "check_in"
    PRAYER = "prayer"
    TEMPLE = "temple"
    STREAK = "streak"
    MERIT = "merit"
    COMMERCE = "commerce"
    SPECIAL = "special"


class AchievementTier(str, Enum):
    """Achievement tiers/rarity"""
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    DIAMOND = "diamond"


class RequirementKind(str, Enum):
    """Statistic an achievement watches"""
    FIRST_CHECK_IN = "first_check_in"
    CHECK_IN_COUNT = "check_in_count"
    STREAK_LENGTH = "streak_length"
    PRAYER_COUNT = "prayer_count"
    PRAYERS_RECEIVED = "prayers_received"
    TEMPLES_VISITED = "temples_visited"
    DEITY_TYPES_VISITED = "deity_types_visited"
    LIFETIME_MERIT = "lifetime_merit"
    LEVEL_REACHED = "level_reached"
    PURCHASE_COUNT = "purchase_count"
    EVENT_REGISTRATION_COUNT = "event_registration_count"
    EARLY_BIRD_CHECK_INS = "early_bird_check_ins"  # 06:00-09:00 local
    NIGHT_OWL_CHECK_INS = "night_owl_check_ins"  # 21:00-24:00 local
    PERFECT_WEEK = "perfect_week"  # check-in days within the last 7
    AMULETS_BOUND = "amulets_bound"
    DEITY_SELECTED = "deity_selected"
    MAX_CHECK_IN_POINTS = "max_check_in_points"  # best single check-in reward


class AchievementDefinition(BaseModel):
    """Achievement definition from the static catalog"""
    model_config = ConfigDict(frozen=True)

    id: str
    category: AchievementCategory
    requirement_kind: RequirementKind
    requirement_value: int = Field(gt=0)
    reward_points: int = Field(ge=0)
    name: str = ""
    description: str = ""
    icon: str = "🏆"
    tier: AchievementTier = AchievementTier.BRONZE


class AchievementProgress(BaseModel):
    """User's progress toward one achievement"""
    current_progress: int = 0
    unlocked: bool = False
    unlocked_at: Optional[datetime] = None
