"""
Default Achievement Catalog

Bundled achievement definitions. Deployments can replace the catalog with
server-supplied data via load_catalog(); new achievements are added as
data, not code.

Categories:
- Check-in (1 / 10 / 50 / 100 check-ins)
- Prayer (10 / 50 prayers sent)
- Temple exploration (5 / 20 temples, deity variety)
- Streaks (7 / 30 days, perfect week)
- Merit milestones
- Special (amulet binding, patron deity, early bird, night owl)
"""

from pathlib import Path
from typing import List, Union
import json
import logging

from pydantic import TypeAdapter

from temple_passport.exceptions import UnknownAchievementDefinitionError
from temple_passport.models.achievement import (
    AchievementCategory as Category,
    AchievementDefinition,
    AchievementTier as Tier,
    RequirementKind as Kind,
)

logger = logging.getLogger(__name__)

_catalog_adapter = TypeAdapter(List[AchievementDefinition])


DEFAULT_CATALOG: List[AchievementDefinition] = [
    # Check-in achievements
    AchievementDefinition(
        id="first_check_in", category=Category.CHECK_IN, requirement_kind=Kind.FIRST_CHECK_IN,
        requirement_value=1, reward_points=10, name="First Steps",
        description="Complete your first check-in", icon="1️⃣",
    ),
    AchievementDefinition(
        id="check_in_10", category=Category.CHECK_IN, requirement_kind=Kind.CHECK_IN_COUNT,
        requirement_value=10, reward_points=50, name="Check-in Novice",
        description="Check in 10 times", icon="🔟",
    ),
    AchievementDefinition(
        id="check_in_50", category=Category.CHECK_IN, requirement_kind=Kind.CHECK_IN_COUNT,
        requirement_value=50, reward_points=200, name="Check-in Expert",
        description="Check in 50 times", icon="📍", tier=Tier.SILVER,
    ),
    AchievementDefinition(
        id="check_in_100", category=Category.CHECK_IN, requirement_kind=Kind.CHECK_IN_COUNT,
        requirement_value=100, reward_points=500, name="Check-in Master",
        description="Check in 100 times", icon="💯", tier=Tier.GOLD,
    ),

    # Prayer achievements
    AchievementDefinition(
        id="prayer_10", category=Category.PRAYER, requirement_kind=Kind.PRAYER_COUNT,
        requirement_value=10, reward_points=50, name="Sincere Prayers",
        description="Send 10 prayers", icon="🙏",
    ),
    AchievementDefinition(
        id="prayer_50", category=Category.PRAYER, requirement_kind=Kind.PRAYER_COUNT,
        requirement_value=50, reward_points=200, name="Devout Believer",
        description="Send 50 prayers", icon="❤️", tier=Tier.SILVER,
    ),

    # Temple exploration achievements
    AchievementDefinition(
        id="temples_5", category=Category.TEMPLE, requirement_kind=Kind.TEMPLES_VISITED,
        requirement_value=5, reward_points=100, name="Journey of Discovery",
        description="Visit 5 different temples", icon="🗺️",
    ),
    AchievementDefinition(
        id="temples_20", category=Category.TEMPLE, requirement_kind=Kind.TEMPLES_VISITED,
        requirement_value=20, reward_points=500, name="Temple Pilgrim",
        description="Visit 20 different temples", icon="🏯", tier=Tier.GOLD,
    ),
    AchievementDefinition(
        id="deity_explorer", category=Category.TEMPLE, requirement_kind=Kind.DEITY_TYPES_VISITED,
        requirement_value=10, reward_points=250, name="Explorer",
        description="Visit temples of 10 different deities", icon="🧭", tier=Tier.SILVER,
    ),

    # Streak achievements
    AchievementDefinition(
        id="streak_7", category=Category.STREAK, requirement_kind=Kind.STREAK_LENGTH,
        requirement_value=7, reward_points=100, name="Perseverance",
        description="Check in 7 days in a row", icon="🔥",
    ),
    AchievementDefinition(
        id="streak_30", category=Category.STREAK, requirement_kind=Kind.STREAK_LENGTH,
        requirement_value=30, reward_points=500, name="Unwavering",
        description="Check in 30 days in a row", icon="📅", tier=Tier.GOLD,
    ),
    AchievementDefinition(
        id="perfect_week", category=Category.STREAK, requirement_kind=Kind.PERFECT_WEEK,
        requirement_value=7, reward_points=180, name="Perfect Week",
        description="Check in on every day of the past week", icon="🗓️", tier=Tier.SILVER,
    ),

    # Merit milestones
    AchievementDefinition(
        id="merit_500", category=Category.MERIT, requirement_kind=Kind.LIFETIME_MERIT,
        requirement_value=500, reward_points=150, name="Abundant Merit",
        description="Earn 500 merit in total", icon="✨", tier=Tier.SILVER,
    ),
    AchievementDefinition(
        id="merit_5000", category=Category.MERIT, requirement_kind=Kind.LIFETIME_MERIT,
        requirement_value=5000, reward_points=2000, name="Boundless Merit",
        description="Earn 5000 merit in total", icon="💎", tier=Tier.DIAMOND,
    ),

    # Special achievements
    AchievementDefinition(
        id="amulet_bound", category=Category.SPECIAL, requirement_kind=Kind.AMULETS_BOUND,
        requirement_value=1, reward_points=50, name="Bound Amulet",
        description="Bind your first amulet", icon="🏷️",
    ),
    AchievementDefinition(
        id="deity_selected", category=Category.SPECIAL, requirement_kind=Kind.DEITY_SELECTED,
        requirement_value=1, reward_points=30, name="Path of Faith",
        description="Choose your patron deity", icon="🌟",
    ),
    AchievementDefinition(
        id="early_bird", category=Category.SPECIAL, requirement_kind=Kind.EARLY_BIRD_CHECK_INS,
        requirement_value=20, reward_points=350, name="Early Bird",
        description="Check in 20 times between 6 and 9 AM", icon="🌅", tier=Tier.GOLD,
    ),
    AchievementDefinition(
        id="night_owl", category=Category.SPECIAL, requirement_kind=Kind.NIGHT_OWL_CHECK_INS,
        requirement_value=30, reward_points=1500, name="Night Guardian",
        description="Check in 30 times between 9 PM and midnight", icon="🦉", tier=Tier.DIAMOND,
    ),
]


def load_catalog(source: Union[str, Path, bytes]) -> List[AchievementDefinition]:
    """
    Load an achievement catalog from a JSON file path or raw JSON bytes

    Raises:
        UnknownAchievementDefinitionError: payload is not a valid catalog
    """
    try:
        if isinstance(source, bytes):
            payload = source
        else:
            payload = Path(source).read_bytes()
        catalog = _catalog_adapter.validate_json(payload)
    except (OSError, ValueError) as e:
        raise UnknownAchievementDefinitionError(
            f"Invalid achievement catalog: {e}",
            operation="load_catalog",
            cause=e,
        )

    logger.info(f"Loaded achievement catalog with {len(catalog)} definitions")
    return catalog


def dump_catalog(catalog: List[AchievementDefinition]) -> str:
    """Serialize a catalog to JSON (inverse of load_catalog)"""
    return json.dumps(_catalog_adapter.dump_python(catalog, mode="json"), ensure_ascii=False, indent=2)
