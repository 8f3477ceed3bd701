"""
Passport progression engine

Converts life events (check-ins, prayers, purchases, event registrations)
into merit balances, levels, titles, streaks, and achievement unlocks:
- Merit ledger (earn/spend with append-only history)
- Check-in streak tracking
- Level and title calculation
- Data-driven achievement evaluation
- Progression coordinator (single apply() entry point)
"""

from temple_passport.progression.achievement_engine import AchievementEngine, EvaluationResult
from temple_passport.progression.catalog import DEFAULT_CATALOG, load_catalog
from temple_passport.progression.coordinator import ProgressionCoordinator
from temple_passport.progression.level_calculator import (
    LevelCalculator,
    LevelCurve,
    calculate_level_from_merit,
)
from temple_passport.progression.merit_ledger import MeritLedger, replay_balance
from temple_passport.progression.policy import RewardPolicy, default_reward_policy
from temple_passport.progression.streak_tracker import StreakTracker

__all__ = [
    "AchievementEngine",
    "EvaluationResult",
    "DEFAULT_CATALOG",
    "load_catalog",
    "ProgressionCoordinator",
    "LevelCalculator",
    "LevelCurve",
    "calculate_level_from_merit",
    "MeritLedger",
    "replay_balance",
    "RewardPolicy",
    "default_reward_policy",
    "StreakTracker",
]
