"""
Achievement summaries and passport display formatting
"""

from typing import Dict, List, Sequence
from dataclasses import dataclass, field

from temple_passport.models.achievement import AchievementDefinition, AchievementTier
from temple_passport.models.passport import LevelInfo, UserProgressionState

TIER_EMOJI = {
    AchievementTier.DIAMOND: "💎",
    AchievementTier.GOLD: "🥇",
    AchievementTier.SILVER: "🥈",
    AchievementTier.BRONZE: "🥉",
}


@dataclass
class AchievementStats:
    """Catalog-wide achievement totals for one user"""
    total: int
    unlocked: int
    total_rewards: int
    by_tier: Dict[AchievementTier, Dict[str, int]] = field(default_factory=dict)

    @property
    def completion_rate(self) -> float:
        return self.unlocked / self.total if self.total else 0.0

    @property
    def completion_percentage(self) -> int:
        return int(self.completion_rate * 100)


def achievement_stats(
    state: UserProgressionState,
    catalog: Sequence[AchievementDefinition]
) -> AchievementStats:
    """
    Count unlocked achievements and rewards earned from them

    Only ids present in the catalog are counted; stale progress is ignored.
    """
    by_tier: Dict[AchievementTier, Dict[str, int]] = {}
    unlocked = 0
    total_rewards = 0

    for definition in catalog:
        tier_counts = by_tier.setdefault(definition.tier, {"total": 0, "unlocked": 0})
        tier_counts["total"] += 1

        progress = state.achievements.get(definition.id)
        if progress is not None and progress.unlocked:
            tier_counts["unlocked"] += 1
            unlocked += 1
            total_rewards += definition.reward_points

    return AchievementStats(
        total=len(catalog),
        unlocked=unlocked,
        total_rewards=total_rewards,
        by_tier=by_tier,
    )


def achievement_recommendations(
    state: UserProgressionState,
    catalog: Sequence[AchievementDefinition],
    limit: int = 3
) -> List[Dict]:
    """
    Locked achievements closest to completion (at least 50% progress)

    Returns:
        [{'definition': AchievementDefinition, 'current': int, 'required': int, 'percentage': int}]
    """
    candidates = []
    for definition in catalog:
        progress = state.achievements.get(definition.id)
        if progress is None or progress.unlocked:
            continue

        percentage = min(100, int(progress.current_progress * 100 / definition.requirement_value))
        if percentage >= 50:
            candidates.append({
                "definition": definition,
                "current": progress.current_progress,
                "required": definition.requirement_value,
                "percentage": percentage,
            })

    candidates.sort(key=lambda c: c["percentage"], reverse=True)
    return candidates[:limit]


def format_passport_display(state: UserProgressionState, level_info: LevelInfo) -> str:
    """
    Format the passport header for display

    Args:
        state: Refreshed passport
        level_info: Level info for the passport's lifetime merit
    """
    lines = [
        f"📜 CLOUD PASSPORT · Lv.{level_info.level} {level_info.title}",
        f"✨ Merit: {state.merit_balance} (lifetime {state.lifetime_merit_earned})",
    ]

    if level_info.is_max_level:
        lines.append("🏆 Maximum level reached")
    else:
        filled = int(level_info.level_progress * 10)
        bar = "▓" * filled + "░" * (10 - filled)
        lines.append(f"{bar} {level_info.points_needed_for_next_level} merit to Lv.{level_info.level + 1}")

    streak_line = f"🔥 Streak: {state.check_in_streak} days"
    if state.longest_streak > state.check_in_streak:
        streak_line += f" (best: {state.longest_streak})"
    lines.append(streak_line)
    lines.append(f"🏯 Temples visited: {len(state.visited_temples)} · Check-ins: {state.total_check_ins}")

    return "\n".join(lines)


def format_unlock_message(definition: AchievementDefinition) -> str:
    """
    Format achievement unlock message for celebration
    """
    tier_symbol = TIER_EMOJI.get(definition.tier, "🏆")
    name = definition.name or definition.id

    message = f"🎉 ACHIEVEMENT UNLOCKED! {tier_symbol} {definition.icon} {name}"
    if definition.description:
        message += f"\n{definition.description}"
    if definition.reward_points:
        message += f"\n⭐ +{definition.reward_points} merit"
    return message
