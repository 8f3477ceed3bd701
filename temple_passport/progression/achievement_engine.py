"""
Achievement Engine

Evaluates a data-driven achievement catalog against a statistics snapshot.

Each achievement moves through a one-way state machine:
    Locked(progress) -> Unlocked(timestamp)

Unlocked is terminal: re-evaluation never revokes an unlock, never changes
its timestamp, and never reports it as newly unlocked again. That makes
evaluation idempotent, so a retried event cannot grant a reward twice.

Stale progress entries (ids no longer in the catalog) are carried over
untouched so catalog updates don't break existing passports.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence
from datetime import datetime
import logging

from temple_passport.exceptions import UnknownAchievementDefinitionError
from temple_passport.models.achievement import (
    AchievementDefinition,
    AchievementProgress,
    RequirementKind,
)
from temple_passport.models.passport import StatisticsSnapshot

logger = logging.getLogger(__name__)


# Snapshot field each requirement kind reads
REQUIREMENT_FIELDS: Dict[RequirementKind, str] = {
    RequirementKind.FIRST_CHECK_IN: "total_check_ins",
    RequirementKind.CHECK_IN_COUNT: "total_check_ins",
    RequirementKind.STREAK_LENGTH: "check_in_streak",
    RequirementKind.PRAYER_COUNT: "total_prayers",
    RequirementKind.PRAYERS_RECEIVED: "prayers_received",
    RequirementKind.TEMPLES_VISITED: "temples_visited",
    RequirementKind.DEITY_TYPES_VISITED: "deity_types_visited",
    RequirementKind.LIFETIME_MERIT: "lifetime_merit_earned",
    RequirementKind.LEVEL_REACHED: "level",
    RequirementKind.PURCHASE_COUNT: "total_purchases",
    RequirementKind.EVENT_REGISTRATION_COUNT: "total_event_registrations",
    RequirementKind.EARLY_BIRD_CHECK_INS: "early_bird_check_ins",
    RequirementKind.NIGHT_OWL_CHECK_INS: "night_owl_check_ins",
    RequirementKind.PERFECT_WEEK: "perfect_week_days",
    RequirementKind.AMULETS_BOUND: "amulets_bound",
    RequirementKind.DEITY_SELECTED: "deity_selected",
    RequirementKind.MAX_CHECK_IN_POINTS: "max_single_check_in_points",
}


@dataclass
class EvaluationResult:
    """Updated progress map plus definitions unlocked by this evaluation"""
    updated: Dict[str, AchievementProgress]
    newly_unlocked: List[AchievementDefinition] = field(default_factory=list)


def calculate_progress(definition: AchievementDefinition, snapshot: StatisticsSnapshot) -> int:
    """Current progress value for one definition"""
    value = getattr(snapshot, REQUIREMENT_FIELDS[definition.requirement_kind])
    if definition.requirement_kind == RequirementKind.FIRST_CHECK_IN:
        return min(value, 1)
    return value


class AchievementEngine:
    """Achievement evaluation over a fixed catalog"""

    def __init__(self, catalog: Sequence[AchievementDefinition]):
        seen = set()
        for definition in catalog:
            if definition.id in seen:
                raise UnknownAchievementDefinitionError(
                    f"Duplicate achievement id in catalog: {definition.id}",
                    achievement_id=definition.id,
                    operation="load_catalog",
                )
            if definition.requirement_value <= 0:
                raise UnknownAchievementDefinitionError(
                    f"Achievement {definition.id} has non-positive requirement {definition.requirement_value}",
                    achievement_id=definition.id,
                    operation="load_catalog",
                )
            if definition.requirement_kind not in REQUIREMENT_FIELDS:
                raise UnknownAchievementDefinitionError(
                    f"Achievement {definition.id} watches unsupported statistic "
                    f"{definition.requirement_kind}",
                    achievement_id=definition.id,
                    operation="load_catalog",
                )
            seen.add(definition.id)

        self.catalog: List[AchievementDefinition] = list(catalog)
        self._by_id = {definition.id: definition for definition in self.catalog}

    def get_definition(self, achievement_id: str) -> AchievementDefinition:
        """
        Look up a definition by id

        Raises:
            UnknownAchievementDefinitionError: id is not in the catalog
        """
        definition = self._by_id.get(achievement_id)
        if definition is None:
            raise UnknownAchievementDefinitionError(
                f"No achievement definition for id {achievement_id}",
                achievement_id=achievement_id,
                operation="get_definition",
            )
        return definition

    def evaluate(
        self,
        snapshot: StatisticsSnapshot,
        achievements: Dict[str, AchievementProgress],
        now: datetime
    ) -> EvaluationResult:
        """
        Evaluate all locked achievements against a snapshot

        Args:
            snapshot: Current statistics
            achievements: Existing progress map (not mutated)
            now: Unlock timestamp for anything unlocked by this call

        Returns:
            EvaluationResult with the new progress map and newly unlocked
            definitions in catalog order
        """
        updated = {key: progress.model_copy() for key, progress in achievements.items()}
        newly_unlocked: List[AchievementDefinition] = []

        for achievement_id in updated:
            if achievement_id not in self._by_id:
                logger.debug(f"Skipping stale achievement progress {achievement_id}")

        for definition in self.catalog:
            existing = updated.get(definition.id)
            if existing is not None and existing.unlocked:
                continue

            current = calculate_progress(definition, snapshot)

            if current >= definition.requirement_value:
                updated[definition.id] = AchievementProgress(
                    current_progress=current,
                    unlocked=True,
                    unlocked_at=now,
                )
                newly_unlocked.append(definition)
                logger.info(
                    f"Unlocked achievement: {definition.id} "
                    f"({definition.name or definition.requirement_kind.value}) "
                    f"+{definition.reward_points} merit"
                )
            else:
                updated[definition.id] = AchievementProgress(current_progress=current)

        return EvaluationResult(updated=updated, newly_unlocked=newly_unlocked)

    def unlock(
        self,
        achievement_id: str,
        achievements: Dict[str, AchievementProgress],
        now: datetime
    ) -> Optional[EvaluationResult]:
        """
        Manually unlock an achievement (special events, support tooling)

        Returns:
            EvaluationResult with the single unlock, or None if it was
            already unlocked

        Raises:
            UnknownAchievementDefinitionError: id is not in the catalog
        """
        definition = self.get_definition(achievement_id)
        existing = achievements.get(achievement_id)
        if existing is not None and existing.unlocked:
            return None

        updated = {key: progress.model_copy() for key, progress in achievements.items()}
        updated[achievement_id] = AchievementProgress(
            current_progress=definition.requirement_value,
            unlocked=True,
            unlocked_at=now,
        )
        logger.info(f"Manually unlocked achievement: {achievement_id}")
        return EvaluationResult(updated=updated, newly_unlocked=[definition])
