"""
Level and Title Calculation

Maps lifetime merit to level, title, and progress toward the next level.
The curve itself is policy data (LevelCurve) and can be swapped without
touching the engine.

Default curve:
- Advancing from level n costs n * 100 merit
- Cumulative threshold of level n is 50 * n * (n - 1)
  (level 2 at 100, level 3 at 300, level 4 at 600, ...)
- Maximum level 100

Default titles:
- Level 1-5: Novice Believer
- Level 6-10: Devout Disciple
- Level 11-20: Reverent Lay Devotee
- ... up to Level 100: Merit Fulfilled
"""

from bisect import bisect_right
from typing import List, Optional, Sequence, Tuple
import logging

from temple_passport import config
from temple_passport.exceptions import ConfigurationError
from temple_passport.models.passport import LevelInfo

logger = logging.getLogger(__name__)


DEFAULT_TITLES: List[Tuple[int, str]] = [
    (1, "Novice Believer"),
    (6, "Devout Disciple"),
    (11, "Reverent Lay Devotee"),
    (21, "Virtuous Benefactor"),
    (31, "Envoy of Fortune"),
    (41, "Attendant of the Gods"),
    (51, "Dharma Guardian"),
    (61, "Celestial Envoy"),
    (71, "Immortal Protector"),
    (81, "Perfected Sage"),
    (91, "Among the Immortals"),
    (100, "Merit Fulfilled"),
]


class LevelCurve:
    """
    Cumulative merit thresholds and level titles

    Args:
        thresholds: thresholds[i] is the lifetime merit required for level i + 1;
            must start at 0 and be strictly increasing
        titles: (first_level, title) pairs sorted by level; a title applies
            from its level until the next entry
    """

    def __init__(self, thresholds: Sequence[int], titles: Sequence[Tuple[int, str]]):
        if not thresholds or thresholds[0] != 0:
            raise ConfigurationError("Level thresholds must start at 0", config_key="level_thresholds")
        for lower, upper in zip(thresholds, thresholds[1:]):
            if upper <= lower:
                raise ConfigurationError(
                    f"Level thresholds must be strictly increasing ({lower} >= {upper})",
                    config_key="level_thresholds",
                )
        if not titles:
            raise ConfigurationError("Level title table is empty", config_key="level_titles")

        self.thresholds = list(thresholds)
        self.titles = sorted(titles)
        self._title_levels = [level for level, _ in self.titles]

    @classmethod
    def from_step_costs(cls, step_costs: Sequence[int], titles: Sequence[Tuple[int, str]] = DEFAULT_TITLES) -> "LevelCurve":
        """Build a curve from the merit cost of each level-up step"""
        thresholds = [0]
        for cost in step_costs:
            thresholds.append(thresholds[-1] + cost)
        return cls(thresholds, titles)

    @classmethod
    def default(cls, max_level: Optional[int] = None) -> "LevelCurve":
        """Curve where advancing from level n costs n * 100 merit"""
        max_level = max_level or config.MAX_LEVEL
        return cls.from_step_costs([level * 100 for level in range(1, max_level)])

    @property
    def max_level(self) -> int:
        return len(self.thresholds)

    def title_for(self, level: int) -> str:
        """Title for a level; levels past the table keep the last title"""
        index = bisect_right(self._title_levels, level) - 1
        return self.titles[max(index, 0)][1]


class LevelCalculator:
    """Stateless lifetime-merit to level mapping over a LevelCurve"""

    def __init__(self, curve: Optional[LevelCurve] = None):
        self.curve = curve or LevelCurve.default()

    def calculate(self, lifetime_merit: int) -> LevelInfo:
        """
        Calculate level info from lifetime merit

        Negative input is treated as zero. Monotonic: more merit never yields
        a lower level.
        """
        thresholds = self.curve.thresholds
        points = max(lifetime_merit, 0)
        level = max(1, bisect_right(thresholds, points))
        current_threshold = thresholds[level - 1]
        title = self.curve.title_for(level)

        if level >= self.curve.max_level:
            return LevelInfo(
                level=level,
                title=title,
                current_threshold=current_threshold,
                level_progress=1.0,
            )

        next_threshold = thresholds[level]
        progress = (points - current_threshold) / (next_threshold - current_threshold)

        return LevelInfo(
            level=level,
            title=title,
            current_threshold=current_threshold,
            next_threshold=next_threshold,
            points_needed_for_next_level=next_threshold - points,
            level_progress=min(1.0, max(0.0, progress)),
        )


def calculate_level_from_merit(lifetime_merit: int, curve: Optional[LevelCurve] = None) -> LevelInfo:
    """Convenience wrapper around LevelCalculator for one-off lookups"""
    return LevelCalculator(curve).calculate(lifetime_merit)
