"""
Reward Policy

Merit amounts for check-ins and prayers. Amounts are policy data supplied
by configuration, never decided by the engine.

Check-in reward:
- Base: per-temple reward, or the default check-in reward
- Optional visit bonuses (disabled by default):
  - First visit to a temple: x2.5
  - Consecutive-day check-in: x1.2
  - Streak bonus: +5% per consecutive day beyond the first, capped at x2.0
"""

from typing import Dict
import logging

from pydantic import BaseModel, Field

from temple_passport import config
from temple_passport.models.passport import CheckInType

logger = logging.getLogger(__name__)


class RewardPolicy(BaseModel):
    """Merit reward and cost table"""
    default_check_in_reward: int = Field(default=10, gt=0)
    temple_rewards: Dict[str, int] = Field(default_factory=dict)  # temple_id -> base reward
    prayer_cost: int = Field(default=10, gt=0)
    prayer_reward: int = Field(default=20, gt=0)
    visit_bonuses_enabled: bool = False
    check_in_type_multipliers: Dict[CheckInType, float] = Field(
        default_factory=lambda: {
            CheckInType.NORMAL: 1.0,
            CheckInType.CONSECUTIVE: 1.2,
            CheckInType.FIRST_VISIT: 2.5,
        }
    )
    consecutive_day_bonus: float = 0.05
    max_consecutive_multiplier: float = 2.0

    def base_check_in_reward(self, temple_id: str) -> int:
        return self.temple_rewards.get(temple_id, self.default_check_in_reward)

    def check_in_reward(
        self,
        temple_id: str,
        check_in_type: CheckInType = CheckInType.NORMAL,
        consecutive_days: int = 1
    ) -> int:
        """
        Merit awarded for a check-in

        Args:
            temple_id: Temple checked in at
            check_in_type: Classification of this check-in
            consecutive_days: Streak length including this check-in

        Returns:
            Points to award (at least 1)
        """
        points = float(self.base_check_in_reward(temple_id))

        if self.visit_bonuses_enabled:
            points *= self.check_in_type_multipliers.get(check_in_type, 1.0)

            if consecutive_days > 1:
                streak_bonus = 1.0 + (consecutive_days - 1) * self.consecutive_day_bonus
                points *= min(streak_bonus, self.max_consecutive_multiplier)

        return max(1, int(points))


def default_reward_policy() -> RewardPolicy:
    """Reward policy built from environment configuration"""
    return RewardPolicy(
        default_check_in_reward=config.CHECK_IN_REWARD,
        prayer_cost=config.PRAYER_COST,
        prayer_reward=config.PRAYER_REWARD,
        visit_bonuses_enabled=config.VISIT_BONUSES_ENABLED,
    )
