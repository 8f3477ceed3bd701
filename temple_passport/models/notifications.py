"""UI-facing notifications and the result of applying a life event"""
from typing import Annotated, Literal, Union
from pydantic import BaseModel, ConfigDict, Field

from temple_passport.models.achievement import AchievementDefinition
from temple_passport.models.ledger import MeritTransaction
from temple_passport.models.passport import UserProgressionState


class LevelUp(BaseModel):
    """User reached a higher level"""
    model_config = ConfigDict(frozen=True)

    type: Literal["level_up"] = "level_up"
    from_level: int
    to_level: int
    title: str


class AchievementUnlocked(BaseModel):
    """User unlocked an achievement"""
    model_config = ConfigDict(frozen=True)

    type: Literal["achievement_unlocked"] = "achievement_unlocked"
    definition: AchievementDefinition


Notification = Annotated[
    Union[LevelUp, AchievementUnlocked],
    Field(discriminator="type"),
]


class ProgressionResult(BaseModel):
    """Outcome of ProgressionCoordinator.apply"""
    state: UserProgressionState
    notifications: list[Notification] = Field(default_factory=list)
    transactions: list[MeritTransaction] = Field(default_factory=list)  # appended by this event

    @property
    def leveled_up(self) -> bool:
        return any(isinstance(n, LevelUp) for n in self.notifications)

    @property
    def unlocked_achievements(self) -> list[AchievementDefinition]:
        return [n.definition for n in self.notifications if isinstance(n, AchievementUnlocked)]
