"""
Progression Coordinator

Single entry point that turns one life event into one consistent passport
update plus the notifications the UI should present.

Every event is applied to a deep copy of the caller's state. The copy is
only returned once every step has succeeded, so a failure at any step
(insufficient balance, duplicate check-in, ...) leaves the caller's state
exactly as it was.

Check-in sequence:
1. Reject a second check-in at the same temple on the same local date
2. Record the check-in date and recompute the streak
3. Increment total check-ins and earn the policy check-in reward
4. Recompute level
5. Evaluate achievements, earn each reward, recompute level; repeat while
   rewards unlock further achievements
"""

from datetime import date, datetime
from typing import List, Optional, Sequence
import logging

from temple_passport import config
from temple_passport.exceptions import (
    DuplicateCheckInError,
    InvalidAmountError,
    PassportError,
)
from temple_passport.models.achievement import AchievementDefinition
from temple_passport.models.events import (
    AmuletBound,
    CheckIn,
    DeitySelected,
    EventRegistration,
    LifeEvent,
    PrayerReceived,
    PrayerSent,
    Purchase,
)
from temple_passport.models.ledger import MeritTransaction
from temple_passport.models.notifications import (
    AchievementUnlocked,
    LevelUp,
    Notification,
    ProgressionResult,
)
from temple_passport.models.passport import (
    CheckInRecord,
    CheckInType,
    UserProgressionState,
)
from temple_passport.observability.metrics import (
    track_achievement_unlock,
    track_event,
    track_level_up,
    track_merit,
)
from temple_passport.progression.achievement_engine import AchievementEngine, EvaluationResult
from temple_passport.progression.catalog import DEFAULT_CATALOG
from temple_passport.progression.level_calculator import LevelCalculator
from temple_passport.progression.merit_ledger import MeritLedger
from temple_passport.progression.policy import RewardPolicy, default_reward_policy
from temple_passport.progression.statistics import build_snapshot
from temple_passport.progression.streak_tracker import StreakTracker
from temple_passport.utils.datetime_helpers import ensure_utc, local_date, local_hour, now_utc

logger = logging.getLogger(__name__)


class _Transition:
    """Mutable working copy of a state for the duration of one event"""

    def __init__(
        self,
        coordinator: "ProgressionCoordinator",
        state: UserProgressionState,
        today: date,
        timestamp: datetime
    ):
        self.coordinator = coordinator
        self.state = state.model_copy(deep=True)
        self.today = today
        self.timestamp = timestamp
        self.ledger = MeritLedger(self.state)
        self.streaks = StreakTracker(self.state.check_in_dates)
        self.notifications: List[Notification] = []
        self.transactions: List[MeritTransaction] = []

    def earn(self, amount: int, reason: str) -> None:
        self.transactions.append(self.ledger.earn(amount, reason, self.timestamp))

    def spend(self, amount: int, reason: str) -> None:
        self.transactions.append(self.ledger.spend(amount, reason, self.timestamp))

    def refresh_streak(self) -> None:
        self.state.check_in_streak = self.streaks.current_streak(self.today)
        self.state.longest_streak = max(self.state.longest_streak, self.streaks.longest_streak())

    def refresh_level(self) -> None:
        info = self.coordinator.levels.calculate(self.state.lifetime_merit_earned)
        if info.level > self.state.level:
            self.notifications.append(
                LevelUp(from_level=self.state.level, to_level=info.level, title=info.title)
            )
            logger.info(f"User {self.state.user_id} leveled up from {self.state.level} to {info.level}!")
        self.state.level = info.level
        self.state.title = info.title

    def grant(self, result: EvaluationResult) -> None:
        """Adopt an evaluation result and pay each newly unlocked reward once"""
        self.state.achievements = result.updated
        for definition in result.newly_unlocked:
            self.notifications.append(AchievementUnlocked(definition=definition))
            if definition.reward_points > 0:
                self.earn(definition.reward_points, "achievement")
        if result.newly_unlocked:
            self.refresh_level()

    def evaluate_achievements(self) -> None:
        engine = self.coordinator.engine
        while True:
            snapshot = build_snapshot(self.state, self.today)
            result = engine.evaluate(snapshot, self.state.achievements, self.timestamp)
            self.grant(result)
            if not result.newly_unlocked:
                break

    def result(self) -> ProgressionResult:
        return ProgressionResult(
            state=self.state,
            notifications=self.notifications,
            transactions=self.transactions,
        )


class ProgressionCoordinator:
    """
    Applies life events to progression states.

    Args:
        catalog: Achievement definitions (defaults to the bundled catalog)
        level_calculator: Level curve wrapper (defaults to the standard curve)
        policy: Reward/cost table (defaults to environment configuration)
    """

    def __init__(
        self,
        catalog: Optional[Sequence[AchievementDefinition]] = None,
        level_calculator: Optional[LevelCalculator] = None,
        policy: Optional[RewardPolicy] = None
    ):
        self.engine = AchievementEngine(DEFAULT_CATALOG if catalog is None else catalog)
        self.levels = level_calculator or LevelCalculator()
        self.policy = policy or default_reward_policy()

    def create_state(self, user_id: str, timezone: Optional[str] = None) -> UserProgressionState:
        """Fresh passport: all counters zero, level 1"""
        info = self.levels.calculate(0)
        return UserProgressionState(
            user_id=user_id,
            timezone=timezone or config.DEFAULT_TIMEZONE,
            level=info.level,
            title=info.title,
        )

    def apply(
        self,
        event: LifeEvent,
        state: UserProgressionState,
        today: Optional[date] = None
    ) -> ProgressionResult:
        """
        Apply one life event

        Args:
            event: Decoded life event
            state: Current passport (never mutated)
            today: Reference local date for streaks; defaults to the later of
                the event's local date and the newest recorded check-in date

        Returns:
            ProgressionResult with the new state, ordered notifications and
            the transactions appended by this event

        Raises:
            DuplicateCheckInError, InsufficientBalanceError, InvalidAmountError
        """
        try:
            result = self._apply(event, state, today)
        except PassportError as e:
            track_event(event.type, status=e.__class__.__name__)
            raise

        track_event(event.type)
        self._track_commit(result)

        logger.info(
            f"Applied {event.type} for user {state.user_id}: "
            f"balance {state.merit_balance} -> {result.state.merit_balance}, "
            f"{len(result.notifications)} notification(s)"
        )
        return result

    def unlock_achievement(
        self,
        achievement_id: str,
        state: UserProgressionState,
        now: Optional[datetime] = None
    ) -> ProgressionResult:
        """
        Manually unlock an achievement and grant its reward once

        Already-unlocked achievements produce an unchanged state and no
        notifications.

        Raises:
            UnknownAchievementDefinitionError: id is not in the catalog
        """
        timestamp = ensure_utc(now) if now else now_utc()
        transition = _Transition(self, state, local_date(timestamp, state.timezone), timestamp)

        unlocked = self.engine.unlock(achievement_id, transition.state.achievements, timestamp)
        if unlocked is not None:
            transition.grant(unlocked)
            transition.evaluate_achievements()

        result = transition.result()
        self._track_commit(result)
        return result

    def refresh(self, state: UserProgressionState, today: Optional[date] = None) -> UserProgressionState:
        """
        Recompute derived fields (streak, level, title) for display

        Streaks decay as days pass without check-ins, so a stored passport
        must be refreshed against the current date before being shown.
        """
        timestamp = now_utc()
        today = today or local_date(timestamp, state.timezone)
        transition = _Transition(self, state, today, timestamp)
        transition.refresh_streak()
        info = self.levels.calculate(transition.state.lifetime_merit_earned)
        transition.state.level = info.level
        transition.state.title = info.title
        return transition.state

    def _track_commit(self, result: ProgressionResult) -> None:
        for transaction in result.transactions:
            track_merit(transaction.kind.value, transaction.amount)
        for notification in result.notifications:
            if isinstance(notification, LevelUp):
                track_level_up(notification.to_level - notification.from_level)
            else:
                track_achievement_unlock(notification.definition.id)

    # ============================================
    # Event handlers
    # ============================================

    def _apply(
        self,
        event: LifeEvent,
        state: UserProgressionState,
        today: Optional[date]
    ) -> ProgressionResult:
        timestamp = ensure_utc(event.timestamp)
        event_day = local_date(timestamp, state.timezone)
        if today is None:
            # Late offline-queued events never move the streak reference backwards
            today = max([event_day] + state.check_in_dates[-1:])
        transition = _Transition(self, state, today, timestamp)

        if isinstance(event, CheckIn):
            self._apply_check_in(transition, event, event_day)

        elif isinstance(event, PrayerSent):
            transition.spend(self.policy.prayer_cost, "prayer")
            transition.state.total_prayers += 1

        elif isinstance(event, PrayerReceived):
            transition.earn(self.policy.prayer_reward, "prayer_received")
            transition.state.prayers_received += 1
            transition.refresh_level()

        elif isinstance(event, Purchase):
            transition.spend(event.merit_spent, "purchase")
            transition.state.total_purchases += 1

        elif isinstance(event, EventRegistration):
            if event.merit_fee < 0:
                raise InvalidAmountError(event.merit_fee, user_id=state.user_id, operation="event_registration")
            if event.merit_fee > 0:
                transition.spend(event.merit_fee, "event_registration")
            transition.state.total_event_registrations += 1

        elif isinstance(event, AmuletBound):
            transition.state.amulets_bound += 1

        elif isinstance(event, DeitySelected):
            transition.state.deity_selected = True

        else:
            raise TypeError(f"Unsupported life event: {type(event).__name__}")

        transition.refresh_streak()
        transition.evaluate_achievements()
        return transition.result()

    def _apply_check_in(self, transition: _Transition, event: CheckIn, event_day: date) -> None:
        state = transition.state

        if state.has_checked_in(event.temple_id, event_day):
            raise DuplicateCheckInError(
                temple_id=event.temple_id,
                check_in_date=event_day,
                user_id=state.user_id,
                operation="check_in",
            )

        if event.temple_id not in state.visited_temples:
            check_in_type = CheckInType.FIRST_VISIT
        elif transition.streaks.is_consecutive(event_day):
            check_in_type = CheckInType.CONSECUTIVE
        else:
            check_in_type = CheckInType.NORMAL

        transition.streaks.record_check_in(event_day)
        transition.refresh_streak()

        points = self.policy.check_in_reward(
            event.temple_id,
            check_in_type,
            consecutive_days=transition.streaks.current_streak(event_day),
        )

        state.total_check_ins += 1
        state.check_in_records.append(
            CheckInRecord(
                temple_id=event.temple_id,
                checked_in_at=transition.timestamp,
                local_date=event_day,
                local_hour=local_hour(transition.timestamp, state.timezone),
                coordinate=event.coordinate,
                deity=event.deity,
                check_in_type=check_in_type,
                earned_points=points,
            )
        )

        transition.earn(points, "checkin")
        transition.refresh_level()
