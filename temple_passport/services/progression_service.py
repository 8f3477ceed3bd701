"""
ProgressionService - Passport Business Logic

Wraps the synchronous ProgressionCoordinator with persistence and
per-user serialization. Adapters (check-in screens, offline queue flush,
networking layer) call this service; it never talks to sensors or HTTP.
"""

import asyncio
import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from datetime import date
from typing import Any, AsyncGenerator, Dict, List, Optional

from temple_passport.models.events import LifeEvent
from temple_passport.models.notifications import AchievementUnlocked, LevelUp, ProgressionResult
from temple_passport.models.passport import UserProgressionState
from temple_passport.progression.coordinator import ProgressionCoordinator
from temple_passport.progression.store import ProgressionStore
from temple_passport.progression.summaries import (
    achievement_recommendations,
    achievement_stats,
    format_unlock_message,
)

logger = logging.getLogger(__name__)


class ProgressionService:
    """
    Service for passport progression.

    Responsibilities:
    - Loading/creating passports from the store
    - Serializing writes per user (one apply at a time per user id)
    - Running store I/O in a worker thread so file stores never block the loop
    - Persisting the new state before reporting success
    - Building user-facing messages from notifications
    """

    def __init__(self, store: ProgressionStore, coordinator: Optional[ProgressionCoordinator] = None):
        """
        Initialize ProgressionService.

        Args:
            store: Passport store
            coordinator: Progression coordinator (defaults to standard catalog/policy)
        """
        self.store = store
        self.coordinator = coordinator or ProgressionCoordinator()
        self._locks: Dict[str, asyncio.Lock] = {}
        self._lock_users: Dict[str, int] = defaultdict(int)
        logger.debug("ProgressionService initialized")

    @asynccontextmanager
    async def _user_lock(self, user_id: str) -> AsyncGenerator[None, None]:
        """
        Hold the per-user lock

        Locks exist only while some task holds or waits for them, so the
        lock table stays bounded by the number of users in flight.
        """
        lock = self._locks.setdefault(user_id, asyncio.Lock())
        self._lock_users[user_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[user_id] -= 1
            if not self._lock_users[user_id]:
                del self._lock_users[user_id]
                del self._locks[user_id]

    async def get_state(self, user_id: str, timezone: Optional[str] = None) -> UserProgressionState:
        """Current passport for a user, created on first access"""
        state = await asyncio.to_thread(self.store.load, user_id)
        if state is None:
            async with self._user_lock(user_id):
                state = await asyncio.to_thread(self.store.load, user_id)
                if state is None:
                    state = self.coordinator.create_state(user_id, timezone)
                    await asyncio.to_thread(self.store.save, state)
                    logger.info(f"Created passport for user {user_id}")
        return state

    async def apply_event(
        self,
        user_id: str,
        event: LifeEvent,
        today: Optional[date] = None
    ) -> ProgressionResult:
        """
        Apply one life event and persist the result

        Events for the same user are applied strictly one at a time. On
        failure the stored passport is untouched and the error propagates.
        """
        await self.get_state(user_id)
        async with self._user_lock(user_id):
            state = await asyncio.to_thread(self.store.load, user_id)
            result = self.coordinator.apply(event, state, today)
            await asyncio.to_thread(self.store.save, result.state)
        return result

    async def apply_events(
        self,
        user_id: str,
        events: List[LifeEvent]
    ) -> List[ProgressionResult]:
        """
        Apply queued events in order (e.g. offline check-ins being flushed)

        Stops at the first failure; events before it stay committed.
        """
        results = []
        for event in events:
            results.append(await self.apply_event(user_id, event))
        return results

    async def get_passport_view(self, user_id: str, today: Optional[date] = None) -> Dict[str, Any]:
        """
        Passport data for display, with streak and level refreshed

        Returns:
            {
                'state': UserProgressionState,
                'level': LevelInfo,
                'stats': AchievementStats,
                'recommendations': list
            }
        """
        state = self.coordinator.refresh(await self.get_state(user_id), today)
        catalog = self.coordinator.engine.catalog
        return {
            "state": state,
            "level": self.coordinator.levels.calculate(state.lifetime_merit_earned),
            "stats": achievement_stats(state, catalog),
            "recommendations": achievement_recommendations(state, catalog),
        }

    def build_messages(self, result: ProgressionResult) -> List[str]:
        """
        User-facing messages for a result's notifications, in order
        """
        messages = []
        for notification in result.notifications:
            if isinstance(notification, LevelUp):
                messages.append(
                    f"🎉 Level up! {notification.from_level} → {notification.to_level}: {notification.title}"
                )
            elif isinstance(notification, AchievementUnlocked):
                messages.append(format_unlock_message(notification.definition))
        return messages
