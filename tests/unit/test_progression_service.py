"""Unit tests for ProgressionService (temple_passport/services/progression_service.py)"""
import asyncio
import threading
import pytest
from datetime import timedelta

from temple_passport.exceptions import DuplicateCheckInError, InsufficientBalanceError
from temple_passport.models.events import CheckIn, PrayerReceived, PrayerSent
from temple_passport.progression.store import InMemoryProgressionStore
from temple_passport.services.progression_service import ProgressionService


# ============================================================================
# State Access Tests
# ============================================================================

@pytest.mark.asyncio
async def test_get_state_creates_passport(progression_service, memory_store, test_user_id, test_timezone):
    """Test first access creates and stores a passport"""
    state = await progression_service.get_state(test_user_id, timezone=test_timezone)

    assert state.level == 1
    assert state.timezone == test_timezone
    assert memory_store.load(test_user_id) == state


@pytest.mark.asyncio
async def test_get_state_returns_existing(progression_service, test_user_id, test_timezone):
    """Test later access returns the stored passport"""
    await progression_service.get_state(test_user_id, timezone=test_timezone)

    state = await progression_service.get_state(test_user_id, timezone="Europe/Stockholm")

    assert state.timezone == test_timezone


# ============================================================================
# Apply Tests
# ============================================================================

@pytest.mark.asyncio
async def test_apply_event_persists_result(
    progression_service, memory_store, test_user_id, test_timezone, local_time, start_date
):
    """Test applied event is saved before returning"""
    await progression_service.get_state(test_user_id, timezone=test_timezone)

    result = await progression_service.apply_event(
        test_user_id, CheckIn(temple_id="temple_a", timestamp=local_time(start_date))
    )

    stored = memory_store.load(test_user_id)
    assert stored == result.state
    assert stored.total_check_ins == 1
    assert stored.merit_balance == 20


@pytest.mark.asyncio
async def test_failed_event_not_persisted(progression_service, memory_store, test_user_id):
    """Test failed event leaves the stored passport untouched"""
    with pytest.raises(InsufficientBalanceError):
        await progression_service.apply_event(test_user_id, PrayerSent(to_user_id="friend"))

    stored = memory_store.load(test_user_id)
    assert stored.total_prayers == 0
    assert stored.transactions == []


@pytest.mark.asyncio
async def test_concurrent_events_serialized(progression_service, memory_store, test_user_id):
    """Test concurrent events for one user all land"""
    events = [PrayerReceived(from_user_id=f"friend_{i}") for i in range(5)]

    await asyncio.gather(*(progression_service.apply_event(test_user_id, e) for e in events))

    stored = memory_store.load(test_user_id)
    assert stored.prayers_received == 5
    assert stored.merit_balance == 100


@pytest.mark.asyncio
async def test_apply_events_stops_at_first_failure(
    progression_service, memory_store, test_user_id, test_timezone, local_time, start_date
):
    """Test queued events apply in order until one fails"""
    await progression_service.get_state(test_user_id, timezone=test_timezone)
    first = CheckIn(temple_id="temple_a", timestamp=local_time(start_date))
    second = CheckIn(temple_id="temple_a", timestamp=local_time(start_date + timedelta(days=1)))

    results = await progression_service.apply_events(test_user_id, [first, second])
    assert len(results) == 2

    with pytest.raises(DuplicateCheckInError):
        await progression_service.apply_events(test_user_id, [first])

    assert memory_store.load(test_user_id).total_check_ins == 2


# ============================================================================
# View Tests
# ============================================================================

@pytest.mark.asyncio
async def test_get_passport_view(progression_service, test_user_id, test_timezone, local_time, start_date):
    """Test passport view bundles level, stats and refreshed streak"""
    await progression_service.get_state(test_user_id, timezone=test_timezone)
    await progression_service.apply_event(
        test_user_id, CheckIn(temple_id="temple_a", timestamp=local_time(start_date))
    )

    view = await progression_service.get_passport_view(test_user_id, today=start_date + timedelta(days=5))

    assert view["state"].check_in_streak == 0
    assert view["level"].level == 1
    assert view["level"].points_needed_for_next_level == 80
    assert view["stats"].unlocked == 1
    assert isinstance(view["recommendations"], list)


@pytest.mark.asyncio
async def test_build_messages(progression_service, test_user_id, test_timezone, local_time, start_date):
    """Test notifications become user-facing messages"""
    await progression_service.get_state(test_user_id, timezone=test_timezone)
    result = await progression_service.apply_event(
        test_user_id, CheckIn(temple_id="temple_a", timestamp=local_time(start_date))
    )

    messages = progression_service.build_messages(result)

    assert len(messages) == 1
    assert "First Steps" in messages[0]
    assert "+10 merit" in messages[0]


# ============================================================================
# Resource Tests
# ============================================================================

class ThreadRecordingStore(InMemoryProgressionStore):
    """In-memory store that records which threads touched it"""

    def __init__(self):
        super().__init__()
        self.threads = set()

    def load(self, user_id):
        self.threads.add(threading.get_ident())
        return super().load(user_id)

    def save(self, state):
        self.threads.add(threading.get_ident())
        super().save(state)


@pytest.mark.asyncio
async def test_locks_released_after_use(progression_service, test_user_id):
    """Test per-user locks are dropped once no task needs them"""
    events = [PrayerReceived(from_user_id=f"friend_{i}") for i in range(3)]

    await asyncio.gather(
        *(progression_service.apply_event(test_user_id, e) for e in events),
        progression_service.apply_event("user_002", PrayerReceived(from_user_id="friend")),
    )

    assert progression_service._locks == {}
    assert progression_service._lock_users == {}


@pytest.mark.asyncio
async def test_lock_released_after_failure(progression_service, test_user_id):
    """Test a failed event does not leave its lock behind"""
    with pytest.raises(InsufficientBalanceError):
        await progression_service.apply_event(test_user_id, PrayerSent(to_user_id="friend"))

    assert progression_service._locks == {}


@pytest.mark.asyncio
async def test_store_io_off_event_loop(coordinator, test_user_id):
    """Test store calls run in worker threads, not on the event loop thread"""
    store = ThreadRecordingStore()
    service = ProgressionService(store, coordinator)

    await service.apply_event(test_user_id, PrayerReceived(from_user_id="friend"))

    assert store.threads
    assert threading.get_ident() not in store.threads
