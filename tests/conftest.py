"""Global test fixtures and utilities for temple-passport tests"""
import pytest
from datetime import date, datetime
from zoneinfo import ZoneInfo

from temple_passport.progression.coordinator import ProgressionCoordinator
from temple_passport.progression.policy import RewardPolicy
from temple_passport.progression.store import InMemoryProgressionStore
from temple_passport.services.progression_service import ProgressionService


# ============================================================================
# User Fixtures
# ============================================================================

@pytest.fixture
def test_user_id():
    """Standard test user ID"""
    return "user_001"


@pytest.fixture
def test_timezone():
    """Standard test user timezone (UTC+8, no DST)"""
    return "Asia/Taipei"


@pytest.fixture
def local_time(test_timezone):
    """Factory for timezone-aware datetimes in the test user's timezone"""
    tz = ZoneInfo(test_timezone)

    def _local_time(day: date, hour: int = 10, minute: int = 0) -> datetime:
        return datetime(day.year, day.month, day.day, hour, minute, tzinfo=tz)

    return _local_time


@pytest.fixture
def start_date():
    """First day of test check-in sequences"""
    return date(2024, 3, 1)


# ============================================================================
# Engine Fixtures
# ============================================================================

@pytest.fixture
def reward_policy():
    """Default reward policy, independent of environment configuration"""
    return RewardPolicy()


@pytest.fixture
def coordinator(reward_policy):
    """Coordinator over the bundled catalog and default level curve"""
    return ProgressionCoordinator(policy=reward_policy)


@pytest.fixture
def fresh_state(coordinator, test_user_id, test_timezone):
    """Brand-new passport: zero merit, level 1"""
    return coordinator.create_state(test_user_id, test_timezone)


# ============================================================================
# Service Fixtures
# ============================================================================

@pytest.fixture
def memory_store():
    """Empty in-memory passport store"""
    return InMemoryProgressionStore()


@pytest.fixture
def progression_service(memory_store, coordinator):
    """Progression service over an in-memory store"""
    return ProgressionService(memory_store, coordinator)
