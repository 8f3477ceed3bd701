"""Unit tests for achievement summaries (temple_passport/progression/summaries.py)"""
from temple_passport.models.achievement import AchievementProgress, AchievementTier
from temple_passport.models.events import CheckIn
from temple_passport.progression.catalog import DEFAULT_CATALOG
from temple_passport.progression.level_calculator import calculate_level_from_merit
from temple_passport.progression.summaries import (
    achievement_recommendations,
    achievement_stats,
    format_passport_display,
    format_unlock_message,
)


# ============================================================================
# Statistics Tests
# ============================================================================

def test_stats_fresh_passport(fresh_state):
    """Test nothing unlocked on a new passport"""
    stats = achievement_stats(fresh_state, DEFAULT_CATALOG)

    assert stats.total == len(DEFAULT_CATALOG)
    assert stats.unlocked == 0
    assert stats.total_rewards == 0
    assert stats.completion_rate == 0.0


def test_stats_after_first_check_in(coordinator, fresh_state, local_time, start_date):
    """Test unlocked count and rewards after the first unlock"""
    state = coordinator.apply(CheckIn(temple_id="temple_a", timestamp=local_time(start_date)), fresh_state).state

    stats = achievement_stats(state, DEFAULT_CATALOG)

    assert stats.unlocked == 1
    assert stats.total_rewards == 10
    assert stats.by_tier[AchievementTier.BRONZE]["unlocked"] == 1


def test_stats_ignore_stale_ids(fresh_state):
    """Test unlocked ids missing from the catalog are not counted"""
    state = fresh_state.model_copy(update={
        "achievements": {"retired_badge": AchievementProgress(current_progress=1, unlocked=True)}
    })

    assert achievement_stats(state, DEFAULT_CATALOG).unlocked == 0


# ============================================================================
# Recommendation Tests
# ============================================================================

def test_recommendations_closest_first(fresh_state):
    """Test only locked achievements at 50% or more, closest first"""
    state = fresh_state.model_copy(update={
        "achievements": {
            "check_in_10": AchievementProgress(current_progress=6),
            "prayer_10": AchievementProgress(current_progress=9),
            "temples_5": AchievementProgress(current_progress=2),
            "first_check_in": AchievementProgress(current_progress=1, unlocked=True),
        }
    })

    recommendations = achievement_recommendations(state, DEFAULT_CATALOG)

    assert [r["definition"].id for r in recommendations] == ["prayer_10", "check_in_10"]
    assert recommendations[0]["percentage"] == 90
    assert recommendations[0]["required"] == 10


def test_recommendations_limit(fresh_state):
    """Test recommendation list is capped"""
    state = fresh_state.model_copy(update={
        "achievements": {
            "check_in_10": AchievementProgress(current_progress=6),
            "prayer_10": AchievementProgress(current_progress=9),
            "temples_5": AchievementProgress(current_progress=4),
            "streak_7": AchievementProgress(current_progress=5),
        }
    })

    assert len(achievement_recommendations(state, DEFAULT_CATALOG, limit=2)) == 2


# ============================================================================
# Formatting Tests
# ============================================================================

def test_format_passport_display(fresh_state):
    """Test passport header shows level, merit and streak"""
    state = fresh_state.model_copy(update={"merit_balance": 40, "lifetime_merit_earned": 150})

    display = format_passport_display(state, calculate_level_from_merit(150))

    assert "Lv.2 Novice Believer" in display
    assert "Merit: 40 (lifetime 150)" in display
    assert "150 merit to Lv.3" in display
    assert "Streak: 0 days" in display


def test_format_passport_display_max_level(fresh_state):
    """Test max level shows no next-level target"""
    display = format_passport_display(fresh_state, calculate_level_from_merit(10**9))

    assert "Maximum level reached" in display


def test_format_unlock_message():
    """Test unlock message includes name, description and reward"""
    definition = next(d for d in DEFAULT_CATALOG if d.id == "streak_7")

    message = format_unlock_message(definition)

    assert "ACHIEVEMENT UNLOCKED" in message
    assert "Perseverance" in message
    assert "Check in 7 days in a row" in message
    assert "+100 merit" in message
