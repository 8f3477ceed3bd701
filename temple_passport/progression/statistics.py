"""Statistics snapshot derived from a progression state"""

from datetime import date

from temple_passport.models.passport import StatisticsSnapshot, UserProgressionState
from temple_passport.utils.datetime_helpers import days_back

EARLY_BIRD_HOURS = range(6, 9)
NIGHT_OWL_HOURS = range(21, 24)
PERFECT_WEEK_DAYS = 7


def build_snapshot(state: UserProgressionState, today: date) -> StatisticsSnapshot:
    """
    Collect every statistic an achievement can watch

    Args:
        state: Progression state (streak and level already recomputed)
        today: Reference local date for windowed statistics
    """
    records = state.check_in_records
    recorded_days = set(state.check_in_dates)
    last_week = days_back(today, PERFECT_WEEK_DAYS)

    return StatisticsSnapshot(
        total_check_ins=state.total_check_ins,
        check_in_streak=state.check_in_streak,
        longest_streak=state.longest_streak,
        total_prayers=state.total_prayers,
        prayers_received=state.prayers_received,
        temples_visited=len(state.visited_temples),
        deity_types_visited=len({r.deity for r in records if r.deity}),
        lifetime_merit_earned=state.lifetime_merit_earned,
        level=state.level,
        total_purchases=state.total_purchases,
        total_event_registrations=state.total_event_registrations,
        early_bird_check_ins=sum(1 for r in records if r.local_hour in EARLY_BIRD_HOURS),
        night_owl_check_ins=sum(1 for r in records if r.local_hour in NIGHT_OWL_HOURS),
        perfect_week_days=sum(1 for day in last_week if day in recorded_days),
        amulets_bound=state.amulets_bound,
        deity_selected=int(state.deity_selected),
        max_single_check_in_points=max((r.earned_points for r in records), default=0),
    )
