"""
Prometheus metrics definitions for temple-passport.

Metrics are organized by category:
- Progression event metrics: applied/rejected life events
- Merit economy metrics: points earned and spent
- Achievement and level metrics: unlocks and level-ups

The host application exposes them through its own /metrics endpoint.
"""

import logging
from prometheus_client import Counter

from temple_passport import config

logger = logging.getLogger(__name__)

# =============================================================================
# Progression Event Metrics
# =============================================================================

progression_events_total = Counter(
    "progression_events_total",
    "Total life events applied to passports",
    ["event_type", "status"],  # status: applied / error type name
)

# =============================================================================
# Merit Economy Metrics
# =============================================================================

merit_points_total = Counter(
    "merit_points_total",
    "Total merit points moved through ledgers",
    ["kind"],  # kind: earn/spend
)

# =============================================================================
# Achievement & Level Metrics
# =============================================================================

achievements_unlocked_total = Counter(
    "achievements_unlocked_total",
    "Total achievements unlocked",
    ["achievement_id"],
)

level_ups_total = Counter(
    "level_ups_total",
    "Total level-up transitions",
)


# =============================================================================
# Helper Functions
# =============================================================================

def track_event(event_type: str, status: str = "applied") -> None:
    """Count a life event outcome"""
    if not config.ENABLE_METRICS:
        return
    progression_events_total.labels(event_type=event_type, status=status).inc()


def track_merit(kind: str, amount: int) -> None:
    """Count merit points earned or spent"""
    if not config.ENABLE_METRICS:
        return
    merit_points_total.labels(kind=kind).inc(amount)


def track_achievement_unlock(achievement_id: str) -> None:
    """Count an achievement unlock"""
    if not config.ENABLE_METRICS:
        return
    achievements_unlocked_total.labels(achievement_id=achievement_id).inc()


def track_level_up(levels_gained: int = 1) -> None:
    """Count level-up transitions"""
    if not config.ENABLE_METRICS:
        return
    level_ups_total.inc(levels_gained)
