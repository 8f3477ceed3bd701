"""
Check-in Streak Tracking

Streaks are computed from the set of distinct local check-in dates rather
than stored as a running counter, so they are always consistent with the
recorded history and decay naturally when days pass without a check-in.

Rules:
- Multiple check-ins on the same day count once
- A streak survives until a full day passes with no check-in: if today has
  no check-in yet, counting starts from yesterday
"""

from bisect import insort
from typing import Iterable, List
from datetime import date, timedelta
import logging

logger = logging.getLogger(__name__)


class StreakTracker:
    """Consecutive-day check-in streaks over a sorted list of dates"""

    def __init__(self, check_in_dates: List[date]):
        # Shares the list with the state it came from; kept sorted and distinct
        self.check_in_dates = check_in_dates
        self._dates = set(check_in_dates)

    @classmethod
    def from_dates(cls, dates: Iterable[date]) -> "StreakTracker":
        """Build a tracker over a fresh sorted copy of arbitrary dates"""
        return cls(sorted(set(dates)))

    def record_check_in(self, day: date) -> bool:
        """
        Record a check-in day

        Returns:
            True if the day was new, False if it was already recorded
        """
        if day in self._dates:
            return False
        self._dates.add(day)
        insort(self.check_in_dates, day)
        return True

    def has_check_in(self, day: date) -> bool:
        return day in self._dates

    def is_consecutive(self, day: date) -> bool:
        """Whether a check-in on `day` continues a streak from the day before"""
        return (day - timedelta(days=1)) in self._dates

    def current_streak(self, today: date) -> int:
        """
        Count consecutive check-in days ending today (or yesterday)

        Returns:
            0 when neither today nor yesterday has a check-in
        """
        if today in self._dates:
            cursor = today
        elif (today - timedelta(days=1)) in self._dates:
            cursor = today - timedelta(days=1)
        else:
            return 0

        streak = 0
        while cursor in self._dates:
            streak += 1
            cursor -= timedelta(days=1)
        return streak

    def longest_streak(self) -> int:
        """Longest run of consecutive check-in days ever recorded"""
        longest = 0
        run = 0
        previous = None
        for day in self.check_in_dates:
            if previous is not None and day - previous == timedelta(days=1):
                run += 1
            else:
                run = 1
            longest = max(longest, run)
            previous = day
        return longest
