"""
Derived task status

Pure functions of (last completion, frequency, now). Nothing here touches
storage; the gateway feeds in what it read and stores nothing back.
"""

from datetime import date, datetime, timedelta
from typing import Callable, Iterable, Optional

from homekeep.models.home import TaskFrequency


def whole_days_between(start: datetime, end: datetime) -> int:
    """Number of complete 24-hour periods from start to end."""
    return (end - start).days


def is_due(
    last_completed: Optional[datetime],
    frequency: TaskFrequency,
    now: datetime,
) -> bool:
    """
    Whether a task is due at ``now``.

    A task that was never completed is always due. A daily task is due
    again once the calendar day changes; weekly and monthly tasks are due
    once 7 or 30 whole days have passed.
    """
    if last_completed is None:
        return True
    if frequency is TaskFrequency.DAILY:
        return last_completed.date() != now.date()
    return whole_days_between(last_completed, now) >= frequency.interval_days


def is_due_after_interval(
    last_completed: Optional[datetime],
    frequency: TaskFrequency,
    moment: datetime,
) -> bool:
    """
    Interval-only due check used when looking ahead to a future day.

    Unlike ``is_due`` this applies the whole-day threshold to daily
    tasks as well.
    """
    if last_completed is None:
        return True
    return whole_days_between(last_completed, moment) >= frequency.interval_days


def current_streak(has_completions: Callable[[date], bool], today: date) -> int:
    """
    Count consecutive days with at least one completion.

    Starts from ``today``, or from yesterday when today has nothing yet,
    and walks backwards one day at a time until the first gap.
    """
    check = today
    if not has_completions(check):
        check -= timedelta(days=1)

    streak = 0
    while has_completions(check):
        streak += 1
        check -= timedelta(days=1)
    return streak


def longest_streak(days: Iterable[date]) -> int:
    """Length of the longest run of consecutive calendar days."""
    ordered = sorted(set(days))
    if not ordered:
        return 0

    longest = 1
    current = 1
    for previous, day in zip(ordered, ordered[1:]):
        if (day - previous).days == 1:
            current += 1
            longest = max(longest, current)
        else:
            current = 1
    return longest
