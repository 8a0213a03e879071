"""
Streak and progress calculations.

Pure functions over a goal's completion history and action steps. Nothing
here touches the database or keeps state between calls; "today" is always
passed in (or resolved from the configured time zone when omitted) so the
same snapshot always gives the same answer.
"""
from datetime import date, timedelta
from typing import Iterable, Optional

from app.utils.dates import DateLike, current_date, to_calendar_date


ONE_DAY = timedelta(days=1)


def _distinct_days(completed_dates: Iterable[DateLike]) -> set[date]:
    return {to_calendar_date(value) for value in completed_dates}


def rounded_div(numerator: int, denominator: int) -> int:
    """
    Integer division rounded half-up; 0 when the denominator is 0.

    Integer arithmetic keeps .5 cases exact (12.5 -> 13, where the built-in
    ``round`` would give 12).

    Examples:
        >>> rounded_div(100, 8)
        13
        >>> rounded_div(5, 0)
        0
    """
    if denominator <= 0:
        return 0
    return (2 * numerator + denominator) // (2 * denominator)


def calculate_current_streak(
    completed_dates: Iterable[DateLike],
    today: Optional[date] = None,
) -> int:
    """
    Count consecutive completed days ending today.

    If today has not been marked yet the count starts from yesterday, so an
    unbroken run is still shown until the day is over. Counting stops at the
    first missing day.

    Args:
        completed_dates: Completion dates (duplicates and times are ignored)
        today: Reference day; defaults to today in the configured zone

    Returns:
        Current streak length (0 if there is no run ending today or yesterday)

    Examples:
        >>> d = date(2025, 1, 21)
        >>> calculate_current_streak([date(2025, 1, 20), date(2025, 1, 19)], today=d)
        2
        >>> calculate_current_streak([date(2025, 1, 21), date(2025, 1, 19)], today=d)
        1
    """
    days = _distinct_days(completed_dates)
    if not days:
        return 0

    today = today or current_date()
    anchor = today if today in days else today - ONE_DAY

    streak = 0
    while anchor in days:
        streak += 1
        anchor -= ONE_DAY

    return streak


def calculate_longest_streak(completed_dates: Iterable[DateLike]) -> int:
    """
    Length of the longest run of consecutive days, regardless of today.

    Examples:
        >>> calculate_longest_streak([])
        0
        >>> calculate_longest_streak(["2025-01-15", "2025-01-16", "2025-01-20"])
        2
    """
    days = sorted(_distinct_days(completed_dates))
    if not days:
        return 0

    longest = 1
    current = 1
    for previous, day in zip(days, days[1:]):
        if day - previous == ONE_DAY:
            current += 1
        else:
            longest = max(longest, current)
            current = 1

    return max(longest, current)


def calculate_progress(completed_count: int, total_count: int) -> int:
    """
    Percentage of completed action steps, 0-100, rounded half-up.

    Examples:
        >>> calculate_progress(1, 3)
        33
        >>> calculate_progress(2, 3)
        67
        >>> calculate_progress(0, 0)
        0
    """
    return rounded_div(completed_count * 100, total_count)


def is_marked_today(
    completed_dates: Iterable[DateLike],
    today: Optional[date] = None,
) -> bool:
    """True if one of the dates falls on today's calendar day."""
    today = today or current_date()
    return today in _distinct_days(completed_dates)


def days_until_target(target_date: DateLike, today: Optional[date] = None) -> int:
    """
    Whole days from today to the target date; negative once it has passed.

    Examples:
        >>> days_until_target(date(2025, 2, 1), today=date(2025, 1, 21))
        11
        >>> days_until_target("2025-01-20", today=date(2025, 1, 21))
        -1
    """
    today = today or current_date()
    return (to_calendar_date(target_date) - today).days
