"""
Period preset utilities for leaderboard queries.

Converts period keywords to inclusive date ranges and clamps them against a
league's counting start date.
"""

from datetime import date, timedelta
from typing import Optional

from stepleague.data_models.leaderboard import PeriodRange, ResolvedPeriod
from stepleague.utils.leaderboard_exceptions import ValidationError


PERIOD_PRESETS = (
    "today",
    "yesterday",
    "this_week",
    "last_week",
    "this_month",
    "last_month",
    "last_7_days",
    "last_30_days",
    "last_90_days",
    "this_year",
    "all_time",
    "custom",
)

PERIOD_LABELS = {
    "today": "Today",
    "yesterday": "Yesterday",
    "this_week": "This Week",
    "last_week": "Last Week",
    "this_month": "This Month",
    "last_month": "Last Month",
    "last_7_days": "Last 7 Days",
    "last_30_days": "Last 30 Days",
    "last_90_days": "Last 90 Days",
    "this_year": "This Year",
    "all_time": "All Time",
    "custom": "Custom",
}

_PREVIOUS_PERIODS = {
    "today": "yesterday",
    "this_week": "last_week",
    "this_month": "last_month",
    "last_7_days": "last_7_days",
    "last_30_days": "last_30_days",
}


def _week_start(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def preset_to_date_range(preset: str, today: date) -> Optional[PeriodRange]:
    """
    Convert a period preset to a date range relative to ``today``.

    Ranges for the current week/month/year end today, never in the future.
    Returns None for ``all_time`` (no date filter) and ``custom`` (caller
    supplies the bounds).

    Raises:
        ValidationError: If the preset is not a known keyword
    """
    if preset == "today":
        return PeriodRange(today, today)

    if preset == "yesterday":
        yesterday = today - timedelta(days=1)
        return PeriodRange(yesterday, yesterday)

    if preset == "this_week":
        return PeriodRange(_week_start(today), today)

    if preset == "last_week":
        last_week_end = _week_start(today) - timedelta(days=1)
        return PeriodRange(_week_start(last_week_end), last_week_end)

    if preset == "this_month":
        return PeriodRange(today.replace(day=1), today)

    if preset == "last_month":
        last_month_end = today.replace(day=1) - timedelta(days=1)
        return PeriodRange(last_month_end.replace(day=1), last_month_end)

    if preset == "last_7_days":
        return PeriodRange(today - timedelta(days=6), today)

    if preset == "last_30_days":
        return PeriodRange(today - timedelta(days=29), today)

    if preset == "last_90_days":
        return PeriodRange(today - timedelta(days=89), today)

    if preset == "this_year":
        return PeriodRange(today.replace(month=1, day=1), today)

    if preset in ("all_time", "custom"):
        return None

    raise ValidationError("period", f"unknown period '{preset}'")


def clamp_range(period_range: PeriodRange, counting_start_date: Optional[date]) -> Optional[PeriodRange]:
    """
    Clamp ``period_range`` so it never starts before the league's counting start date.

    Returns None when the whole range ends before the counting start date.
    """
    if counting_start_date is None:
        return period_range

    if period_range.end < counting_start_date:
        return None

    if period_range.start < counting_start_date:
        return PeriodRange(counting_start_date, period_range.end)

    return period_range


def resolve_period(
    preset: str,
    today: date,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    counting_start_date: Optional[date] = None,
) -> ResolvedPeriod:
    """
    Resolve a period keyword (or custom bounds) into a concrete, clamped range.

    Args:
        preset: Period keyword, see ``PERIOD_PRESETS``
        today: Reference date for relative presets
        start_date: Custom range start (required when preset is ``custom``)
        end_date: Custom range end (required when preset is ``custom``)
        counting_start_date: Earliest date the league counts, if configured

    Returns:
        ResolvedPeriod. Unbounded for ``all_time`` without a counting start
        date, empty when the whole range falls before the counting start date.

    Raises:
        ValidationError: Unknown preset, missing custom bounds or start after end
    """
    if preset not in PERIOD_PRESETS:
        raise ValidationError("period", f"unknown period '{preset}'")

    if preset == "custom":
        if start_date is None or end_date is None:
            raise ValidationError("period", "custom periods require both start and end dates")
        if start_date > end_date:
            raise ValidationError("period", "start date must not be after end date")
        period_range = PeriodRange(start_date, end_date)
    elif preset == "all_time":
        if counting_start_date is None:
            return ResolvedPeriod(preset=preset, range=None)
        period_range = PeriodRange(counting_start_date, today)
    else:
        period_range = preset_to_date_range(preset, today)

    clamped = clamp_range(period_range, counting_start_date)
    return ResolvedPeriod(preset=preset, range=clamped, is_empty=clamped is None)


def previous_period(preset: str) -> Optional[str]:
    """
    Get the preset to compare against, e.g. this_week -> last_week.

    Rolling windows map to themselves; presets without a natural predecessor return None.
    """
    return _PREVIOUS_PERIODS.get(preset)


def period_label(preset: str) -> str:
    """Get human-readable label for a preset."""
    return PERIOD_LABELS.get(preset, preset)


def days_in_range(period_range: Optional[PeriodRange]) -> int:
    """Inclusive number of calendar days in ``period_range`` (0 when absent)."""
    return period_range.days if period_range else 0
