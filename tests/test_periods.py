"""
Tests for period preset resolution and counting-start-date clamping.
"""

from datetime import date

import pytest

from stepleague.data_models.leaderboard import PeriodRange
from stepleague.utils.leaderboard_exceptions import ValidationError
from stepleague.utils.periods import (
    clamp_range, days_in_range, period_label, preset_to_date_range, previous_period, resolve_period
)

# Thursday
TODAY = date(2026, 1, 15)


class TestPresetRanges:
    def test_this_week_starts_monday_and_ends_today(self):
        assert preset_to_date_range("this_week", TODAY) == PeriodRange(date(2026, 1, 12), TODAY)

    def test_this_week_on_sunday(self):
        sunday = date(2026, 1, 18)
        assert preset_to_date_range("this_week", sunday) == PeriodRange(date(2026, 1, 12), sunday)

    def test_last_week_is_previous_monday_to_sunday(self):
        assert preset_to_date_range("last_week", TODAY) == PeriodRange(date(2026, 1, 5), date(2026, 1, 11))

    def test_last_month_crosses_year_boundary(self):
        assert preset_to_date_range("last_month", TODAY) == PeriodRange(date(2025, 12, 1), date(2025, 12, 31))

    def test_rolling_windows_include_today(self):
        assert preset_to_date_range("last_7_days", TODAY).days == 7
        assert preset_to_date_range("last_30_days", TODAY).days == 30
        assert preset_to_date_range("last_90_days", TODAY).days == 90

    def test_single_day_presets(self):
        assert preset_to_date_range("today", TODAY) == PeriodRange(TODAY, TODAY)
        assert preset_to_date_range("yesterday", TODAY) == PeriodRange(date(2026, 1, 14), date(2026, 1, 14))

    def test_this_year_and_month(self):
        assert preset_to_date_range("this_year", TODAY) == PeriodRange(date(2026, 1, 1), TODAY)
        assert preset_to_date_range("this_month", TODAY) == PeriodRange(date(2026, 1, 1), TODAY)

    def test_all_time_and_custom_have_no_preset_range(self):
        assert preset_to_date_range("all_time", TODAY) is None
        assert preset_to_date_range("custom", TODAY) is None

    def test_unknown_preset_is_rejected(self):
        with pytest.raises(ValidationError):
            preset_to_date_range("fortnight", TODAY)


class TestClamping:
    def test_range_before_counting_start_is_dropped(self):
        assert clamp_range(PeriodRange(date(2026, 1, 1), date(2026, 1, 5)), date(2026, 1, 10)) is None

    def test_start_is_raised_to_counting_start(self):
        clamped = clamp_range(PeriodRange(date(2026, 1, 1), date(2026, 1, 12)), date(2026, 1, 10))
        assert clamped == PeriodRange(date(2026, 1, 10), date(2026, 1, 12))

    def test_range_after_counting_start_is_unchanged(self):
        period_range = PeriodRange(date(2026, 1, 11), date(2026, 1, 12))
        assert clamp_range(period_range, date(2026, 1, 10)) == period_range

    def test_no_counting_start(self):
        period_range = PeriodRange(date(2026, 1, 1), date(2026, 1, 2))
        assert clamp_range(period_range, None) == period_range

    def test_range_ending_on_counting_start_keeps_one_day(self):
        clamped = clamp_range(PeriodRange(date(2026, 1, 1), date(2026, 1, 10)), date(2026, 1, 10))
        assert clamped == PeriodRange(date(2026, 1, 10), date(2026, 1, 10))


class TestResolvePeriod:
    def test_all_time_with_counting_start(self):
        resolved = resolve_period("all_time", TODAY, counting_start_date=date(2026, 1, 10))
        assert resolved.range == PeriodRange(date(2026, 1, 10), TODAY)
        assert not resolved.is_empty

    def test_all_time_without_counting_start_is_unbounded(self):
        resolved = resolve_period("all_time", TODAY)
        assert resolved.range is None
        assert resolved.is_unbounded
        assert resolved.days == 0

    def test_all_time_with_future_counting_start_is_empty(self):
        resolved = resolve_period("all_time", TODAY, counting_start_date=date(2026, 2, 1))
        assert resolved.is_empty
        assert not resolved.is_unbounded

    def test_period_before_counting_start_is_empty_not_an_error(self):
        resolved = resolve_period("last_month", TODAY, counting_start_date=date(2026, 1, 10))
        assert resolved.is_empty
        assert resolved.range is None

    def test_custom_range_is_clamped(self):
        resolved = resolve_period(
            "custom", TODAY, date(2026, 1, 1), date(2026, 1, 12), counting_start_date=date(2026, 1, 10)
        )
        assert resolved.range == PeriodRange(date(2026, 1, 10), date(2026, 1, 12))

    def test_custom_requires_both_bounds(self):
        with pytest.raises(ValidationError):
            resolve_period("custom", TODAY, start_date=date(2026, 1, 1))

    def test_custom_start_after_end(self):
        with pytest.raises(ValidationError):
            resolve_period("custom", TODAY, date(2026, 1, 5), date(2026, 1, 1))

    def test_unknown_keyword(self):
        with pytest.raises(ValidationError):
            resolve_period("next_week", TODAY)


class TestHelpers:
    def test_previous_period(self):
        assert previous_period("this_week") == "last_week"
        assert previous_period("today") == "yesterday"
        assert previous_period("last_30_days") == "last_30_days"
        assert previous_period("all_time") is None

    def test_period_label(self):
        assert period_label("last_90_days") == "Last 90 Days"
        assert period_label("something") == "something"

    def test_days_in_range(self):
        assert days_in_range(PeriodRange(date(2026, 1, 1), date(2026, 1, 2))) == 2
        assert days_in_range(None) == 0
