"""Tests for week boundaries, vote counting and momentum percentages."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from habitcast.services.metrics import (
    WeekRange,
    consistency_pct,
    count_in_range,
    last_week_bounds,
    momentum_pct,
    round_half_up,
    this_week_bounds,
    trend_delta,
    week_start,
)

WEDNESDAY = date(2024, 5, 15)


class TestWeekBounds:
    """Monday-start weeks expressed as inclusive ISO date strings."""

    def test_wednesday_scenario(self):
        bounds = this_week_bounds(WEDNESDAY)
        assert bounds == WeekRange("2024-05-13", "2024-05-19")

    @pytest.mark.parametrize("offset", range(0, 21))
    def test_start_is_monday_and_end_is_sunday(self, offset):
        day = date(2024, 2, 20) + timedelta(days=offset)
        bounds = this_week_bounds(day)
        assert date.fromisoformat(bounds.start).weekday() == 0
        assert date.fromisoformat(bounds.end).weekday() == 6
        assert date.fromisoformat(bounds.start) <= day <= date.fromisoformat(bounds.end)

    def test_sunday_belongs_to_the_week_that_started_monday(self):
        assert this_week_bounds(date(2024, 5, 19)).start == "2024-05-13"

    @pytest.mark.parametrize("offset", range(0, 14))
    def test_last_week_is_shifted_back_seven_days(self, offset):
        day = date(2023, 12, 25) + timedelta(days=offset)
        this_week = this_week_bounds(day)
        last_week = last_week_bounds(day)
        assert date.fromisoformat(last_week.start) == date.fromisoformat(this_week.start) - timedelta(days=7)
        assert date.fromisoformat(last_week.end) == date.fromisoformat(this_week.end) - timedelta(days=7)

    def test_accepts_datetimes(self):
        assert this_week_bounds(datetime(2024, 5, 15, 23, 59)).start == "2024-05-13"
        assert week_start(datetime(2024, 5, 13, 0, 1)) == date(2024, 5, 13)


class TestCountInRange:
    """Each habit contributes at most one vote, from its last completion."""

    def test_monday_completion_counts(self):
        habits = [{"last_completed_date": date(2024, 5, 13)}]
        assert count_in_range(habits, this_week_bounds(WEDNESDAY)) == 1

    def test_null_dates_never_count(self):
        habits = [{"last_completed_date": None}, {"last_completed_date": ""}]
        assert count_in_range(habits, this_week_bounds(WEDNESDAY)) == 0

    def test_range_is_inclusive_on_both_ends(self):
        week = WeekRange("2024-05-13", "2024-05-19")
        habits = [
            {"last_completed_date": "2024-05-12"},
            {"last_completed_date": "2024-05-13"},
            {"last_completed_date": "2024-05-19"},
            {"last_completed_date": "2024-05-20"},
        ]
        assert count_in_range(habits, week) == 2

    def test_adding_a_habit_inside_the_range_never_decreases_the_count(self):
        week = this_week_bounds(WEDNESDAY)
        habits = [{"last_completed_date": date(2024, 5, 1)}, {"last_completed_date": None}]
        before = count_in_range(habits, week)
        habits.append({"last_completed_date": date(2024, 5, 16)})
        assert count_in_range(habits, week) == before + 1

    def test_reads_model_attributes(self, habit_factory):
        habit = habit_factory(last_completed_date=date(2024, 5, 14))
        assert count_in_range([habit], this_week_bounds(WEDNESDAY)) == 1


class TestTrendDelta:
    def test_none_without_any_completion(self):
        assert trend_delta([{"last_completed_date": None}], WEDNESDAY) is None
        assert trend_delta([], WEDNESDAY) is None

    def test_zero_is_distinct_from_no_data(self):
        habits = [{"last_completed_date": date(2024, 4, 1)}]
        assert trend_delta(habits, WEDNESDAY) == 0

    def test_this_week_minus_last_week(self):
        habits = [
            {"last_completed_date": date(2024, 5, 14)},
            {"last_completed_date": date(2024, 5, 15)},
            {"last_completed_date": date(2024, 5, 8)},
        ]
        assert trend_delta(habits, WEDNESDAY) == 1


class TestPercentages:
    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(33.333) == 33
        assert round_half_up(66.5) == 67

    def test_momentum(self):
        assert momentum_pct(0, 0) == 0
        assert momentum_pct(1, 1) == 14
        assert momentum_pct(3, 3) == 14
        assert momentum_pct(30, 2) == 100

    def test_consistency(self):
        assert consistency_pct(0, 0) == 0
        assert consistency_pct(1, 3) == 33
        assert consistency_pct(2, 3) == 67
        assert consistency_pct(3, 3) == 100
