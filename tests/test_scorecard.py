"""Tests for scorecard insights and reordering."""

from __future__ import annotations

from collections import defaultdict

import pytest

from habitcast.errors import FormValidationError, NotFoundError
from habitcast.models.scorecard import ScorecardEntry, TimeOfDay
from habitcast.services import scorecard as scorecard_service
from habitcast.services.scorecard import (
    INSIGHT_EVEN,
    INSIGHT_NEGATIVE,
    INSIGHT_POSITIVE,
    breakdown,
    focus_candidates,
    reorder_entries,
    summarize,
    take_action,
    worst_time,
)


def _entry(entry_id, rating, time="anytime", order=0, name=None):
    return ScorecardEntry(
        id=entry_id,
        user_id="user-1",
        habit_name=name or f"habit {entry_id}",
        rating=rating,
        time_of_day=time,
        sort_order=order,
    )


class TestSummary:
    def test_net_score_scenario(self):
        summary = summarize([_entry(1, "+"), _entry(2, "+"), _entry(3, "-")])
        assert summary.net == 1
        assert summary.net_label == "+1"
        assert summary.insight == INSIGHT_POSITIVE

    def test_negative_and_even(self):
        assert summarize([_entry(1, "-")]).insight == INSIGHT_NEGATIVE
        assert summarize([_entry(1, "+"), _entry(2, "-")]).insight == INSIGHT_EVEN
        assert summarize([_entry(1, "=")]).insight == INSIGHT_EVEN

    def test_empty(self):
        summary = summarize([])
        assert (summary.positive, summary.negative, summary.neutral, summary.net) == (0, 0, 0, 0)
        assert summary.insight is None


class TestBreakdown:
    def test_labels(self):
        entries = [
            _entry(1, "+", "morning"),
            _entry(2, "+", "morning"),
            _entry(3, "-", "morning"),
            _entry(4, "-", "afternoon"),
            _entry(5, "=", "afternoon"),
            _entry(6, "+", "evening"),
            _entry(7, "-", "evening"),
        ]
        rows = {row.time: row for row in breakdown(entries)}
        assert rows[TimeOfDay.MORNING].label == "67% positive"
        assert rows[TimeOfDay.AFTERNOON].label == "50% negative"
        assert rows[TimeOfDay.EVENING].label == "Neutral"
        assert rows[TimeOfDay.ANYTIME].label == "—"

    def test_neutral_majority_is_neutral(self):
        rows = breakdown([_entry(1, "+"), _entry(2, "="), _entry(3, "=")])
        assert rows[-1].label == "Neutral"

    def test_order_and_legacy_null_bucket(self):
        rows = breakdown([_entry(1, "-", time=None)])
        assert [row.time for row in rows] == list(scorecard_service.TIME_ORDER)
        assert rows[-1].negative == 1


class TestWorstTime:
    def test_none_without_negatives(self):
        assert worst_time(breakdown([_entry(1, "+", "morning")])) is None
        assert worst_time(breakdown([])) is None

    def test_highest_negative_share_wins(self):
        entries = [
            _entry(1, "-", "morning"),
            _entry(2, "+", "morning"),
            _entry(3, "-", "evening"),
        ]
        assert worst_time(breakdown(entries)) is TimeOfDay.EVENING

    def test_first_maximum_wins(self):
        entries = [_entry(1, "-", "afternoon"), _entry(2, "-", "evening")]
        assert worst_time(breakdown(entries)) is TimeOfDay.AFTERNOON


class TestTakeAction:
    def test_needs_three_entries_and_a_negative(self):
        assert take_action([_entry(1, "-"), _entry(2, "+")]) is None
        assert take_action([_entry(1, "+"), _entry(2, "+"), _entry(3, "=")]) is None

    def test_focus_is_first_negative_in_worst_bucket(self):
        entries = [
            _entry(1, "+", "morning", 0),
            _entry(2, "-", "morning", 1, name="Check phone first thing"),
            _entry(3, "-", "evening", 1, name="Late snack"),
            _entry(4, "-", "evening", 0, name="Doomscroll"),
        ]
        action = take_action(entries)
        assert action.time is TimeOfDay.EVENING
        assert action.negative_pct == 100
        assert action.focus_habit_name == "Doomscroll"
        assert action.message == 'Replace "Doomscroll" with a 5-minute walk.'

    def test_focus_candidates_are_positive(self):
        entries = [_entry(1, "+", order=1), _entry(2, "-"), _entry(3, "+", order=0)]
        assert [e.id for e in focus_candidates(entries)] == [3, 1]


def _assert_contiguous(entries):
    orders = defaultdict(list)
    for entry in entries:
        orders[entry.bucket].append(entry.sort_order)
    for values in orders.values():
        assert sorted(values) == list(range(len(values)))


class TestReorderPlanning:
    def _layout(self):
        return [
            _entry(1, "+", "morning", 0),
            _entry(2, "+", "morning", 1),
            _entry(3, "+", "morning", 2),
            _entry(4, "-", "evening", 0),
            _entry(5, "-", "evening", 1),
        ]

    def test_move_across_buckets_renumbers_both(self):
        plan = reorder_entries(self._layout(), 1, TimeOfDay.EVENING, 1)
        assert plan.layout[TimeOfDay.MORNING] == [2, 3]
        assert plan.layout[TimeOfDay.EVENING] == [4, 1, 5]
        assert sorted(plan.changes) == [
            (1, "evening", 1),
            (2, "morning", 0),
            (3, "morning", 1),
            (5, "evening", 2),
        ]

    def test_move_within_bucket(self):
        plan = reorder_entries(self._layout(), 3, TimeOfDay.MORNING, 0)
        assert plan.layout[TimeOfDay.MORNING] == [3, 1, 2]

    def test_position_past_end_appends(self):
        plan = reorder_entries(self._layout(), 4, TimeOfDay.ANYTIME, 40)
        assert plan.layout[TimeOfDay.ANYTIME] == [4]

    def test_gaps_in_untouched_buckets_are_closed(self):
        entries = self._layout() + [_entry(6, "=", "afternoon", 5), _entry(7, "=", "afternoon", 9)]
        plan = reorder_entries(entries, 1, TimeOfDay.MORNING, 0)
        assert (6, "afternoon", 0) in plan.changes
        assert (7, "afternoon", 1) in plan.changes

    def test_unknown_entry(self):
        with pytest.raises(NotFoundError):
            reorder_entries(self._layout(), 99, TimeOfDay.MORNING, 0)


class TestScorecardOperations:
    def test_create_appends_to_bucket(self, ctx):
        first = scorecard_service.create_entry(ctx, "Wake up", "=", "morning")
        second = scorecard_service.create_entry(ctx, "Coffee", "+", "morning")
        other = scorecard_service.create_entry(ctx, "Walk", "+", "evening")
        assert (first.sort_order, second.sort_order, other.sort_order) == (0, 1, 0)

    def test_create_validates_before_store(self, ctx):
        with pytest.raises(FormValidationError):
            scorecard_service.create_entry(ctx, "  ")
        with pytest.raises(FormValidationError):
            scorecard_service.create_entry(ctx, "Coffee", rating="?")
        with pytest.raises(FormValidationError):
            scorecard_service.create_entry(ctx, "Coffee", time_of_day="midnight")
        assert scorecard_service.list_entries(ctx) == []

    def test_identity_must_belong_to_user(self, ctx, identity_factory):
        foreign = identity_factory(user_id="user-2")
        with pytest.raises(FormValidationError):
            scorecard_service.create_entry(ctx, "Journal", "+", "morning", identity_id=foreign.id)
        with pytest.raises(FormValidationError):
            scorecard_service.create_entry(ctx, "Journal", "+", "morning", identity_id=9999)
        assert scorecard_service.list_entries(ctx) == []

    def test_update_rejects_foreign_identity(self, ctx, identity_factory, scorecard_factory):
        own = identity_factory()
        foreign = identity_factory(user_id="user-2")
        entry = scorecard_factory("Journal")

        with pytest.raises(FormValidationError):
            scorecard_service.update_entry(ctx, entry.id, {"identity_id": foreign.id})

        linked = scorecard_service.update_entry(ctx, entry.id, {"identity_id": own.id})
        assert linked.identity_id == own.id

    def test_reorder_persists_contiguous_orders(self, ctx, scorecard_factory):
        a = scorecard_factory("A", time_of_day="morning")
        scorecard_factory("B", time_of_day="morning")
        scorecard_factory("C", time_of_day="evening")

        scorecard_service.reorder(ctx, a.id, "evening", 0)

        entries = scorecard_service.list_entries(ctx)
        _assert_contiguous(entries)
        moved = next(e for e in entries if e.id == a.id)
        assert (moved.time_of_day, moved.sort_order) == ("evening", 0)

    def test_changing_bucket_on_update_moves_to_end(self, ctx, scorecard_factory):
        a = scorecard_factory("A", time_of_day="morning")
        scorecard_factory("B", time_of_day="morning")
        scorecard_factory("C", time_of_day="evening")

        updated = scorecard_service.update_entry(ctx, a.id, {"time_of_day": "evening", "rating": "-"})

        assert (updated.time_of_day, updated.sort_order, updated.rating) == ("evening", 1, "-")
        _assert_contiguous(scorecard_service.list_entries(ctx))

    def test_delete_closes_gap(self, ctx, scorecard_factory):
        a = scorecard_factory("A", time_of_day="morning")
        scorecard_factory("B", time_of_day="morning")
        scorecard_service.delete_entry(ctx, a.id)
        remaining = scorecard_service.list_entries(ctx)
        assert [(e.habit_name, e.sort_order) for e in remaining] == [("B", 0)]

    def test_view(self, ctx, scorecard_factory):
        scorecard_factory("Journal", rating="+", time_of_day="morning")
        scorecard_factory("Phone", rating="-", time_of_day="morning")
        scorecard_factory("Walk", rating="+", time_of_day="evening")
        view = scorecard_service.scorecard_view(ctx)
        assert view["summary"]["net"] == 1
        assert view["worst_time"] == "morning"
        assert view["take_action"]["focus_habit_name"] == "Phone"
        assert [e["habit_name"] for e in view["groups"]["morning"]] == ["Journal", "Phone"]
