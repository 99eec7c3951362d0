"""Tests for the weekly review state machine and its persistence."""

from __future__ import annotations

from datetime import date

import pytest

from habitcast.errors import FormValidationError, NotFoundError, ReviewStepError
from habitcast.models.habit import Habit
from habitcast.services import weekly_review
from habitcast.services.weekly_review import ReviewStep, WeeklyReview, advice_for

WEEK = date(2024, 5, 13)


def _review(*habit_ids, step=ReviewStep.RATE):
    habits = [Habit(id=i, user_id="user-1", name=f"habit {i}") for i in habit_ids]
    return WeeklyReview(week_start=WEEK, habits=habits, step=step)


class TestGating:
    def test_weekly_review_gating_scenario(self):
        review = _review(1, 2)
        with pytest.raises(ReviewStepError):
            review.advance()

        review.rate(1, "=")
        assert not review.can_advance()
        review.rate(2, "-")
        assert review.advance() is ReviewStep.FRICTION

        with pytest.raises(ReviewStepError):
            review.advance()
        review.set_friction(2, "Too busy")
        assert review.advance() is ReviewStep.SUGGEST
        assert review.advance() is ReviewStep.APPLY

    def test_no_habits_cannot_advance(self):
        review = _review()
        assert not review.can_advance()
        with pytest.raises(ReviewStepError):
            review.advance()

    def test_friction_step_passes_with_no_negatives(self):
        review = _review(1)
        review.rate(1, "=")
        review.advance()
        assert review.advance() is ReviewStep.SUGGEST

    def test_apply_is_terminal(self):
        review = _review(1, step=ReviewStep.APPLY)
        with pytest.raises(ReviewStepError):
            review.advance()

    def test_later_step_cannot_skip_rating(self):
        review = _review(1, 2, step=ReviewStep.FRICTION)
        review.rate(1, "=")
        assert review.blocking_step() is ReviewStep.RATE
        assert not review.can_advance()
        with pytest.raises(ReviewStepError):
            review.advance()
        assert review.step is ReviewStep.FRICTION

    def test_suggest_cannot_skip_friction(self):
        review = _review(1, step=ReviewStep.SUGGEST)
        review.rate(1, "-")
        assert review.blocking_step() is ReviewStep.FRICTION
        with pytest.raises(ReviewStepError):
            review.advance()

    def test_back_is_always_allowed(self):
        review = _review(1, step=ReviewStep.SUGGEST)
        assert review.back() is ReviewStep.FRICTION
        assert review.back() is ReviewStep.RATE
        assert review.back() is ReviewStep.RATE


class TestRatingsAndFriction:
    def test_rerating_clears_friction(self):
        review = _review(1)
        review.rate(1, "-")
        review.set_friction(1, "Phone")
        review.rate(1, "-")
        assert 1 not in review.frictions

    def test_friction_requires_negative_rating(self):
        review = _review(1)
        review.rate(1, "=")
        with pytest.raises(ReviewStepError):
            review.set_friction(1, "Forgot")

    def test_friction_must_be_from_the_closed_set(self):
        review = _review(1)
        review.rate(1, "-")
        with pytest.raises(FormValidationError):
            review.set_friction(1, "Rain")

    def test_invalid_rating(self):
        with pytest.raises(FormValidationError):
            _review(1).rate(1, "+")

    def test_unknown_habit(self):
        with pytest.raises(NotFoundError):
            _review(1).rate(5, "=")

    @pytest.mark.parametrize(
        "friction, advice",
        [
            ("Forgot", "Add cue"),
            ("Too tired", "Shrink habit"),
            ("Too busy", "Move time"),
            ("Phone", "Add cue"),
            ("Boring", "Add reward"),
            ("Hard", "Shrink habit"),
            (None, "Shrink habit"),
        ],
    )
    def test_advice_lookup(self, friction, advice):
        assert advice_for(friction) == advice


class TestPersistence:
    def test_rating_is_upserted_per_week(self, ctx, app_context, habit_factory):
        habit = habit_factory()
        weekly_review.rate_habit(ctx, habit.id, "-")
        weekly_review.tag_friction(ctx, habit.id, "Forgot")
        weekly_review.rate_habit(ctx, habit.id, "=")

        rows = app_context.review_repo.list_for_week(WEEK, user_id=ctx.user_id)
        assert len(rows) == 1
        assert (rows[0].rating, rows[0].friction) == ("=", None)

    def test_state_is_rebuilt_from_rows(self, ctx, habit_factory):
        first = habit_factory(name="Read")
        second = habit_factory(name="Walk", sort_order=1)
        weekly_review.rate_habit(ctx, first.id, "=")
        weekly_review.rate_habit(ctx, second.id, "-")
        weekly_review.tag_friction(ctx, second.id, "Hard")

        review = weekly_review.advance(ctx, "friction")

        assert review.step is ReviewStep.SUGGEST
        assert review.suggestions() == [
            {
                "habit_id": second.id,
                "habit_name": "Walk",
                "two_minute_version": None,
                "friction": "Hard",
                "advice": "Shrink habit",
                "applied": False,
            }
        ]

    def test_archived_habits_are_left_out(self, ctx, habit_factory):
        habit_factory(name="Old", archived_at=ctx.current_time(), is_active=False)
        review = weekly_review.load_review(ctx)
        assert review.habits == []

    def test_apply_yes_stamps_and_later_does_not(self, ctx, app_context, habit_factory):
        yes = habit_factory(name="Read")
        later = habit_factory(name="Walk", sort_order=1)
        for habit in (yes, later):
            weekly_review.rate_habit(ctx, habit.id, "-")
            weekly_review.tag_friction(ctx, habit.id, "Too tired")

        weekly_review.apply_fix(ctx, yes.id, True)
        review = weekly_review.apply_fix(ctx, later.id, False)

        rows = {r.habit_id: r for r in app_context.review_repo.list_for_week(WEEK, user_id=ctx.user_id)}
        assert rows[yes.id].advice_applied_at is not None
        assert rows[later.id].advice_applied_at is None
        assert review.applied == {yes.id: True}

    def test_apply_needs_negative_rating(self, ctx, habit_factory):
        habit = habit_factory()
        weekly_review.rate_habit(ctx, habit.id, "=")
        with pytest.raises(ReviewStepError):
            weekly_review.apply_fix(ctx, habit.id, True)

    def test_advance_from_claimed_step_checks_earlier_steps(self, ctx, habit_factory):
        first = habit_factory(name="Read")
        habit_factory(name="Walk", sort_order=1)
        weekly_review.rate_habit(ctx, first.id, "=")

        with pytest.raises(ReviewStepError):
            weekly_review.advance(ctx, "friction")

    def test_unrated_review_cannot_jump_to_apply(self, ctx, habit_factory):
        habit_factory()
        with pytest.raises(ReviewStepError):
            weekly_review.advance(ctx, "suggest")
        with pytest.raises(ReviewStepError):
            weekly_review.load_review(ctx, "apply")

    def test_apply_needs_friction_tag(self, ctx, app_context, habit_factory):
        habit = habit_factory()
        weekly_review.rate_habit(ctx, habit.id, "-")

        with pytest.raises(ReviewStepError):
            weekly_review.apply_fix(ctx, habit.id, True)

        rows = app_context.review_repo.list_for_week(WEEK, user_id=ctx.user_id)
        assert rows[0].advice_applied_at is None

    def test_back_stops_at_first_incomplete_step(self, ctx, habit_factory):
        habit_factory()
        review = weekly_review.back(ctx, "apply")
        assert review.step is ReviewStep.RATE

    def test_unknown_step_name(self, ctx):
        with pytest.raises(FormValidationError):
            weekly_review.load_review(ctx, "celebrate")
