"""Tests for the SM-2 style review scheduler."""

import math
from datetime import datetime, timedelta

import pytest

from cardwise.application.scheduling.scheduler import (
    compute_next_interval,
    compute_updated_difficulty,
    count_due,
    interval_ease,
    is_due,
    promote,
    review_card,
)
from cardwise.domain.scheduling.models import PlainCard, ScheduledCard


def scheduled(card_id="c1", difficulty=2.5, reviews=0, next_review=None, interval=0, streak=0):
    return ScheduledCard(
        card_id=card_id,
        difficulty_level=difficulty,
        review_count=reviews,
        next_review=next_review,
        interval_days=interval,
        consecutive_correct=streak,
    )


# ---------- compute_next_interval ----------


class TestComputeNextInterval:
    @pytest.mark.parametrize("difficulty,previous", [(1.3, 0), (2.5, 40), (2.0, 365)])
    def test_miss_resets_to_one_day(self, difficulty, previous):
        assert compute_next_interval(difficulty, previous, 0) == 1

    def test_first_correct_is_one_day(self):
        assert compute_next_interval(2.5, 30, 1) == 1

    @pytest.mark.parametrize("difficulty,previous", [(1.3, 1), (2.5, 100), (1.9, 0)])
    def test_second_correct_graduates_to_six_days(self, difficulty, previous):
        assert compute_next_interval(difficulty, previous, 2) == 6

    def test_mature_interval_uses_derived_ease(self):
        # ease = 1.3 + (2.5 - 1) * 0.3 = 1.75
        assert compute_next_interval(2.5, 10, 3) == 18

    def test_mature_interval_at_lowest_difficulty(self):
        # ease = 1.3 + 0.3 * 0.3 = 1.39
        assert compute_next_interval(1.3, 100, 5) == 139

    def test_half_day_rounds_up(self):
        # 6 * 1.75 = 10.5
        assert compute_next_interval(2.5, 6, 3) == 11

    def test_difficulty_is_not_used_directly_as_ease(self):
        # Plain SM-2 would give round(10 * 2.5) = 25
        assert compute_next_interval(2.5, 10, 4) != 25

    def test_interval_ease(self):
        assert interval_ease(1.0) == pytest.approx(1.3)
        assert interval_ease(2.5) == pytest.approx(1.75)

    def test_infinite_interval_passes_through(self):
        assert compute_next_interval(2.5, math.inf, 3) == math.inf

    def test_nan_interval_passes_through(self):
        assert math.isnan(compute_next_interval(2.5, math.nan, 3))

    def test_non_finite_ignored_before_graduation(self):
        assert compute_next_interval(2.5, math.nan, 2) == 6


# ---------- compute_updated_difficulty ----------


class TestComputeUpdatedDifficulty:
    def test_perfect_recall_raises_difficulty(self):
        assert compute_updated_difficulty(2.0, 5) == pytest.approx(2.1)

    def test_performance_four_keeps_difficulty(self):
        assert compute_updated_difficulty(2.0, 4) == pytest.approx(2.0)

    def test_performance_three_lowers_difficulty(self):
        assert compute_updated_difficulty(2.0, 3) == pytest.approx(1.86)

    def test_blackout_clamps_to_floor(self):
        assert compute_updated_difficulty(2.0, 0) == pytest.approx(1.3)

    def test_out_of_range_input_clamps_to_ceiling(self):
        assert compute_updated_difficulty(3.0, 5) <= 2.5
        assert compute_updated_difficulty(3.0, 5) == pytest.approx(2.5)

    def test_monotonic_in_performance(self):
        assert compute_updated_difficulty(2.0, 5) > compute_updated_difficulty(2.0, 0)

    @pytest.mark.parametrize("old", [0.0, 1.3, 1.8, 2.5, 4.0])
    @pytest.mark.parametrize("performance", [0, 1, 2, 2.5, 3, 4, 5])
    def test_always_within_bounds(self, old, performance):
        assert 1.3 <= compute_updated_difficulty(old, performance) <= 2.5


# ---------- is_due / count_due ----------


class TestIsDue:
    def test_never_scheduled_is_due(self, now):
        assert is_due(None, now) is True
        assert is_due(None) is True

    def test_past_is_due(self, now):
        assert is_due(now - timedelta(minutes=1), now) is True

    def test_exact_moment_is_due(self, now):
        assert is_due(now, now) is True

    def test_future_is_not_due(self, now):
        assert is_due(now + timedelta(seconds=1), now) is False

    def test_naive_timestamp_is_utc(self, now):
        naive = datetime(2026, 3, 14, 15, 29)
        assert is_due(naive, now) is True
        assert is_due(naive + timedelta(minutes=2), now) is False


class TestCountDue:
    def test_empty(self, now):
        assert count_due([], now) == 0

    def test_plain_cards_always_due(self, now):
        cards = [PlainCard("a"), PlainCard("b"), PlainCard("c")]
        assert count_due(cards, now) == 3

    def test_mixed_cards(self, now):
        cards = [
            PlainCard("plain"),
            scheduled("never", next_review=None),
            scheduled("past", next_review=now - timedelta(days=2)),
            scheduled("future", next_review=now + timedelta(days=2)),
        ]
        assert count_due(cards, now) == 3


# ---------- review_card ----------


class TestReviewCard:
    def test_promote_plain_card(self):
        card = promote(PlainCard("p1"), initial_difficulty=2.0)
        assert card == ScheduledCard("p1", 2.0, 0, None)

    def test_promote_keeps_scheduled_card(self):
        card = scheduled()
        assert promote(card) is card

    def test_first_review_of_plain_card(self, now):
        result = review_card(PlainCard("p1"), 5, now=now)

        assert result.correct is True
        assert result.interval_days == 1
        assert result.card.review_count == 1
        assert result.card.consecutive_correct == 1
        assert result.card.difficulty_level == pytest.approx(2.5)
        assert result.card.next_review == now + timedelta(days=1)

    def test_second_correct_answer_graduates(self, now):
        result = review_card(scheduled(reviews=1, interval=1, streak=1), 4, now=now)

        assert result.interval_days == 6
        assert result.card.consecutive_correct == 2
        assert result.card.next_review == now + timedelta(days=6)

    def test_mature_review_grows_interval(self, now):
        result = review_card(scheduled(reviews=2, interval=6, streak=2), 5, now=now)

        assert result.interval_days == 11
        assert result.card.interval_days == 11
        assert result.card.review_count == 3

    def test_miss_resets_streak_and_lowers_difficulty(self, now):
        card = scheduled(reviews=5, interval=30, streak=4)
        result = review_card(card, 2, now=now)

        assert result.correct is False
        assert result.interval_days == 1
        assert result.card.consecutive_correct == 0
        assert result.card.difficulty_level == pytest.approx(2.18)

    def test_interval_uses_difficulty_before_update(self, now):
        # Perfect answer raises 1.3 -> 1.4, but the interval uses 1.3 (ease 1.39)
        card = scheduled(difficulty=1.3, interval=100, streak=2)
        result = review_card(card, 5, now=now)

        assert result.interval_days == 139
        assert result.card.difficulty_level == pytest.approx(1.4)
