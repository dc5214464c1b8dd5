"""
SuperMemo-2 style review scheduler.

Maps review outcomes to an updated difficulty (ease factor) and the number
of days until the next review. This is a pure computation module with no I/O;
the only implicit input is "now", which callers may pass explicitly.
"""

import math
from collections.abc import Iterable
from datetime import datetime, timedelta

from cardwise.domain.clock import to_utc, utc_now
from cardwise.domain.constants import (
    EASE_BASE,
    EASE_SLOPE,
    FIRST_INTERVAL_DAYS,
    GRADUATION_INTERVAL_DAYS,
    INITIAL_DIFFICULTY,
    MAX_DIFFICULTY,
    MAX_PERFORMANCE,
    MIN_DIFFICULTY,
    PASSING_PERFORMANCE,
    RESET_INTERVAL_DAYS,
)
from cardwise.domain.scheduling.models import (
    Card,
    PlainCard,
    ReviewResult,
    ScheduledCard,
)


def round_half_up(value: float) -> int | float:
    """Round x.5 towards +infinity. Infinities and NaN are returned unchanged."""
    if not math.isfinite(value):
        return value
    return int(math.floor(value + 0.5))


def interval_ease(difficulty: float) -> float:
    """Growth multiplier for mature intervals, derived from the difficulty."""
    return EASE_BASE + (difficulty - 1) * EASE_SLOPE


def compute_next_interval(
    difficulty: float,
    previous_interval_days: float,
    consecutive_correct: int,
) -> int | float:
    """
    Number of days until the next review.

    Args:
        difficulty: Card ease factor, nominally in [1.3, 2.5].
        previous_interval_days: Interval that scheduled the latest review.
        consecutive_correct: Correct answers in a row, including this one.

    Returns:
        1 after a miss or the first correct answer, 6 after the second,
        then the previous interval grown by interval_ease(difficulty).
        A non-finite interval or difficulty yields a non-finite result.
    """
    if consecutive_correct == 0:
        return RESET_INTERVAL_DAYS
    if consecutive_correct == 1:
        return FIRST_INTERVAL_DAYS
    if consecutive_correct == 2:
        return GRADUATION_INTERVAL_DAYS
    return round_half_up(previous_interval_days * interval_ease(difficulty))


def compute_updated_difficulty(old_difficulty: float, performance: float) -> float:
    """
    SM-2 ease update for a 0-5 quality score, clamped to [1.3, 2.5].

    Good recall raises the difficulty (intervals grow faster); poor recall
    lowers it with a quadratic penalty.
    """
    miss = MAX_PERFORMANCE - performance
    new_difficulty = old_difficulty + (0.1 - miss * (0.08 + miss * 0.02))
    return min(max(MIN_DIFFICULTY, new_difficulty), MAX_DIFFICULTY)


def is_due(next_review: datetime | None, now: datetime | None = None) -> bool:
    """A card with no schedule is always due; otherwise due once now >= next_review."""
    if next_review is None:
        return True
    current = to_utc(now) if now is not None else utc_now()
    return current >= to_utc(next_review)


def count_due(cards: Iterable[Card], now: datetime | None = None) -> int:
    """Count cards that are due. Plain (never scheduled) cards always count."""
    current = now if now is not None else utc_now()
    due = 0
    for card in cards:
        if isinstance(card, PlainCard):
            due += 1
        elif is_due(card.next_review, current):
            due += 1
    return due


def promote(card: Card, initial_difficulty: float = INITIAL_DIFFICULTY) -> ScheduledCard:
    """Give a plain card an empty schedule so it can be reviewed."""
    if isinstance(card, ScheduledCard):
        return card
    return ScheduledCard(
        card_id=card.card_id,
        difficulty_level=initial_difficulty,
        review_count=0,
        next_review=None,
    )


def review_card(
    card: Card,
    performance: float,
    now: datetime | None = None,
    initial_difficulty: float = INITIAL_DIFFICULTY,
) -> ReviewResult:
    """
    Apply one answer to a card and schedule its next review.

    The interval is computed from the difficulty the card had before this
    answer; the returned card carries the updated difficulty.
    """
    scheduled = promote(card, initial_difficulty)
    current = to_utc(now) if now is not None else utc_now()

    correct = performance >= PASSING_PERFORMANCE
    streak = scheduled.consecutive_correct + 1 if correct else 0

    interval = compute_next_interval(
        scheduled.difficulty_level, scheduled.interval_days, streak
    )
    updated = ScheduledCard(
        card_id=scheduled.card_id,
        difficulty_level=compute_updated_difficulty(scheduled.difficulty_level, performance),
        review_count=scheduled.review_count + 1,
        next_review=current + timedelta(days=interval),
        interval_days=interval,
        consecutive_correct=streak,
    )
    return ReviewResult(card=updated, interval_days=interval, correct=correct)
