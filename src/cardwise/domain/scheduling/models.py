"""
Domain models for spaced-repetition scheduling.

These are pure data structures with no I/O or external dependencies.
A card either carries scheduling state (ScheduledCard) or it does not
(PlainCard); consumers dispatch on the variant.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ScheduledCard:
    """
    A flashcard carrying spaced-repetition state.

    Attributes:
        card_id: Stable identifier of the card.
        difficulty_level: Ease factor in [1.3, 2.5]. Higher means easier.
        review_count: Number of times the card has been reviewed.
        next_review: When the card is next due. None means never scheduled.
        interval_days: Interval used for the most recent scheduling.
        consecutive_correct: Correct answers in a row, reset on a miss.
    """

    card_id: str
    difficulty_level: float
    review_count: int
    next_review: datetime | None
    interval_days: int = 0
    consecutive_correct: int = 0


@dataclass(frozen=True)
class PlainCard:
    """A flashcard that has never been placed on a review schedule."""

    card_id: str


Card = ScheduledCard | PlainCard


@dataclass(frozen=True)
class ReviewResult:
    """Outcome of answering a single card."""

    card: ScheduledCard
    interval_days: int
    correct: bool
