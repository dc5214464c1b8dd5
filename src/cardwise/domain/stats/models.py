"""
Domain models for study analytics.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class StudySession:
    """
    A single study session.

    Attributes:
        started_at: When the session began.
        ended_at: When the session finished. None if ongoing or abandoned.
        cards_reviewed: Cards shown during the session.
        correct_answers: Cards answered correctly (<= cards_reviewed).
        incorrect_answers: Cards answered incorrectly.
        study_mode: classic, truefalse, multiple_choice, ...
    """

    started_at: datetime
    ended_at: datetime | None = None
    cards_reviewed: int = 0
    correct_answers: int = 0
    incorrect_answers: int = 0
    session_id: str | None = None
    category_id: str | None = None
    study_mode: str | None = None


@dataclass(frozen=True)
class DailyStats:
    """Reviews and correct answers summed over one UTC calendar day."""

    date: str  # YYYY-MM-DD
    reviews: int
    correct: int


@dataclass(frozen=True)
class WeeklyActivity:
    """One day of the recent-activity window."""

    date: str  # YYYY-MM-DD
    cards_studied: int
    accuracy: float  # Mean per-session accuracy, percent
    study_seconds: float


@dataclass
class StudySummary:
    """
    Dashboard-level aggregate over all sessions and cards.

    This is the object achievement progress is evaluated against.
    """

    total_cards: int
    due_cards: int
    total_sessions: int
    cards_studied: int
    accuracy: int  # Rounded percent
    streak: int
    best_streak: int
    total_study_minutes: float
    study_modes: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class CategoryProgress:
    """
    Study progress for one category.

    Accuracy and last-studied time describe the category's latest session.
    """

    category_id: str
    sessions: int
    cards_studied: int
    accuracy: float  # Percent
    last_studied: datetime | None
