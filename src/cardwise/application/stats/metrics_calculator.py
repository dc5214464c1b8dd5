"""
Metrics calculator for deriving study insights from raw sessions.

This is a pure computation module with no I/O. Calendar days are UTC days.
"""

from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta

from cardwise.application.scheduling.scheduler import count_due, round_half_up
from cardwise.domain.clock import to_utc, utc_date, utc_now
from cardwise.domain.constants import WEEKLY_WINDOW_DAYS
from cardwise.domain.scheduling.models import Card
from cardwise.domain.stats.achievements import (
    ACHIEVEMENTS,
    AchievementMetric,
    AchievementProgress,
)
from cardwise.domain.stats.models import (
    CategoryProgress,
    DailyStats,
    StudySession,
    StudySummary,
    WeeklyActivity,
)


def aggregate_daily_stats(sessions: Iterable[StudySession]) -> list[DailyStats]:
    """
    Sum reviews and correct answers per calendar day of session start.

    Returns one entry per distinct day, oldest first.
    """
    totals: dict[str, list[int]] = {}
    for session in sessions:
        day = utc_date(session.started_at).isoformat()
        bucket = totals.setdefault(day, [0, 0])
        bucket[0] += session.cards_reviewed
        bucket[1] += session.correct_answers

    return [
        DailyStats(date=day, reviews=reviews, correct=correct)
        for day, (reviews, correct) in sorted(totals.items())
    ]


def compute_streak(sessions: Iterable[StudySession], now: datetime | None = None) -> int:
    """
    Consecutive days, counting back from today, with at least one session.

    A run that ended yesterday does not count: without a session today the
    streak is 0.
    """
    study_days = {utc_date(s.started_at) for s in sessions}
    if not study_days:
        return 0

    day = utc_date(now if now is not None else utc_now())
    streak = 0
    while day in study_days:
        streak += 1
        day -= timedelta(days=1)
    return streak


def _duration_seconds(session: StudySession) -> float | None:
    if session.ended_at is None:
        return None
    return (to_utc(session.ended_at) - to_utc(session.started_at)).total_seconds()


def compute_total_minutes(sessions: Iterable[StudySession]) -> float:
    """Total study time in minutes. Sessions without an end time are skipped."""
    total = 0.0
    for session in sessions:
        seconds = _duration_seconds(session)
        if seconds is not None:
            total += seconds / 60
    return total


def _session_accuracy(session: StudySession) -> float:
    if session.cards_reviewed <= 0:
        return 0.0
    return session.correct_answers / session.cards_reviewed * 100


def compute_weekly_activity(
    sessions: Sequence[StudySession],
    now: datetime | None = None,
    days: int = WEEKLY_WINDOW_DAYS,
) -> list[WeeklyActivity]:
    """
    Per-day activity for the `days` days ending today, oldest first.

    Days without sessions are included with zero values.
    """
    today = utc_date(now if now is not None else utc_now())
    by_day: dict[str, list[StudySession]] = {}
    for session in sessions:
        by_day.setdefault(utc_date(session.started_at).isoformat(), []).append(session)

    activity = []
    for offset in range(days - 1, -1, -1):
        day = (today - timedelta(days=offset)).isoformat()
        todays = by_day.get(day, [])
        accuracy = (
            sum(_session_accuracy(s) for s in todays) / len(todays) if todays else 0.0
        )
        study_seconds = sum(_duration_seconds(s) or 0.0 for s in todays)
        activity.append(
            WeeklyActivity(
                date=day,
                cards_studied=sum(s.cards_reviewed for s in todays),
                accuracy=accuracy,
                study_seconds=study_seconds,
            )
        )
    return activity


def compute_accuracy(sessions: Iterable[StudySession]) -> float:
    """Percentage of correct answers over all answered cards."""
    correct = 0
    answered = 0
    for session in sessions:
        correct += session.correct_answers
        answered += session.correct_answers + session.incorrect_answers
    if answered == 0:
        return 0.0
    return correct / answered * 100


def count_study_modes(sessions: Iterable[StudySession]) -> dict[str, int]:
    return dict(Counter(s.study_mode for s in sessions if s.study_mode))


def _latest_session(sessions: Sequence[StudySession]) -> StudySession:
    finished = [s for s in sessions if s.ended_at is not None]
    if finished:
        return max(finished, key=lambda s: to_utc(s.ended_at))
    return max(sessions, key=lambda s: to_utc(s.started_at))


def compute_category_progress(
    sessions: Iterable[StudySession],
) -> dict[str, CategoryProgress]:
    """
    Progress per category, keyed by category ID.

    Accuracy and last-studied time come from the category's most recently
    finished session; open sessions are used only when none has finished.
    Sessions without a category are skipped.
    """
    by_category: dict[str, list[StudySession]] = {}
    for session in sessions:
        if session.category_id:
            by_category.setdefault(session.category_id, []).append(session)

    progress = {}
    for category_id, grouped in sorted(by_category.items()):
        latest = _latest_session(grouped)
        progress[category_id] = CategoryProgress(
            category_id=category_id,
            sessions=len(grouped),
            cards_studied=sum(s.cards_reviewed for s in grouped),
            accuracy=_session_accuracy(latest),
            last_studied=latest.ended_at,
        )
    return progress


def summarize(
    sessions: Sequence[StudySession],
    cards: Sequence[Card] = (),
    now: datetime | None = None,
    best_streak: int = 0,
) -> StudySummary:
    """
    Build the dashboard summary over every session and card.

    Args:
        sessions: All recorded sessions.
        cards: All flashcards, used for the total and due counts.
        now: Reference time; defaults to the wall clock.
        best_streak: Best streak previously recorded for the learner.
    """
    current = now if now is not None else utc_now()
    streak = compute_streak(sessions, current)
    return StudySummary(
        total_cards=len(cards),
        due_cards=count_due(cards, current),
        total_sessions=len(sessions),
        cards_studied=sum(s.cards_reviewed for s in sessions),
        accuracy=round_half_up(compute_accuracy(sessions)),
        streak=streak,
        best_streak=max(streak, best_streak),
        total_study_minutes=compute_total_minutes(sessions),
        study_modes=count_study_modes(sessions),
    )


def _metric_value(summary: StudySummary, metric: AchievementMetric) -> float:
    if metric is AchievementMetric.FIRST_STUDY:
        return 1 if summary.total_sessions > 0 else 0
    if metric is AchievementMetric.CARDS_STUDIED:
        return summary.cards_studied
    if metric is AchievementMetric.STREAK:
        return summary.streak
    if metric is AchievementMetric.ACCURACY:
        return summary.accuracy
    return summary.total_sessions


def evaluate_achievements(
    summary: StudySummary, completed: Iterable[str] = ()
) -> list[AchievementProgress]:
    """
    Progress towards every achievement in the catalogue.

    `completed` holds IDs already awarded; anything reached now that is not
    in it is flagged as newly completed.
    """
    already = set(completed)
    results = []
    for achievement in ACHIEVEMENTS:
        progress = _metric_value(summary, achievement.metric)
        reached = progress >= achievement.goal
        results.append(
            AchievementProgress(
                achievement=achievement,
                progress=progress,
                completed=reached or achievement.id in already,
                newly_completed=reached and achievement.id not in already,
            )
        )
    return results
