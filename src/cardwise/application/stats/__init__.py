# Application Stats Package
from .metrics_calculator import (
    aggregate_daily_stats,
    compute_category_progress,
    compute_streak,
    compute_total_minutes,
    compute_weekly_activity,
    evaluate_achievements,
    summarize,
)
from .service import StudyStatsService

__all__ = [
    "aggregate_daily_stats",
    "compute_category_progress",
    "compute_streak",
    "compute_total_minutes",
    "compute_weekly_activity",
    "evaluate_achievements",
    "summarize",
    "StudyStatsService",
]
