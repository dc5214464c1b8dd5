# Domain Stats Package
from .achievements import ACHIEVEMENTS, Achievement, AchievementMetric, AchievementProgress
from .models import (
    CategoryProgress,
    DailyStats,
    StudySession,
    StudySummary,
    WeeklyActivity,
)
from .ports import StudyRepository

__all__ = [
    "ACHIEVEMENTS",
    "Achievement",
    "AchievementMetric",
    "AchievementProgress",
    "CategoryProgress",
    "DailyStats",
    "StudySession",
    "StudySummary",
    "WeeklyActivity",
    "StudyRepository",
]
