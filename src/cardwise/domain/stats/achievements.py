"""
Achievement catalogue.

Each achievement tracks one metric of a StudySummary against a goal.
"""

from dataclasses import dataclass
from enum import Enum


class AchievementMetric(str, Enum):
    FIRST_STUDY = "first_study"
    CARDS_STUDIED = "cards_studied"
    STREAK = "streak"
    ACCURACY = "accuracy"
    SESSIONS = "sessions"


@dataclass(frozen=True)
class Achievement:
    id: str
    title: str
    description: str
    metric: AchievementMetric
    goal: int
    tier: str  # bronze, silver, gold


@dataclass(frozen=True)
class AchievementProgress:
    achievement: Achievement
    progress: float
    completed: bool
    newly_completed: bool


ACHIEVEMENTS: tuple[Achievement, ...] = (
    Achievement(
        "first_study", "First Steps", "Complete your first study session",
        AchievementMetric.FIRST_STUDY, 1, "bronze",
    ),
    Achievement(
        "cards_studied_bronze", "Card Novice", "Study 100 flashcards",
        AchievementMetric.CARDS_STUDIED, 100, "bronze",
    ),
    Achievement(
        "cards_studied_silver", "Card Expert", "Study 500 flashcards",
        AchievementMetric.CARDS_STUDIED, 500, "silver",
    ),
    Achievement(
        "cards_studied_gold", "Card Master", "Study 1000 flashcards",
        AchievementMetric.CARDS_STUDIED, 1000, "gold",
    ),
    Achievement(
        "streak_bronze", "Consistent Learner", "Maintain a 7-day study streak",
        AchievementMetric.STREAK, 7, "bronze",
    ),
    Achievement(
        "streak_silver", "Dedicated Scholar", "Maintain a 30-day study streak",
        AchievementMetric.STREAK, 30, "silver",
    ),
    Achievement(
        "streak_gold", "Learning Legend", "Maintain a 100-day study streak",
        AchievementMetric.STREAK, 100, "gold",
    ),
    Achievement(
        "accuracy_bronze", "Sharp Mind", "Achieve 80% accuracy",
        AchievementMetric.ACCURACY, 80, "bronze",
    ),
    Achievement(
        "accuracy_silver", "Memory Master", "Achieve 90% accuracy",
        AchievementMetric.ACCURACY, 90, "silver",
    ),
    Achievement(
        "accuracy_gold", "Perfect Scholar", "Achieve 100% accuracy",
        AchievementMetric.ACCURACY, 100, "gold",
    ),
    Achievement(
        "sessions_bronze", "Study Enthusiast", "Complete 10 study sessions",
        AchievementMetric.SESSIONS, 10, "bronze",
    ),
    Achievement(
        "sessions_silver", "Study Pro", "Complete 50 study sessions",
        AchievementMetric.SESSIONS, 50, "silver",
    ),
    Achievement(
        "sessions_gold", "Study Champion", "Complete 100 study sessions",
        AchievementMetric.SESSIONS, 100, "gold",
    ),
)
