"""
Study Stats Service — Application layer orchestrator.

Coordinates fetching sessions and cards from the repository and running them
through the metrics calculator and the scheduler.
"""

import logging

from cardwise.application.scheduling.scheduler import count_due, review_card
from cardwise.domain.clock import Clock, utc_now
from cardwise.domain.constants import INITIAL_DIFFICULTY, WEEKLY_WINDOW_DAYS
from cardwise.domain.exceptions import UnknownCardError
from cardwise.domain.scheduling.models import ReviewResult
from cardwise.domain.stats.achievements import AchievementProgress
from cardwise.domain.stats.models import (
    CategoryProgress,
    DailyStats,
    StudySummary,
    WeeklyActivity,
)
from cardwise.domain.stats.ports import StudyRepository

from . import metrics_calculator as calc

logger = logging.getLogger(__name__)


class StudyStatsService:
    """
    Application service for study analytics and card reviews.

    Follows Dependency Inversion: depends on the StudyRepository abstraction,
    not concrete adapter implementations.
    """

    def __init__(
        self,
        repo: StudyRepository,
        clock: Clock = utc_now,
        weekly_window_days: int = WEEKLY_WINDOW_DAYS,
        initial_difficulty: float = INITIAL_DIFFICULTY,
    ):
        """
        Args:
            repo: The repository (port) for sessions and cards.
            clock: Time source for due checks and streaks.
            weekly_window_days: Number of days in the recent-activity window.
            initial_difficulty: Difficulty given to cards on their first review.
        """
        self._repo = repo
        self._clock = clock
        self._window = weekly_window_days
        self._initial_difficulty = initial_difficulty

    async def get_daily_stats(self) -> list[DailyStats]:
        sessions = await self._repo.get_sessions()
        return calc.aggregate_daily_stats(sessions)

    async def get_streak(self) -> int:
        sessions = await self._repo.get_sessions()
        return calc.compute_streak(sessions, self._clock())

    async def get_total_minutes(self) -> float:
        sessions = await self._repo.get_sessions()
        return calc.compute_total_minutes(sessions)

    async def get_due_count(self) -> int:
        cards = await self._repo.get_cards()
        return count_due(cards, self._clock())

    async def get_weekly_activity(self) -> list[WeeklyActivity]:
        sessions = await self._repo.get_sessions()
        return calc.compute_weekly_activity(sessions, self._clock(), self._window)

    async def get_category_progress(self) -> dict[str, CategoryProgress]:
        sessions = await self._repo.get_sessions()
        return calc.compute_category_progress(sessions)

    async def get_summary(self, best_streak: int = 0) -> StudySummary:
        """
        Build the dashboard summary from everything in the repository.

        Args:
            best_streak: Best streak previously recorded; the result keeps the max.
        """
        sessions = await self._repo.get_sessions()
        cards = await self._repo.get_cards()
        logger.debug(f"Summarizing {len(sessions)} sessions and {len(cards)} cards")
        return calc.summarize(sessions, cards, self._clock(), best_streak)

    async def get_achievements(
        self, completed: list[str] | None = None
    ) -> list[AchievementProgress]:
        summary = await self.get_summary()
        progress = calc.evaluate_achievements(summary, completed or [])
        for item in progress:
            if item.newly_completed:
                logger.info(f"Achievement unlocked: {item.achievement.title}")
        return progress

    async def review(self, card_id: str, performance: float) -> ReviewResult:
        """
        Record an answer for a card and persist its new schedule.

        Raises:
            UnknownCardError: If no card with this ID exists.
        """
        cards = await self._repo.get_cards()
        card = next((c for c in cards if c.card_id == card_id), None)
        if card is None:
            raise UnknownCardError(card_id)

        result = review_card(
            card,
            performance,
            now=self._clock(),
            initial_difficulty=self._initial_difficulty,
        )
        await self._repo.save_card(result.card)
        logger.debug(
            f"Reviewed {card_id}: performance={performance} "
            f"interval={result.interval_days}d difficulty={result.card.difficulty_level:.2f}"
        )
        return result
