from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from conftest import NOW, make_session

from cardwise.application.stats.service import StudyStatsService
from cardwise.domain.exceptions import UnknownCardError
from cardwise.domain.scheduling.models import PlainCard, ScheduledCard


@pytest.fixture
def mock_repo():
    repo = AsyncMock()
    repo.get_sessions.return_value = [
        make_session(NOW - timedelta(hours=2), minutes=15, cards=10, correct=9),
        make_session(NOW - timedelta(days=1), minutes=None, cards=6, correct=3),
    ]
    repo.get_cards.return_value = [
        PlainCard("new"),
        ScheduledCard("later", 2.5, 4, NOW + timedelta(days=10), interval_days=10),
        ScheduledCard("due", 2.2, 2, NOW - timedelta(days=1), interval_days=6,
                      consecutive_correct=2),
    ]
    return repo


@pytest.fixture
def service(mock_repo):
    return StudyStatsService(repo=mock_repo, clock=lambda: NOW)


@pytest.mark.asyncio
async def test_daily_stats(service):
    daily = await service.get_daily_stats()
    assert [(d.date, d.reviews, d.correct) for d in daily] == [
        ("2026-03-13", 6, 3),
        ("2026-03-14", 10, 9),
    ]


@pytest.mark.asyncio
async def test_streak_and_minutes(service):
    assert await service.get_streak() == 2
    assert await service.get_total_minutes() == pytest.approx(15)


@pytest.mark.asyncio
async def test_due_count(service, mock_repo):
    assert await service.get_due_count() == 2
    mock_repo.get_cards.assert_awaited_once()


@pytest.mark.asyncio
async def test_weekly_window_is_configurable(mock_repo):
    service = StudyStatsService(repo=mock_repo, clock=lambda: NOW, weekly_window_days=3)
    activity = await service.get_weekly_activity()
    assert [a.date for a in activity] == ["2026-03-12", "2026-03-13", "2026-03-14"]


@pytest.mark.asyncio
async def test_summary(service):
    summary = await service.get_summary(best_streak=9)
    assert summary.total_cards == 3
    assert summary.due_cards == 2
    assert summary.cards_studied == 16
    assert summary.streak == 2
    assert summary.best_streak == 9


@pytest.mark.asyncio
async def test_achievements(service):
    progress = {p.achievement.id: p for p in await service.get_achievements()}
    assert progress["first_study"].newly_completed is True
    assert progress["sessions_bronze"].completed is False


@pytest.mark.asyncio
async def test_empty_repository():
    repo = AsyncMock()
    repo.get_sessions.return_value = []
    repo.get_cards.return_value = []
    service = StudyStatsService(repo=repo, clock=lambda: NOW)

    assert await service.get_daily_stats() == []
    assert await service.get_streak() == 0
    assert await service.get_due_count() == 0
    summary = await service.get_summary()
    assert summary.total_sessions == 0
    assert summary.accuracy == 0


@pytest.mark.asyncio
async def test_review_persists_card(service, mock_repo):
    result = await service.review("due", 5)

    assert result.interval_days == 10  # round(6 * (1.3 + 1.2 * 0.3))
    assert result.card.next_review == NOW + timedelta(days=10)
    mock_repo.save_card.assert_awaited_once_with(result.card)


@pytest.mark.asyncio
async def test_review_promotes_plain_card(mock_repo):
    service = StudyStatsService(repo=mock_repo, clock=lambda: NOW, initial_difficulty=2.0)
    result = await service.review("new", 4)

    assert result.card.review_count == 1
    assert result.card.difficulty_level == pytest.approx(2.0)


@pytest.mark.asyncio
async def test_review_unknown_card(service, mock_repo):
    with pytest.raises(UnknownCardError):
        await service.review("missing", 5)
    mock_repo.save_card.assert_not_called()


@pytest.mark.asyncio
async def test_category_progress(mock_repo):
    mock_repo.get_sessions.return_value = [
        make_session(NOW - timedelta(days=1), minutes=15, cards=10, correct=7, category="bio"),
        make_session(NOW - timedelta(hours=1), minutes=None, cards=3, correct=3, category="bio"),
        make_session(NOW - timedelta(hours=2), cards=5, correct=5),
    ]
    service = StudyStatsService(repo=mock_repo, clock=lambda: NOW)

    progress = await service.get_category_progress()

    assert list(progress) == ["bio"]
    assert progress["bio"].sessions == 2
    assert progress["bio"].accuracy == pytest.approx(70)
    assert progress["bio"].last_studied == NOW - timedelta(days=1) + timedelta(minutes=15)
