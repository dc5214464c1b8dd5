from datetime import datetime, timedelta, timezone

import pytest

from cardwise.domain.stats.models import StudySession

# Fixed reference time for everything that depends on "now"
NOW = datetime(2026, 3, 14, 15, 30, tzinfo=timezone.utc)


def make_session(
    started_at: datetime,
    minutes: float | None = 10,
    cards: int = 10,
    correct: int = 8,
    incorrect: int | None = None,
    mode: str | None = None,
    category: str | None = None,
) -> StudySession:
    """Build a session that lasted `minutes` (None leaves it open)."""
    return StudySession(
        started_at=started_at,
        ended_at=started_at + timedelta(minutes=minutes) if minutes is not None else None,
        cards_reviewed=cards,
        correct_answers=correct,
        incorrect_answers=cards - correct if incorrect is None else incorrect,
        study_mode=mode,
        category_id=category,
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture(autouse=True)
def mock_home(tmp_path, monkeypatch):
    """Points HOME at a temp dir and clears CARDWISE_* so user config never leaks in."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for key in ("CARDWISE_DATA_FILE", "CARDWISE_BACKEND", "CARDWISE_VERBOSE",
                "CARDWISE_INITIAL_DIFFICULTY", "CARDWISE_WEEKLY_WINDOW_DAYS"):
        monkeypatch.delenv(key, raising=False)
    return home
