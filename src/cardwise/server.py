import logging
import sys
import time
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from cardwise.application.scheduling.scheduler import (
    compute_next_interval,
    compute_updated_difficulty,
    count_due,
    review_card,
)
from cardwise.application.stats import metrics_calculator as calc
from cardwise.consts import LOG_FORMAT, VERSION
from cardwise.domain.clock import utc_now
from cardwise.domain.constants import INITIAL_DIFFICULTY
from cardwise.domain.scheduling.models import Card, PlainCard, ScheduledCard
from cardwise.domain.stats.models import StudySession

SCHEDULING_FIELDS = {"next_review", "review_count", "difficulty_level"}

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
    stream=sys.stderr,
)
logger = logging.getLogger("cardwise.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"cardwise server v{VERSION} starting up...")
    yield
    # Shutdown
    logger.info("cardwise server shutting down...")


app = FastAPI(
    title="cardwise",
    description="Spaced-repetition scheduling and study statistics.",
    version=VERSION,
    lifespan=lifespan,
)


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


start_time = time.time()


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


# ---------------------------------------------------------------------------
# Request models (mirror the domain records)
# ---------------------------------------------------------------------------


class CardModel(BaseModel):
    id: str
    # A card is scheduled only when the request carries all three fields
    difficulty_level: float | None = None
    review_count: int | None = None
    next_review: datetime | None = None
    interval_days: int = 0
    consecutive_correct: int = 0

    def to_domain(self) -> Card:
        if not SCHEDULING_FIELDS <= self.model_fields_set:
            return PlainCard(card_id=self.id)
        return ScheduledCard(
            card_id=self.id,
            difficulty_level=(
                self.difficulty_level if self.difficulty_level is not None else INITIAL_DIFFICULTY
            ),
            review_count=self.review_count or 0,
            next_review=self.next_review,
            interval_days=self.interval_days,
            consecutive_correct=self.consecutive_correct,
        )


class SessionModel(BaseModel):
    started_at: datetime
    ended_at: datetime | None = None
    cards_reviewed: int = Field(default=0, ge=0)
    correct_answers: int = Field(default=0, ge=0)
    incorrect_answers: int = Field(default=0, ge=0)
    id: str | None = None
    category_id: str | None = None
    study_mode: str | None = None

    def to_domain(self) -> StudySession:
        return StudySession(
            started_at=self.started_at,
            ended_at=self.ended_at,
            cards_reviewed=self.cards_reviewed,
            correct_answers=self.correct_answers,
            incorrect_answers=self.incorrect_answers,
            session_id=self.id,
            category_id=self.category_id,
            study_mode=self.study_mode,
        )


class NextIntervalRequest(BaseModel):
    difficulty: float = Field(allow_inf_nan=False)
    previous_interval_days: float = Field(allow_inf_nan=False)
    consecutive_correct: int


class DifficultyRequest(BaseModel):
    old_difficulty: float
    performance: float


class ReviewRequest(BaseModel):
    card: CardModel
    performance: float = Field(ge=0, le=5)
    now: datetime | None = None


class CardsRequest(BaseModel):
    cards: list[CardModel]
    now: datetime | None = None


class SessionsRequest(BaseModel):
    sessions: list[SessionModel]
    cards: list[CardModel] = []
    now: datetime | None = None
    best_streak: int = 0
    completed_achievements: list[str] = []


# ---------------------------------------------------------------------------
# Scheduling
# ---------------------------------------------------------------------------


@app.post("/schedule/next-interval")
async def next_interval(req: NextIntervalRequest):
    days = compute_next_interval(
        req.difficulty, req.previous_interval_days, req.consecutive_correct
    )
    return {"interval_days": days}


@app.post("/schedule/difficulty")
async def updated_difficulty(req: DifficultyRequest):
    return {"difficulty": compute_updated_difficulty(req.old_difficulty, req.performance)}


@app.post("/schedule/review")
async def review(req: ReviewRequest):
    """
    Apply one answer to a card and return its new schedule.
    The caller is responsible for persisting the returned card.
    """
    try:
        result = review_card(req.card.to_domain(), req.performance, now=req.now)
    except Exception as e:
        logger.error(f"Review failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e

    card = result.card
    return {
        "card": {
            "id": card.card_id,
            "difficulty_level": card.difficulty_level,
            "review_count": card.review_count,
            "next_review": card.next_review,
            "interval_days": card.interval_days,
            "consecutive_correct": card.consecutive_correct,
        },
        "interval_days": result.interval_days,
        "correct": result.correct,
    }


@app.post("/cards/due-count")
async def due_count(req: CardsRequest):
    cards = [c.to_domain() for c in req.cards]
    return {"due": count_due(cards, req.now or utc_now())}


# ---------------------------------------------------------------------------
# Analytics
# ---------------------------------------------------------------------------


@app.post("/stats/daily")
async def daily_stats(req: SessionsRequest):
    sessions = [s.to_domain() for s in req.sessions]
    return [
        {"date": d.date, "reviews": d.reviews, "correct": d.correct}
        for d in calc.aggregate_daily_stats(sessions)
    ]


@app.post("/stats/summary")
async def stats_summary(req: SessionsRequest):
    """
    Dashboard summary, recent activity and achievement progress in one call.
    """
    try:
        sessions = [s.to_domain() for s in req.sessions]
        cards = [c.to_domain() for c in req.cards]
        now = req.now or utc_now()

        summary = calc.summarize(sessions, cards, now, req.best_streak)
        weekly = calc.compute_weekly_activity(sessions, now)
        categories = calc.compute_category_progress(sessions)
        achievements = calc.evaluate_achievements(summary, req.completed_achievements)
    except Exception as e:
        logger.error(f"Stats computation failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e)) from e

    return {
        "summary": {
            "total_cards": summary.total_cards,
            "due_cards": summary.due_cards,
            "total_sessions": summary.total_sessions,
            "cards_studied": summary.cards_studied,
            "accuracy": summary.accuracy,
            "streak": summary.streak,
            "best_streak": summary.best_streak,
            "total_study_minutes": summary.total_study_minutes,
            "study_modes": summary.study_modes,
        },
        "weekly_activity": [
            {
                "date": w.date,
                "cards_studied": w.cards_studied,
                "accuracy": w.accuracy,
                "study_seconds": w.study_seconds,
            }
            for w in weekly
        ],
        "category_progress": {
            category_id: {
                "sessions": c.sessions,
                "cards_studied": c.cards_studied,
                "accuracy": c.accuracy,
                "last_studied": c.last_studied,
            }
            for category_id, c in categories.items()
        },
        "achievements": [
            {
                "id": a.achievement.id,
                "title": a.achievement.title,
                "tier": a.achievement.tier,
                "goal": a.achievement.goal,
                "progress": a.progress,
                "completed": a.completed,
                "newly_completed": a.newly_completed,
            }
            for a in achievements
        ],
    }
