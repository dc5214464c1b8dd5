"""
File Study Repository — Infrastructure adapter for a local data file.

Implements StudyRepository over a single YAML or JSON document of the form:

    cards:
      - id: c1
        difficulty_level: 2.5
        review_count: 3
        next_review: 2026-01-01T09:00:00Z
      - id: c2            # never scheduled
    sessions:
      - started_at: 2026-01-01T08:00:00Z
        ended_at: 2026-01-01T08:20:00Z
        cards_reviewed: 12
        correct_answers: 10
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Literal

import yaml

from cardwise.domain.clock import to_utc
from cardwise.domain.constants import INITIAL_DIFFICULTY
from cardwise.domain.exceptions import StudyDataError
from cardwise.domain.scheduling.models import Card, PlainCard, ScheduledCard
from cardwise.domain.stats.models import StudySession
from cardwise.domain.stats.ports import StudyRepository

logger = logging.getLogger(__name__)

# A stored card is scheduled only when it carries all of these
SCHEDULING_KEYS = ("next_review", "review_count", "difficulty_level")

FileFormat = Literal["yaml", "json"]


def detect_format(path: Path) -> FileFormat:
    return "json" if path.suffix.lower() == ".json" else "yaml"


def parse_timestamp(value: Any) -> datetime | None:
    """Accept datetimes (as YAML loads them) or ISO-8601 strings."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_utc(value)
    if isinstance(value, str):
        return to_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    raise ValueError(f"Not a timestamp: {value!r}")


def format_timestamp(value: datetime | None) -> str | None:
    if value is None:
        return None
    return to_utc(value).isoformat().replace("+00:00", "Z")


def _or_default(value: Any, default: Any) -> Any:
    return default if value is None else value


def card_from_dict(raw: dict[str, Any]) -> Card:
    """Null scheduling values fall back to a fresh schedule; the card is still scheduled."""
    card_id = str(raw["id"])
    if not all(key in raw for key in SCHEDULING_KEYS):
        return PlainCard(card_id=card_id)
    return ScheduledCard(
        card_id=card_id,
        difficulty_level=float(_or_default(raw["difficulty_level"], INITIAL_DIFFICULTY)),
        review_count=int(_or_default(raw["review_count"], 0)),
        next_review=parse_timestamp(raw["next_review"]),
        interval_days=int(raw.get("interval_days") or 0),
        consecutive_correct=int(raw.get("consecutive_correct") or 0),
    )


def card_to_dict(card: Card) -> dict[str, Any]:
    if isinstance(card, PlainCard):
        return {"id": card.card_id}
    return {
        "id": card.card_id,
        "difficulty_level": round(card.difficulty_level, 4),
        "review_count": card.review_count,
        "next_review": format_timestamp(card.next_review),
        "interval_days": card.interval_days,
        "consecutive_correct": card.consecutive_correct,
    }


def session_from_dict(raw: dict[str, Any]) -> StudySession:
    started_at = parse_timestamp(raw["started_at"])
    if started_at is None:
        raise ValueError("started_at is required")
    return StudySession(
        started_at=started_at,
        ended_at=parse_timestamp(raw.get("ended_at")),
        cards_reviewed=int(raw.get("cards_reviewed") or 0),
        correct_answers=int(raw.get("correct_answers") or 0),
        incorrect_answers=int(raw.get("incorrect_answers") or 0),
        session_id=raw.get("id"),
        category_id=raw.get("category_id"),
        study_mode=raw.get("study_mode"),
    )


class FileStudyRepository(StudyRepository):
    """
    Reads and writes study data in a local YAML or JSON file.

    A missing file is treated as empty. Malformed records are logged and
    skipped; a file that is not a mapping raises StudyDataError.
    """

    def __init__(self, path: Path, file_format: FileFormat | None = None):
        self.path = path
        self.file_format = file_format or detect_format(path)

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            logger.debug(f"Data file {self.path} does not exist; treating as empty")
            return {}

        text = self.path.read_text(encoding="utf-8")
        try:
            if self.file_format == "json":
                data = json.loads(text) if text.strip() else {}
            else:
                data = yaml.safe_load(text) or {}
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise StudyDataError(f"Could not parse {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise StudyDataError(f"{self.path} must contain a mapping at the top level")
        return data

    def _dump(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if self.file_format == "json":
            text = json.dumps(data, indent=2) + "\n"
        else:
            text = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
        self.path.write_text(text, encoding="utf-8")

    @staticmethod
    def _records(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
        records = data.get(key) or []
        if not isinstance(records, list):
            raise StudyDataError(f"'{key}' must be a list")
        return records

    async def get_sessions(self) -> list[StudySession]:
        sessions: list[StudySession] = []
        for index, raw in enumerate(self._records(self._load(), "sessions")):
            try:
                sessions.append(session_from_dict(raw))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed session #{index} in {self.path}: {e}")
        return sessions

    async def get_cards(self) -> list[Card]:
        cards: list[Card] = []
        for index, raw in enumerate(self._records(self._load(), "cards")):
            try:
                cards.append(card_from_dict(raw))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed card #{index} in {self.path}: {e}")
        return cards

    async def save_card(self, card: Card) -> None:
        data = self._load()
        records = self._records(data, "cards")

        # Preserve any extra fields (term, definition, ...) stored with the card
        for raw in records:
            if isinstance(raw, dict) and str(raw.get("id")) == card.card_id:
                raw.update(card_to_dict(card))
                break
        else:
            records.append(card_to_dict(card))

        data["cards"] = records
        self._dump(data)
        logger.debug(f"Saved card {card.card_id} to {self.path}")
