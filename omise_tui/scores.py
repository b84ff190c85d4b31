"""
Score storage for Omise

A tiny key-value store kept in ~/.omise/scores.json. Values are opaque to
the store; helpers below give them meaning:

- highScores_<mode>_<seconds>: {"score": int, "date": "YYYY-MM-DD"}
- clearedDates: ["YYYY-MM-DD", ...]
- puppy*: puppy care state (see pet.py)

Anything missing or malformed reads back as a default (zero score, empty
list) and is logged. Writes that fail are logged and dropped.
"""

import json
import logging
import os
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional

from .orders import GameMode, TimeLimitOption

logger = logging.getLogger(__name__)

CLEARED_DATES_KEY = "clearedDates"
HIGH_SCORES_KEY = "highScores"


def get_data_dir() -> Path:
    """Data directory: $OMISE_HOME or ~/.omise"""
    override = os.environ.get("OMISE_HOME")
    return Path(override) if override else Path.home() / ".omise"


def high_score_key(mode: GameMode, time_limit: TimeLimitOption) -> str:
    return f"{HIGH_SCORES_KEY}_{mode.value}_{time_limit.value}"


def _parse_day(value: Any) -> Optional[date]:
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


class ScoreStore:
    """JSON-backed key-value store. Loaded lazily, written through on set()."""

    def __init__(self, path: Optional[Path] = None):
        self.path = path or get_data_dir() / "scores.json"
        self._data: Optional[dict[str, Any]] = None

    def _load(self) -> dict[str, Any]:
        if self._data is not None:
            return self._data
        self._data = {}
        if not self.path.exists():
            return self._data
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read %s, starting fresh: %s", self.path, e)
            return self._data
        if isinstance(data, dict):
            self._data = data
        else:
            logger.warning("Ignoring %s: expected a JSON object", self.path)
        return self._data

    def _save(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(self._load(), f, ensure_ascii=False, indent=2)
        except OSError as e:
            logger.warning("Could not write %s: %s", self.path, e)

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._load()[key] = value
        self._save()

    # -------------------------------------------------------------------------
    # High scores
    # -------------------------------------------------------------------------

    def load_high_score(self, mode: GameMode, time_limit: TimeLimitOption) -> int:
        record = self.get(high_score_key(mode, time_limit))
        if record is None:
            return 0
        if not isinstance(record, dict) or not isinstance(record.get("score"), int):
            logger.warning("Malformed high score for %s, using 0", high_score_key(mode, time_limit))
            return 0
        return record["score"]

    def save_high_score(self, score: int, mode: GameMode, time_limit: TimeLimitOption,
                        today: Optional[date] = None) -> None:
        day = today or date.today()
        self.set(high_score_key(mode, time_limit), {"score": score, "date": day.isoformat()})
        logger.info("Saved high score for %s (%s): %d", mode.value, time_limit.display_name("en"), score)

    def record_high_score(self, score: int, mode: GameMode, time_limit: TimeLimitOption,
                          today: Optional[date] = None) -> bool:
        """Save score if it beats the stored one. Returns True on a new record."""
        previous = self.load_high_score(mode, time_limit)
        if score > previous:
            logger.info("New high score! %d (previous: %d)", score, previous)
            self.save_high_score(score, mode, time_limit, today)
            return True
        logger.info("Score %d, high score %d", score, previous)
        return False

    def load_scores_by_date(self) -> dict[date, list[tuple[GameMode, TimeLimitOption, int]]]:
        """High-score records grouped by the day they were set."""
        by_date: dict[date, list[tuple[GameMode, TimeLimitOption, int]]] = {}
        for mode in GameMode:
            for time_limit in TimeLimitOption:
                record = self.get(high_score_key(mode, time_limit))
                if not isinstance(record, dict):
                    continue
                score = record.get("score")
                day = _parse_day(record.get("date"))
                if not isinstance(score, int) or day is None:
                    continue
                by_date.setdefault(day, []).append((mode, time_limit, score))
        logger.debug("Loaded scores grouped by date: %d days", len(by_date))
        return by_date

    # -------------------------------------------------------------------------
    # Cleared dates
    # -------------------------------------------------------------------------

    def load_cleared_dates(self) -> list[date]:
        raw = self.get(CLEARED_DATES_KEY, [])
        if not isinstance(raw, list):
            logger.warning("Malformed %s, using empty list", CLEARED_DATES_KEY)
            return []
        days = []
        for value in raw:
            day = _parse_day(value)
            if day is None:
                logger.warning("Skipping malformed cleared date: %r", value)
                continue
            days.append(day)
        return days

    def save_cleared_date(self, when: Optional[datetime] = None) -> bool:
        """Remember the day a round was cleared. One entry per day."""
        day = (when or datetime.now()).date()
        days = self.load_cleared_dates()
        if day in days:
            logger.debug("Date already saved for today: %s", day)
            return False
        days.append(day)
        self.set(CLEARED_DATES_KEY, [d.isoformat() for d in days])
        logger.info("Saved cleared date: %s", day)
        return True

    # -------------------------------------------------------------------------
    # Timestamps (puppy care)
    # -------------------------------------------------------------------------

    def get_datetime(self, key: str) -> Optional[datetime]:
        value = self.get(key)
        if value is None:
            return None
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value)
            except ValueError:
                pass
        logger.warning("Malformed timestamp for %s: %r", key, value)
        return None

    def set_datetime(self, key: str, value: datetime) -> None:
        self.set(key, value.isoformat())
