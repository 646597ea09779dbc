"""
Mastery Store: per-word proficiency tracking.

Each distinct word (case-sensitive) owns one MasteryRecord:
- exposures / correct / incorrect counters
- last_seen_at / last_miss_at timestamps
- mastery: float in [0, 1], starts at 0.4 ("unknown, slightly below neutral")

Records are immutable. Every update returns a new record and replaces the
entry in the store, so callers never hold a reference that changes under them.

The whole mapping is persisted as one JSON snapshot under a versioned key.
The stored shape matches the browser version of the game:

    {"run": {"exposures": 3, "correct": 2, "incorrect": 1,
             "lastSeen": 1700000000000, "lastMiss": 1699990000000,
             "mastery": 0.44}}

Timestamps are epoch milliseconds, 0 meaning "never".
"""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Callable

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .errors import MalformedPersistedData
from .state_store import KeyValueStore

DEFAULT_STATS_KEY = "neonDriftStats_v1"
DEFAULT_DAILY_KEY = "neonDriftDaily_v1"
DEFAULT_DAILY_TARGET = 30

INITIAL_MASTERY = 0.4
CORRECT_DELTA = 0.08
INCORRECT_DELTA = -0.12


def clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


class SelfRating(str, Enum):
    """How well the learner says they know a word after seeing the answer."""

    KNOW = "know"
    UNSURE = "unsure"
    NEUTRAL = "neutral"

    @property
    def delta(self) -> float:
        return {
            SelfRating.KNOW: 0.10,
            SelfRating.UNSURE: -0.10,
            SelfRating.NEUTRAL: 0.0,
        }[self]


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True)
class MasteryRecord:
    """Proficiency state for a single word."""

    exposures: int = 0
    correct: int = 0
    incorrect: int = 0
    last_seen_at: datetime | None = None
    last_miss_at: datetime | None = None
    mastery: float = INITIAL_MASTERY

    def with_outcome(self, correct: bool, now: datetime) -> MasteryRecord:
        """Record produced by answering this word."""
        if correct:
            return replace(
                self,
                exposures=self.exposures + 1,
                correct=self.correct + 1,
                last_seen_at=now,
                mastery=clamp(self.mastery + CORRECT_DELTA, 0.0, 1.0),
            )
        return replace(
            self,
            exposures=self.exposures + 1,
            incorrect=self.incorrect + 1,
            last_seen_at=now,
            last_miss_at=now,
            mastery=clamp(self.mastery + INCORRECT_DELTA, 0.0, 1.0),
        )

    def with_mastery_delta(self, delta: float) -> MasteryRecord:
        return replace(self, mastery=clamp(self.mastery + delta, 0.0, 1.0))

    @property
    def accuracy(self) -> float:
        if self.exposures == 0:
            return 0.0
        return self.correct / self.exposures


@dataclass(frozen=True)
class DailyGoal:
    """Correct answers counted toward today's target."""

    date: str
    correct: int = 0
    target: int = DEFAULT_DAILY_TARGET

    @property
    def progress(self) -> float:
        if self.target <= 0:
            return 1.0
        return min(1.0, self.correct / self.target)

    @property
    def reached(self) -> bool:
        return self.correct >= self.target


# =============================================================================
# Persisted Shapes
# =============================================================================


class StoredRecord(BaseModel):
    """Wire shape of one mastery record."""

    model_config = ConfigDict(populate_by_name=True)

    exposures: int = Field(default=0, ge=0)
    correct: int = Field(default=0, ge=0)
    incorrect: int = Field(default=0, ge=0)
    last_seen: int = Field(default=0, alias="lastSeen")
    last_miss: int = Field(default=0, alias="lastMiss")
    mastery: float = INITIAL_MASTERY


class StoredDailyGoal(BaseModel):
    date: str
    correct: int = Field(default=0, ge=0)


_STORED_MAPPING = TypeAdapter(dict[str, StoredRecord])


def _to_millis(value: datetime | None) -> int:
    return 0 if value is None else int(value.timestamp() * 1000)


def _from_millis(value: int) -> datetime | None:
    return None if value <= 0 else datetime.fromtimestamp(value / 1000)


def encode_records(records: dict[str, MasteryRecord]) -> str:
    """Serialize a mapping of records to the persisted JSON string."""
    payload = {
        word: StoredRecord(
            exposures=record.exposures,
            correct=record.correct,
            incorrect=record.incorrect,
            last_seen=_to_millis(record.last_seen_at),
            last_miss=_to_millis(record.last_miss_at),
            mastery=record.mastery,
        ).model_dump(by_alias=True)
        for word, record in records.items()
    }
    return json.dumps(payload, ensure_ascii=False)


def decode_records(raw: str) -> dict[str, MasteryRecord]:
    """
    Parse the persisted JSON string.

    Raises:
        MalformedPersistedData: If the payload is not a valid mapping
    """
    try:
        stored = _STORED_MAPPING.validate_json(raw)
    except ValidationError as exc:
        raise MalformedPersistedData(str(exc)) from exc

    return {
        word: MasteryRecord(
            exposures=item.exposures,
            correct=item.correct,
            incorrect=item.incorrect,
            last_seen_at=_from_millis(item.last_seen),
            last_miss_at=_from_millis(item.last_miss),
            mastery=clamp(item.mastery, 0.0, 1.0),
        )
        for word, item in stored.items()
    }


# =============================================================================
# Mastery Store
# =============================================================================


class MasteryStore:
    """
    Word -> MasteryRecord mapping with best-effort persistence.

    Loading never raises: missing or corrupt data starts an empty mapping.
    Saving never raises: failures are logged and the in-memory state stands.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        key: str = DEFAULT_STATS_KEY,
        autoload: bool = True,
    ):
        """
        Initialize the mastery store.

        Args:
            kv: Key-value provider used for load/save
            key: Versioned storage key
            autoload: Load the persisted mapping immediately
        """
        self.kv = kv
        self.key = key
        self._records: dict[str, MasteryRecord] = {}
        self._lock = threading.RLock()

        if autoload:
            self.load_all()

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, word: object) -> bool:
        return word in self._records

    # =========================================================================
    # Persistence
    # =========================================================================

    def load_all(self) -> dict[str, MasteryRecord]:
        """Replace the in-memory mapping with the persisted one."""
        with self._lock:
            try:
                raw = self.kv.get(self.key)
                self._records = decode_records(raw) if raw else {}
            except MalformedPersistedData as exc:
                logger.warning(f"Discarding malformed mastery data under {self.key}: {exc}")
                self._records = {}
            except Exception as exc:
                logger.warning(f"Could not load mastery data: {exc}")
                self._records = {}

            logger.debug(f"Loaded {len(self._records)} mastery records")
            return dict(self._records)

    def save_all(self) -> bool:
        """Persist the full mapping. Returns False if the write failed."""
        with self._lock:
            payload = encode_records(self._records)
        try:
            self.kv.set(self.key, payload)
        except Exception as exc:
            logger.warning(f"Could not save mastery data: {exc}")
            return False
        return True

    def reset(self) -> int:
        """Forget every record and persist the empty mapping."""
        with self._lock:
            count = len(self._records)
            self._records = {}
        self.save_all()
        return count

    # =========================================================================
    # Record Operations
    # =========================================================================

    def get(self, word: str) -> MasteryRecord | None:
        return self._records.get(word)

    def get_or_create(self, word: str) -> MasteryRecord:
        """Return the record for word, creating the default one if absent."""
        with self._lock:
            record = self._records.get(word)
            if record is None:
                record = MasteryRecord()
                self._records[word] = record
            return record

    def record_outcome(
        self,
        word: str,
        correct: bool,
        now: datetime | None = None,
    ) -> MasteryRecord:
        """
        Apply an answer verdict to a word.

        Args:
            word: The answered word
            correct: Whether the answer was correct
            now: Event time (defaults to the current time)

        Returns:
            The updated record
        """
        with self._lock:
            record = self.get_or_create(word).with_outcome(correct, now or datetime.now())
            self._records[word] = record

        logger.debug(
            f"Recorded {'correct' if correct else 'incorrect'} for {word!r}: "
            f"mastery={record.mastery:.2f}, exposures={record.exposures}"
        )
        return record

    def adjust_by_self_rating(self, word: str, rating: SelfRating | str) -> MasteryRecord:
        """Nudge mastery by the learner's own rating."""
        rating = SelfRating(rating)
        with self._lock:
            record = self.get_or_create(word).with_mastery_delta(rating.delta)
            self._records[word] = record
        return record

    def snapshot(self) -> dict[str, MasteryRecord]:
        """Copy of the current mapping."""
        with self._lock:
            return dict(self._records)

    def weakest(self, words: list[str], limit: int = 6) -> list[tuple[str, MasteryRecord]]:
        """
        Lowest-mastery words among the given ones.

        Words without a record are created first, matching how the
        summary screen lists a freshly loaded pool.
        """
        ranked = [(word, self.get_or_create(word)) for word in dict.fromkeys(words)]
        ranked.sort(key=lambda item: item[1].mastery)
        return ranked[:limit]


# =============================================================================
# Daily Goal Store
# =============================================================================


def today_key(now: datetime | None = None) -> str:
    """UTC calendar day (YYYY-MM-DD) that owns the daily goal counter."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).date().isoformat()


class DailyGoalStore:
    """
    Persistent daily correct-answer counter.

    The counter belongs to a calendar day: a stored goal from an earlier
    day is silently replaced by a fresh one.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        key: str = DEFAULT_DAILY_KEY,
        target: int = DEFAULT_DAILY_TARGET,
        today: Callable[[], str] = today_key,
    ):
        self.kv = kv
        self.key = key
        self.target = target
        self._today = today
        self.goal = self.load()

    def _fresh(self) -> DailyGoal:
        return DailyGoal(date=self._today(), correct=0, target=self.target)

    def load(self) -> DailyGoal:
        """Read the stored goal, resetting stale or corrupt data."""
        try:
            raw = self.kv.get(self.key)
        except Exception as exc:
            logger.warning(f"Could not load daily goal: {exc}")
            return self._fresh()

        if not raw:
            return self._fresh()

        try:
            stored = StoredDailyGoal.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning(f"Discarding malformed daily goal under {self.key}: {exc}")
            return self._fresh()

        if stored.date != self._today():
            return self._fresh()
        return DailyGoal(date=stored.date, correct=stored.correct, target=self.target)

    def save(self) -> bool:
        payload = StoredDailyGoal(date=self.goal.date, correct=self.goal.correct)
        try:
            self.kv.set(self.key, payload.model_dump_json())
        except Exception as exc:
            logger.warning(f"Could not save daily goal: {exc}")
            return False
        return True

    def current(self) -> DailyGoal:
        """Today's goal, rolling over if the day changed since loading."""
        if self.goal.date != self._today():
            self.goal = self._fresh()
        return self.goal

    def increment(self) -> DailyGoal:
        """Count one correct answer and persist."""
        goal = self.current()
        self.goal = replace(goal, correct=goal.correct + 1)
        self.save()
        return self.goal
