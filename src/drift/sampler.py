"""
Word Sampler: weighted roulette-wheel selection.

Picks the next word to quiz from the active pool. Every word keeps a
positive chance of appearing, but weak, never-seen, and recently missed
words are strongly favored:

    weight = (floor + (1 - mastery) * weakness_scale + novelty + recent_miss) * recency

- novelty: bonus for words never answered
- recent_miss: bonus for words missed within the last 36 hours
- recency: penalty for the word that was just shown

This is not a due-date scheduler; it only biases the next draw.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Sequence

from loguru import logger

from .errors import EmptyWordPoolError
from .mastery import MasteryRecord, MasteryStore
from .word_list import WordEntry


@dataclass
class SamplerConfig:
    """Weights for the selection formula."""

    floor: float = 0.2
    weakness_scale: float = 0.9
    novelty_bonus: float = 0.6
    recent_miss_bonus: float = 0.5
    recent_miss_window: timedelta = timedelta(hours=36)
    repeat_penalty: float = 0.5


class WordSampler:
    """
    Chooses words from a pool using mastery-driven weights.

    The random source is injected so tests can pin exact picks.
    """

    def __init__(
        self,
        store: MasteryStore,
        rng: random.Random | None = None,
        config: SamplerConfig | None = None,
    ):
        """
        Initialize the sampler.

        Args:
            store: MasteryStore holding per-word records
            rng: Random source (a fresh random.Random if None)
            config: Weight configuration
        """
        self.store = store
        self.rng = rng or random.Random()
        self.config = config or SamplerConfig()
        self.last_word: str | None = None

    def weight(
        self,
        record: MasteryRecord,
        is_last: bool,
        now: datetime,
    ) -> float:
        """Selection weight for one candidate."""
        cfg = self.config
        novelty = cfg.novelty_bonus if record.exposures == 0 else 0.0
        recent_miss = 0.0
        if record.last_miss_at is not None and now - record.last_miss_at < cfg.recent_miss_window:
            recent_miss = cfg.recent_miss_bonus
        recency = cfg.repeat_penalty if is_last else 1.0

        return (cfg.floor + (1 - record.mastery) * cfg.weakness_scale + novelty + recent_miss) * recency

    def weights(
        self,
        pool: Sequence[WordEntry],
        last_word: str | None = None,
        now: datetime | None = None,
    ) -> list[float]:
        """Weights for every candidate, creating missing records on the way."""
        now = now or datetime.now()
        return [
            self.weight(self.store.get_or_create(entry.word), entry.word == last_word, now)
            for entry in pool
        ]

    def pick(
        self,
        pool: Sequence[WordEntry],
        last_word: str | None = None,
        now: datetime | None = None,
    ) -> WordEntry:
        """
        Draw the next word.

        Args:
            pool: Active word pool
            last_word: Previous pick (defaults to this sampler's own last pick)
            now: Reference time for the recent-miss window

        Returns:
            A WordEntry from the pool

        Raises:
            EmptyWordPoolError: If the pool is empty
        """
        if not pool:
            raise EmptyWordPoolError("Cannot sample from an empty word pool")

        if last_word is None:
            last_word = self.last_word

        weights = self.weights(pool, last_word, now)
        total = sum(weights)

        choice = pool[0]
        roll = self.rng.random() * total
        for entry, weight in zip(pool, weights):
            roll -= weight
            if roll <= 0:
                choice = entry
                break

        self.last_word = choice.word
        logger.debug(f"Picked {choice.word!r} from {len(pool)} candidates (total weight {total:.2f})")
        return choice
