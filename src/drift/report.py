"""
End-of-session report and the missed-word export.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from loguru import logger

from .mastery import DailyGoal, MasteryStore
from .session import SessionState
from .word_list import WordEntry

WEAK_WORD_LIMIT = 6


@dataclass
class SessionReport:
    """Everything the summary screen shows."""

    state: SessionState
    missed_words: list[str] = field(default_factory=list)
    weak_words: list[tuple[str, float]] = field(default_factory=list)
    daily_goal: DailyGoal | None = None
    elapsed_seconds: int = 0

    @property
    def accuracy_percent(self) -> int:
        return self.state.accuracy_percent

    def to_dict(self) -> dict:
        return {
            **self.state.to_dict(),
            "accuracy_percent": self.accuracy_percent,
            "elapsed_seconds": self.elapsed_seconds,
            "missed_words": list(self.missed_words),
            "weak_words": [{"word": w, "mastery": m} for w, m in self.weak_words],
            "daily_goal": None
            if self.daily_goal is None
            else {"date": self.daily_goal.date, "correct": self.daily_goal.correct},
        }


def build_report(
    state: SessionState,
    pool: Sequence[WordEntry],
    store: MasteryStore,
    missed_words: Sequence[str] = (),
    daily_goal: DailyGoal | None = None,
    elapsed_seconds: int = 0,
) -> SessionReport:
    weak = store.weakest([entry.word for entry in pool], limit=WEAK_WORD_LIMIT)
    return SessionReport(
        state=state,
        missed_words=list(missed_words),
        weak_words=[(word, record.mastery) for word, record in weak],
        daily_goal=daily_goal,
        elapsed_seconds=elapsed_seconds,
    )


def format_missed_export(missed_words: Sequence[str]) -> str:
    """Newline-joined distinct words in first-miss order."""
    return "\n".join(dict.fromkeys(missed_words))


def export_missed_words(missed_words: Sequence[str], path: Path) -> Path | None:
    """
    Write the review list to path.

    Returns:
        The written path, or None when nothing was missed
    """
    if not missed_words:
        return None
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_missed_export(missed_words), encoding="utf-8")
    logger.info(f"Exported {len(set(missed_words))} missed words to {path}")
    return path
