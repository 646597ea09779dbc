"""
Neon Drift: adaptive vocabulary drilling engine.

Components:
- parse_word_list: Raw text to deduplicated WordEntry pool
- MasteryStore: Per-word proficiency with key-value persistence
- WordSampler: Mastery-weighted roulette selection
- QuestionGenerator: Cloze prompts and distractors per difficulty
- SessionEngine: Score, streak, combo, energy, and clocks
- AnswerEvaluator: Verdicts feeding the store, engine, and daily goal
- DrillRunner: Wires the pieces together for a front-end
"""

from .errors import (
    DriftError,
    EmptyWordPoolError,
    InsufficientWordPoolError,
    MalformedPersistedData,
    QuestionAlreadyAnsweredError,
    SessionNotRunningError,
)
from .evaluator import AnswerEvaluator, AnswerResult
from .mastery import DailyGoal, DailyGoalStore, MasteryRecord, MasteryStore, SelfRating
from .questions import AnswerMode, Difficulty, Question, QuestionGenerator
from .report import SessionReport, build_report, export_missed_words
from .runner import DrillRunner
from .sampler import SamplerConfig, WordSampler
from .session import SessionEngine, SessionPhase, SessionState
from .state_store import KeyValueStore, MemoryKeyValueStore, SQLiteKeyValueStore
from .word_list import ParseResult, WordEntry, load_word_file, parse_word_list

__all__ = [
    # Word lists
    "WordEntry",
    "ParseResult",
    "parse_word_list",
    "load_word_file",
    # Persistence
    "KeyValueStore",
    "MemoryKeyValueStore",
    "SQLiteKeyValueStore",
    "MasteryRecord",
    "MasteryStore",
    "SelfRating",
    "DailyGoal",
    "DailyGoalStore",
    # Selection and questions
    "SamplerConfig",
    "WordSampler",
    "Difficulty",
    "AnswerMode",
    "Question",
    "QuestionGenerator",
    # Session
    "SessionEngine",
    "SessionPhase",
    "SessionState",
    "AnswerEvaluator",
    "AnswerResult",
    "DrillRunner",
    "SessionReport",
    "build_report",
    "export_missed_words",
    # Errors
    "DriftError",
    "EmptyWordPoolError",
    "InsufficientWordPoolError",
    "MalformedPersistedData",
    "QuestionAlreadyAnsweredError",
    "SessionNotRunningError",
]
