"""
Drill Runner: one object wiring the engine together for a front-end.

    sampler -> generator -> (render) -> evaluator -> {store, engine, goals}

A host (the CLI, a web handler, a test) drives it with:
- start(minutes)            once per session
- next_question()           after every verdict or self-rating
- answer_choice / answer_text
- tick(seconds)             as wall-clock time passes
- report()                  once the session has ended
"""

from __future__ import annotations

import random
from typing import Sequence

from loguru import logger

from .errors import InsufficientWordPoolError, SessionNotRunningError
from .evaluator import AnswerEvaluator, AnswerResult, Announcer
from .mastery import DailyGoalStore, MasteryRecord, MasteryStore, SelfRating
from .questions import Difficulty, Question, QuestionGenerator
from .report import SessionReport, build_report
from .sampler import WordSampler
from .session import SessionEngine, SessionState
from .word_list import WordEntry

MIN_POOL_SIZE = 2


class DrillRunner:
    """Runs play sessions over a fixed word pool."""

    def __init__(
        self,
        pool: Sequence[WordEntry],
        store: MasteryStore,
        goals: DailyGoalStore | None = None,
        difficulty: Difficulty | str = Difficulty.NORMAL,
        rng: random.Random | None = None,
        announcer: Announcer | None = None,
        choice_count: int = 4,
        question_seconds: int = 5,
    ):
        """
        Initialize the runner.

        Args:
            pool: Active word pool (fixed for the runner's lifetime)
            store: MasteryStore shared across sessions
            goals: Daily goal counter (optional)
            difficulty: easy, normal, or hard
            rng: Random source shared by sampler and generator
            announcer: Sound/speech collaborator
            choice_count: Maximum multiple-choice options
            question_seconds: Countdown for easy questions
        """
        self.pool = tuple(pool)
        self.store = store
        self.goals = goals
        self.difficulty = Difficulty(difficulty)
        rng = rng or random.Random()

        self.sampler = WordSampler(store, rng)
        self.generator = QuestionGenerator(rng, choice_count, question_seconds)
        self.engine = SessionEngine()
        self.evaluator = AnswerEvaluator(store, self.engine, goals, announcer)

    @property
    def state(self) -> SessionState:
        return self.engine.state

    @property
    def question(self) -> Question | None:
        return self.evaluator.question

    @property
    def missed_words(self) -> list[str]:
        return self.evaluator.missed_words

    # =========================================================================
    # Session Control
    # =========================================================================

    def start(self, minutes: int | None) -> SessionState:
        """
        Start a session.

        Raises:
            InsufficientWordPoolError: If the pool has fewer than two words
        """
        if len(self.pool) < MIN_POOL_SIZE:
            raise InsufficientWordPoolError(len(self.pool), MIN_POOL_SIZE)

        self.evaluator.start_session()
        self.sampler.last_word = None
        state = self.engine.start(minutes)
        logger.info(f"Drilling {len(self.pool)} words on {self.difficulty.value}")
        return state

    def next_question(self) -> Question:
        """Sample a word and present a fresh question for it."""
        if not self.engine.is_running:
            raise SessionNotRunningError(f"Session is {self.engine.phase.value}")
        entry = self.sampler.pick(self.pool)
        question = self.generator.generate(entry, self.pool, self.difficulty)
        self.evaluator.present(question)
        return question

    def tick(self, seconds: int = 1) -> bool:
        return self.engine.tick(seconds)

    def pause(self) -> bool:
        return self.engine.pause()

    def resume(self) -> bool:
        return self.engine.resume()

    def end(self) -> SessionState:
        return self.engine.end()

    # =========================================================================
    # Answers
    # =========================================================================

    def answer_choice(self, index: int) -> AnswerResult:
        return self.evaluator.submit_choice(index)

    def answer_text(self, text: str) -> AnswerResult:
        return self.evaluator.submit_text(text)

    def rate(self, rating: SelfRating | str) -> MasteryRecord | None:
        return self.evaluator.rate(rating)

    def report(self) -> SessionReport:
        return build_report(
            self.engine.state,
            self.pool,
            self.store,
            missed_words=self.evaluator.missed_words,
            daily_goal=self.goals.current() if self.goals else None,
            elapsed_seconds=self.engine.elapsed_seconds,
        )
