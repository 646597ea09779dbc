"""
Answer Evaluator: verdicts and their side effects.

A verdict on the outstanding question fans out to:
- MasteryStore.record_outcome (then a full save)
- SessionEngine.apply_verdict
- the session's missed-word list (incorrect only, deduplicated)
- the daily goal counter (correct only)
- the announcer collaborator (sound / speech)
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Protocol

from loguru import logger

from .errors import QuestionAlreadyAnsweredError, SessionNotRunningError
from .mastery import DailyGoalStore, MasteryRecord, MasteryStore, SelfRating
from .questions import AnswerMode, Question
from .session import SessionEngine, SessionState


class Announcer(Protocol):
    """Audio/speech collaborator, fired after every verdict."""

    def announce(self, word: str, correct: bool) -> None:
        ...


class SilentAnnouncer:
    def announce(self, word: str, correct: bool) -> None:
        return None


@dataclass
class AnswerResult:
    """Result of checking an answer."""

    correct: bool
    user_answer: str
    correct_answer: str
    record: MasteryRecord
    state: SessionState
    timed_out: bool = False

    @property
    def feedback(self) -> str:
        if self.timed_out:
            return f"Time's up! The word was {self.correct_answer}."
        if self.correct:
            return "Correct!"
        return f"Not quite. The word was {self.correct_answer}."


def check_choice(question: Question, index: int) -> bool:
    """
    Whether a selected choice index is the correct one.

    Raises:
        ValueError: If the question is typed or the index is out of range
    """
    if question.mode is not AnswerMode.CHOICE:
        raise ValueError("Question expects a typed answer")
    if not 0 <= index < len(question.choices):
        raise ValueError(f"Choice {index} out of range (0-{len(question.choices) - 1})")
    return index == question.correct_choice_index


def check_typed(question: Question, text: str) -> bool:
    """Trimmed, case-insensitive comparison with the target word."""
    return text.strip().lower() == question.answer.strip().lower()


class AnswerEvaluator:
    """
    Scores answers to the current question and records the consequences.

    The evaluator owns the per-session missed-word list; start_session()
    clears it.
    """

    def __init__(
        self,
        store: MasteryStore,
        engine: SessionEngine,
        goals: DailyGoalStore | None = None,
        announcer: Announcer | None = None,
    ):
        self.store = store
        self.engine = engine
        self.goals = goals
        self.announcer = announcer or SilentAnnouncer()
        self.missed_words: list[str] = []
        self.question: Question | None = None
        self.answered = False
        self.last_word: str | None = None
        self.last_result: AnswerResult | None = None

        self.engine.on_question_timeout = self.timeout
        self.engine.add_end_listener(self._on_session_end)

    def start_session(self) -> None:
        self.missed_words = []
        self.question = None
        self.answered = False
        self.last_word = None
        self.last_result = None

    def present(self, question: Question) -> None:
        """Make question the outstanding one and arm its countdown."""
        self.question = question
        self.answered = False
        self.engine.arm_question(question.time_limit)

    # =========================================================================
    # Submissions
    # =========================================================================

    def submit_choice(self, index: int) -> AnswerResult:
        question = self._outstanding()
        correct = check_choice(question, index)
        return self._apply(question, correct, question.choices[index])

    def submit_text(self, text: str) -> AnswerResult:
        question = self._outstanding()
        return self._apply(question, check_typed(question, text), text.strip())

    def timeout(self) -> AnswerResult | None:
        """Count the outstanding question as missed when its clock runs out."""
        if self.question is None or self.answered or not self.engine.is_running:
            return None
        return self._apply(self.question, False, "", timed_out=True)

    def rate(self, rating: SelfRating | str) -> MasteryRecord | None:
        """Apply the learner's self-rating to the last answered word."""
        if self.last_word is None:
            return None
        record = self.store.adjust_by_self_rating(self.last_word, rating)
        self.store.save_all()
        return record

    # =========================================================================
    # Internals
    # =========================================================================

    def _outstanding(self) -> Question:
        if not self.engine.is_running:
            raise SessionNotRunningError(f"Session is {self.engine.phase.value}")
        if self.question is None:
            raise SessionNotRunningError("No question has been presented")
        if self.answered:
            raise QuestionAlreadyAnsweredError(f"{self.question.answer!r} was already answered")
        return self.question

    def _apply(
        self,
        question: Question,
        correct: bool,
        user_answer: str,
        timed_out: bool = False,
    ) -> AnswerResult:
        word = question.answer
        self.answered = True
        self.last_word = word

        record = self.store.record_outcome(word, correct, datetime.now())
        self.store.save_all()

        if correct:
            if self.goals is not None:
                self.goals.increment()
        elif word not in self.missed_words:
            self.missed_words.append(word)

        state = self.engine.apply_verdict(correct)

        try:
            self.announcer.announce(word, correct)
        except Exception as exc:
            logger.warning(f"Announcer failed for {word!r}: {exc}")

        self.last_result = AnswerResult(
            correct=correct,
            user_answer=user_answer,
            correct_answer=word,
            record=record,
            state=replace(state),
            timed_out=timed_out,
        )
        return self.last_result

    def _on_session_end(self, state: SessionState) -> None:
        self.store.save_all()
        if self.goals is not None:
            self.goals.save()
