"""
Session Engine: the score/streak/combo/energy state machine.

Phases:
    IDLE -> RUNNING <-> PAUSED -> ENDED

A session ends when energy runs out, or (outside zen mode) when the
clock reaches zero. Both clocks are tick-driven: the host calls tick()
once per elapsed second. Pausing freezes both clocks without losing time.

Scoring rules per verdict:
- streak: +1 on correct, 0 on incorrect
- combo: 1 + streak // 3, capped at 5; back to 1 on incorrect
- score: +10 * combo on correct
- energy: +8 on correct, -18 on incorrect, kept within [0, 100]
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Callable

from loguru import logger

from .errors import SessionNotRunningError

ZEN = "zen"
SESSION_LENGTHS = (5, 10, 20, ZEN)


class SessionPhase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    ENDED = "ended"


@dataclass
class ScoringRules:
    """Tunable constants for the session state machine."""

    max_energy: int = 100
    correct_energy: int = 8
    incorrect_energy: int = 18
    points_per_answer: int = 10
    combo_step: int = 3
    max_combo: int = 5


@dataclass
class SessionState:
    """Live counters for one session."""

    time_remaining: int = 0
    energy: int = 100
    score: int = 0
    streak: int = 0
    longest_streak: int = 0
    combo_multiplier: int = 1
    correct_count: int = 0
    incorrect_count: int = 0

    @property
    def answered(self) -> int:
        return self.correct_count + self.incorrect_count

    @property
    def accuracy_percent(self) -> int:
        """Rounded share of correct answers, 0 before the first answer."""
        if self.answered == 0:
            return 0
        return round(self.correct_count / self.answered * 100)

    def to_dict(self) -> dict:
        return asdict(self)


def parse_session_length(value: str | int | None) -> int | None:
    """
    Convert a session length option to minutes.

    Returns None for zen (untimed) sessions.

    Raises:
        ValueError: If the value is not one of SESSION_LENGTHS
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip().lower()
        if value == ZEN:
            return None
        value = int(value)
    if value not in SESSION_LENGTHS:
        choices = ", ".join(str(length) for length in SESSION_LENGTHS)
        raise ValueError(f"Session length must be one of {choices}, got {value}")
    return value


class SessionEngine:
    """
    Tracks one play session.

    Verdicts come from the AnswerEvaluator through apply_verdict(); timers
    advance through tick(). The optional on_question_timeout callback is
    invoked when an armed question countdown reaches zero.
    """

    def __init__(
        self,
        rules: ScoringRules | None = None,
        on_question_timeout: Callable[[], None] | None = None,
    ):
        self.rules = rules or ScoringRules()
        self.on_question_timeout = on_question_timeout
        self.phase = SessionPhase.IDLE
        self.state = SessionState()
        self.zen = False
        self.elapsed_seconds = 0
        self.question_time_left = 0
        self.question_pending = False
        self._end_listeners: list[Callable[[SessionState], None]] = []

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @property
    def is_running(self) -> bool:
        return self.phase is SessionPhase.RUNNING

    @property
    def is_paused(self) -> bool:
        return self.phase is SessionPhase.PAUSED

    @property
    def is_ended(self) -> bool:
        return self.phase is SessionPhase.ENDED

    def add_end_listener(self, listener: Callable[[SessionState], None]) -> None:
        self._end_listeners.append(listener)

    def start(self, minutes: int | None) -> SessionState:
        """
        Start a fresh session.

        Args:
            minutes: Session length, or None for an untimed zen session
        """
        if minutes is not None and minutes <= 0:
            raise ValueError(f"Session length must be positive, got {minutes}")

        self.zen = minutes is None
        self.state = SessionState(
            time_remaining=0 if self.zen else minutes * 60,
            energy=self.rules.max_energy,
        )
        self.elapsed_seconds = 0
        self.disarm_question()
        self.phase = SessionPhase.RUNNING

        logger.info(f"Session started ({'zen' if self.zen else f'{minutes} min'})")
        return self.state

    def pause(self) -> bool:
        if self.phase is not SessionPhase.RUNNING:
            return False
        self.phase = SessionPhase.PAUSED
        return True

    def resume(self) -> bool:
        if self.phase is not SessionPhase.PAUSED:
            return False
        self.phase = SessionPhase.RUNNING
        return True

    def toggle_pause(self) -> bool:
        """Pause or resume. Returns True if now paused."""
        if not self.pause():
            self.resume()
        return self.is_paused

    def end(self) -> SessionState:
        """End the session. Safe to call more than once."""
        if self.phase in (SessionPhase.RUNNING, SessionPhase.PAUSED):
            self.phase = SessionPhase.ENDED
            self.disarm_question()
            logger.info(
                f"Session ended: score={self.state.score}, "
                f"correct={self.state.correct_count}, incorrect={self.state.incorrect_count}"
            )
            for listener in self._end_listeners:
                listener(self.state)
        return self.state

    def _check_end(self) -> None:
        if self.state.energy <= 0:
            self.end()
        elif not self.zen and self.state.time_remaining <= 0:
            self.end()

    # =========================================================================
    # Timers
    # =========================================================================

    def arm_question(self, seconds: int) -> None:
        """Start a per-question countdown (0 disables it)."""
        self.question_time_left = max(0, seconds)
        self.question_pending = seconds > 0

    def disarm_question(self) -> None:
        self.question_time_left = 0
        self.question_pending = False

    def tick(self, seconds: int = 1) -> bool:
        """
        Advance the clocks by whole seconds.

        Returns:
            True if the question countdown expired during this call
        """
        expired = False
        for _ in range(max(0, seconds)):
            if self.phase is not SessionPhase.RUNNING:
                break

            self.elapsed_seconds += 1
            if not self.zen:
                self.state.time_remaining = max(0, self.state.time_remaining - 1)
                self._check_end()
                if self.is_ended:
                    break

            if self.question_pending:
                self.question_time_left = max(0, self.question_time_left - 1)
                if self.question_time_left == 0:
                    self.question_pending = False
                    expired = True
                    if self.on_question_timeout is not None:
                        self.on_question_timeout()
        return expired

    # =========================================================================
    # Scoring
    # =========================================================================

    def apply_verdict(self, correct: bool) -> SessionState:
        """
        Apply one answer verdict to the counters.

        Raises:
            SessionNotRunningError: If the session is not running
        """
        if self.phase is not SessionPhase.RUNNING:
            raise SessionNotRunningError(f"Cannot score an answer while {self.phase.value}")

        rules = self.rules
        state = self.state
        self.disarm_question()

        if correct:
            state.streak += 1
            state.combo_multiplier = min(rules.max_combo, max(1, 1 + state.streak // rules.combo_step))
            state.score += rules.points_per_answer * state.combo_multiplier
            state.energy = min(rules.max_energy, state.energy + rules.correct_energy)
            state.correct_count += 1
        else:
            state.streak = 0
            state.combo_multiplier = 1
            state.energy = max(0, state.energy - rules.incorrect_energy)
            state.incorrect_count += 1
        state.longest_streak = max(state.longest_streak, state.streak)

        self._check_end()
        return state
