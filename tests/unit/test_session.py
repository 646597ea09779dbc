"""
Unit tests for the session state machine.
"""

import pytest

from src.drift.errors import SessionNotRunningError
from src.drift.session import (
    SessionEngine,
    SessionPhase,
    SessionState,
    parse_session_length,
)


@pytest.fixture
def engine():
    engine = SessionEngine()
    engine.start(10)
    return engine


class TestParseSessionLength:
    @pytest.mark.parametrize("value,expected", [
        ("5", 5),
        (10, 10),
        (" 20 ", 20),
        ("zen", None),
        ("ZEN", None),
        (None, None),
    ])
    def test_valid(self, value, expected):
        assert parse_session_length(value) == expected

    @pytest.mark.parametrize("value", ["0", -3, "soon", "15", 7])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_session_length(value)


class TestLifecycle:
    def test_initial_state(self):
        engine = SessionEngine()

        assert engine.phase is SessionPhase.IDLE

    def test_start(self, engine):
        assert engine.is_running
        assert engine.state.time_remaining == 600
        assert engine.state.energy == 100
        assert engine.state.score == 0

    def test_start_resets_counters(self, engine):
        engine.apply_verdict(True)

        engine.start(5)

        assert engine.state == SessionState(time_remaining=300, energy=100)

    def test_zero_minutes_rejected(self):
        with pytest.raises(ValueError):
            SessionEngine().start(0)

    def test_pause_and_resume(self, engine):
        assert engine.pause() is True
        assert engine.pause() is False
        assert engine.is_paused
        assert engine.resume() is True
        assert engine.is_running

    def test_toggle_pause(self, engine):
        assert engine.toggle_pause() is True
        assert engine.toggle_pause() is False

    def test_end_is_idempotent(self, engine):
        calls = []
        engine.add_end_listener(calls.append)

        engine.end()
        engine.end()

        assert engine.is_ended
        assert len(calls) == 1

    def test_cannot_pause_after_end(self, engine):
        engine.end()

        assert engine.pause() is False
        assert engine.is_ended


class TestScoring:
    def test_five_correct_in_a_row(self, engine):
        for _ in range(5):
            engine.apply_verdict(True)

        state = engine.state
        assert state.streak == 5
        assert state.combo_multiplier == 2
        assert state.score == 80
        assert state.energy == 100
        assert state.correct_count == 5

    def test_miss_breaks_streak(self, engine):
        for _ in range(5):
            engine.apply_verdict(True)

        state = engine.apply_verdict(False)

        assert state.streak == 0
        assert state.combo_multiplier == 1
        assert state.energy == 82
        assert state.score == 80
        assert state.longest_streak == 5
        assert state.incorrect_count == 1

    def test_combo_caps_at_five(self, engine):
        for _ in range(20):
            engine.apply_verdict(True)

        assert engine.state.combo_multiplier == 5

    def test_energy_regenerates(self, engine):
        engine.apply_verdict(False)
        engine.apply_verdict(True)

        assert engine.state.energy == 90

    def test_energy_depletion_ends_session(self, engine):
        for _ in range(5):
            engine.apply_verdict(False)
        assert engine.state.energy == 10
        assert engine.is_running

        engine.apply_verdict(False)

        assert engine.state.energy == 0
        assert engine.is_ended

    def test_verdict_rejected_when_paused(self, engine):
        engine.pause()

        with pytest.raises(SessionNotRunningError):
            engine.apply_verdict(True)

    def test_verdict_rejected_after_end(self, engine):
        engine.end()

        with pytest.raises(SessionNotRunningError):
            engine.apply_verdict(True)
        assert engine.state.correct_count == 0

    def test_accuracy(self, engine):
        engine.apply_verdict(True)
        engine.apply_verdict(True)
        engine.apply_verdict(False)

        assert engine.state.answered == 3
        assert engine.state.accuracy_percent == 67

    def test_accuracy_without_answers(self):
        assert SessionState().accuracy_percent == 0


class TestTimers:
    def test_session_clock_ends_session(self):
        engine = SessionEngine()
        engine.start(5)

        engine.tick(299)
        assert engine.is_running
        assert engine.state.time_remaining == 1

        engine.tick()
        assert engine.is_ended
        assert engine.state.time_remaining == 0

    def test_zen_never_times_out(self):
        engine = SessionEngine()
        engine.start(None)

        engine.tick(10_000)

        assert engine.zen
        assert engine.is_running
        assert engine.elapsed_seconds == 10_000

    def test_zen_still_ends_on_energy(self):
        engine = SessionEngine()
        engine.start(None)

        for _ in range(6):
            engine.apply_verdict(False)

        assert engine.is_ended

    def test_pause_freezes_clock(self, engine):
        engine.tick(10)
        engine.pause()

        engine.tick(100)

        assert engine.state.time_remaining == 590
        assert engine.elapsed_seconds == 10

    def test_question_timeout_fires_once(self, engine):
        fired = []
        engine.on_question_timeout = lambda: fired.append(True)
        engine.arm_question(5)

        assert engine.tick(4) is False
        assert engine.question_time_left == 1
        assert engine.tick(3) is True
        assert fired == [True]
        assert engine.question_pending is False

    def test_verdict_disarms_question(self, engine):
        engine.arm_question(5)

        engine.apply_verdict(True)

        assert engine.tick(10) is False

    def test_unarmed_question_never_expires(self, engine):
        engine.arm_question(0)

        assert engine.tick(30) is False
