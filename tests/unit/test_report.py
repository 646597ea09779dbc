"""
Unit tests for the session summary and missed-word export.
"""

import pytest

from src.drift.mastery import DailyGoal
from src.drift.report import build_report, export_missed_words, format_missed_export
from src.drift.session import SessionState
from src.drift.word_list import parse_word_list


class TestBuildReport:
    def test_weak_words_sorted_and_limited(self, store):
        words = [f"word{i}" for i in range(8)]
        pool = parse_word_list("\n".join(words)).entries
        for i, word in enumerate(words):
            store.adjust_by_self_rating(word, "know" if i % 2 else "unsure")

        report = build_report(SessionState(), pool, store)

        assert len(report.weak_words) == 6
        masteries = [mastery for _, mastery in report.weak_words]
        assert masteries == sorted(masteries)
        assert report.weak_words[0][1] == pytest.approx(0.3)
        assert {word for word, _ in report.weak_words[:4]} == {"word0", "word2", "word4", "word6"}

    def test_to_dict(self, store, pool):
        state = SessionState(score=120, correct_count=3, incorrect_count=1)
        goal = DailyGoal(date="2026-10-19", correct=3)

        data = build_report(state, pool, store, ["sprint"], goal, 95).to_dict()

        assert data["score"] == 120
        assert data["accuracy_percent"] == 75
        assert data["missed_words"] == ["sprint"]
        assert data["daily_goal"] == {"date": "2026-10-19", "correct": 3}
        assert data["elapsed_seconds"] == 95
        assert len(data["weak_words"]) == 4


class TestExport:
    def test_format(self):
        assert format_missed_export(["sprint", "focus", "sprint"]) == "sprint\nfocus"

    def test_nothing_missed(self, tmp_path):
        path = tmp_path / "neon-drift-review.txt"

        assert export_missed_words([], path) is None
        assert not path.exists()

    def test_export_reloads_as_word_list(self, tmp_path):
        path = tmp_path / "review" / "neon-drift-review.txt"

        written = export_missed_words(["sprint", "focus"], path)

        assert written == path
        assert parse_word_list(path.read_text(encoding="utf-8")).words == ["sprint", "focus"]
