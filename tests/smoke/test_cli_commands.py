"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import os
import subprocess
import sys
from pathlib import Path

import pytest

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


@pytest.fixture
def data_dir(tmp_path):
    path = tmp_path / "state"
    path.mkdir()
    return path


@pytest.fixture
def word_file(tmp_path, sample_text):
    path = tmp_path / "words.txt"
    path.write_text(sample_text, encoding="utf-8")
    return path


def run_cli_command(
    args: list[str],
    data_dir: Path,
    stdin: str = "",
    timeout: int = 30,
) -> tuple[int, str, str]:
    """
    Run a CLI command and return exit code, stdout, stderr.

    Args:
        args: Arguments after 'python -m src.drift'
        data_dir: Isolated state directory
        stdin: Text fed to interactive prompts
        timeout: Maximum time to wait

    Returns:
        Tuple of (exit_code, stdout, stderr)
    """
    env = dict(os.environ)
    env["DRIFT_DATA_DIR"] = str(data_dir)
    env["DRIFT_SOUND"] = "false"
    env["COLUMNS"] = "120"

    result = subprocess.run(
        [sys.executable, "-m", "src.drift", *args],
        cwd=PROJECT_ROOT,
        env=env,
        input=stdin,
        capture_output=True,
        text=True,
        timeout=timeout,
    )

    return result.returncode, result.stdout, result.stderr


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self, data_dir):
        code, stdout, stderr = run_cli_command(["--help"], data_dir)

        assert code == 0, f"Help failed: {stderr}"
        assert "Commands" in stdout
        assert "play" in stdout

    @pytest.mark.parametrize("command", ["load", "play", "stats", "reset"])
    def test_command_help(self, command, data_dir):
        code, stdout, stderr = run_cli_command([command, "--help"], data_dir)

        assert code == 0, f"{command} help failed: {stderr}"


class TestCLILoad:
    def test_load_shows_cleanup_counts(self, word_file, data_dir):
        code, stdout, stderr = run_cli_command(["load", str(word_file)], data_dir)

        assert code == 0, f"Load failed: {stderr}"
        assert "Words: 4" in stdout
        assert "Duplicates removed: 1" in stdout
        assert "glimmer" in stdout

    def test_load_missing_file(self, tmp_path, data_dir):
        code, stdout, _ = run_cli_command(["load", str(tmp_path / "nope.txt")], data_dir)

        assert code == 1
        assert "Could not read" in stdout


class TestCLIPlay:
    def test_quit_immediately(self, word_file, data_dir):
        code, stdout, stderr = run_cli_command(
            ["play", str(word_file), "--seed", "1", "--length", "5"],
            data_dir,
            stdin="q\n",
        )

        assert code == 0, f"Play failed: {stderr}"
        assert "Session Complete" in stdout
        assert "No missed words this run." in stdout

    def test_miss_and_export(self, word_file, data_dir, tmp_path):
        export = tmp_path / "review.txt"

        code, stdout, stderr = run_cli_command(
            ["play", str(word_file), "-d", "hard", "-l", "zen", "--seed", "2", "-o", str(export)],
            data_dir,
            stdin="definitely-wrong\nn\n:q\n",
        )

        assert code == 0, f"Play failed: {stderr}"
        assert "Not quite" in stdout
        missed = export.read_text(encoding="utf-8").splitlines()
        assert len(missed) == 1
        assert missed[0] in {"focus", "sprint", "glimmer", "resolve"}

    def test_single_word_list_is_rejected(self, tmp_path, data_dir):
        path = tmp_path / "one.txt"
        path.write_text("solo\n", encoding="utf-8")

        code, stdout, _ = run_cli_command(["play", str(path)], data_dir, stdin="q\n")

        assert code == 1
        assert "at least 2 words" in stdout

    def test_bad_length(self, word_file, data_dir):
        code, stdout, _ = run_cli_command(["play", str(word_file), "-l", "forever"], data_dir)

        assert code == 1
        assert "Invalid session length" in stdout


class TestCLIStats:
    def test_stats_after_play(self, word_file, data_dir):
        run_cli_command(
            ["play", str(word_file), "-d", "hard", "-l", "zen", "--seed", "3"],
            data_dir,
            stdin="definitely-wrong\nn\n:q\n",
        )

        code, stdout, stderr = run_cli_command(["stats", str(word_file)], data_dir)

        assert code == 0, f"Stats failed: {stderr}"
        assert "Daily goal: 0/30" in stdout
        assert "Weakest words" in stdout

    def test_reset(self, data_dir):
        code, stdout, stderr = run_cli_command(["reset", "--yes"], data_dir)

        assert code == 0, f"Reset failed: {stderr}"
        assert "Reset 0 mastery records" in stdout
