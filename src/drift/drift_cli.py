"""
Neon Drift: Word Runner CLI.

A Rich terminal front-end for adaptive vocabulary drills.

Commands:
- drift load     - Parse a word list and show cleanup stats
- drift play     - Run a drill session over a word list
- drift stats    - Show the daily goal and weakest words
- drift reset    - Forget all mastery records
"""
from __future__ import annotations

import random
import sys
import time
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from config import Settings, get_settings

from .errors import InsufficientWordPoolError
from .evaluator import AnswerResult
from .mastery import DailyGoal, DailyGoalStore, MasteryStore, SelfRating
from .questions import Difficulty, Question
from .report import SessionReport, export_missed_words
from .runner import DrillRunner
from .session import SESSION_LENGTHS, SessionState, parse_session_length
from .state_store import SQLiteKeyValueStore
from .word_list import ParseResult, load_word_file

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="drift",
    help="Neon Drift: adaptive vocabulary runner",
    no_args_is_help=True,
)
console = Console()


# =============================================================================
# Styling
# =============================================================================

STYLES = {
    "correct": "bold green",
    "incorrect": "bold red",
    "info": "bold cyan",
    "warning": "bold yellow",
    "dim": "dim",
}

COMMANDS = ("q", "p", "m")

RATING_KEYS = {
    "k": SelfRating.KNOW,
    "u": SelfRating.UNSURE,
    "n": SelfRating.NEUTRAL,
}


def mastery_color(mastery: float) -> str:
    if mastery < 0.4:
        return "red"
    if mastery < 0.7:
        return "yellow"
    return "green"


class TerminalAnnouncer:
    """
    Audio cue after every verdict while sound is on.

    A miss rings the terminal bell; a correct answer prints a short chime.
    """

    def __init__(self, enabled: bool = True, output: Console | None = None):
        self.enabled = enabled
        self.output = output or console

    def announce(self, word: str, correct: bool) -> None:
        if not self.enabled:
            return
        if correct:
            self.output.print("[bold green]♪[/bold green]", end=" ")
        else:
            self.output.bell()


# =============================================================================
# Wiring
# =============================================================================


def open_stores(settings: Settings) -> tuple[SQLiteKeyValueStore, MasteryStore, DailyGoalStore]:
    kv = SQLiteKeyValueStore(settings.resolved_db_path)
    store = MasteryStore(kv, key=settings.stats_key)
    goals = DailyGoalStore(kv, key=settings.daily_key, target=settings.daily_target)
    return kv, store, goals


def read_word_list(path: Path, keep_empty: bool, keep_duplicates: bool) -> ParseResult:
    try:
        return load_word_file(
            path,
            remove_empty_lines=not keep_empty,
            remove_duplicates=not keep_duplicates,
        )
    except (OSError, UnicodeDecodeError) as exc:
        console.print(f"[red]Could not read {path}: {exc}[/red]")
        raise typer.Exit(1)


# =============================================================================
# Display Helpers
# =============================================================================


def display_parse_result(result: ParseResult, path: Path) -> None:
    console.print(f"\n[bold cyan]{path.name}[/bold cyan]")
    console.print(f"  Lines: {result.total_line_count}")
    console.print(f"  Words: {len(result.entries)}")
    console.print(f"  Empty lines: {result.empty_line_count}")
    console.print(f"  Duplicates removed: {result.duplicate_count}")

    preview = result.preview()
    if preview:
        table = Table(title="Preview")
        table.add_column("Word", style="bold")
        table.add_column("Hint", style="dim")
        for entry in preview:
            table.add_row(entry.word, entry.hint or "")
        console.print(table)


def display_goal(goal: DailyGoal) -> None:
    shown = min(goal.correct, goal.target)
    color = "green" if goal.reached else "cyan"
    console.print(f"[{color}]Daily goal: {shown}/{goal.target}[/{color}]")


def display_status(state: SessionState, zen: bool) -> None:
    clock = "zen" if zen else f"{state.time_remaining // 60}:{state.time_remaining % 60:02d}"
    console.print(
        f"[dim]Time {clock}  |  Energy {state.energy}  |  Score {state.score}  |  "
        f"Streak {state.streak}  |  Combo x{state.combo_multiplier}[/dim]"
    )


def display_question(question: Question) -> None:
    content = question.prompt
    if question.is_choice:
        content += "\n"
        for i, choice in enumerate(question.choices, 1):
            content += f"\n  [{i}] {choice}"

    title = "TYPE THE WORD" if not question.is_choice else "SELECT THE WORD"
    if question.time_limit:
        title += f"  ({question.time_limit}s)"

    console.print(Panel(content, title=f"[bold cyan]{title}[/bold cyan]", border_style="cyan", padding=(1, 2)))


def display_result(result: AnswerResult, question: Question) -> None:
    style = STYLES["correct"] if result.correct else STYLES["incorrect"]
    icon = "[green]✓[/green]" if result.correct else "[red]✗[/red]"
    console.print(Panel(
        f"{icon} {result.feedback}\n\n[dim]{question.example_sentence}[/dim]",
        border_style=style,
        padding=(0, 2),
    ))


def display_summary(report: SessionReport) -> None:
    state = report.state
    console.print("\n")
    console.print(Panel(
        f"[bold]Session Complete![/bold]\n\n"
        f"Accuracy: {report.accuracy_percent}%\n"
        f"Correct: {state.correct_count}\n"
        f"Longest streak: {state.longest_streak}\n"
        f"Score: {state.score}",
        title="Summary",
        border_style="green",
    ))

    if report.weak_words:
        table = Table(title="Top weak words")
        table.add_column("Word", style="bold")
        table.add_column("Mastery")
        for word, mastery in report.weak_words:
            color = mastery_color(mastery)
            table.add_row(word, f"[{color}]{round(mastery * 100)}%[/{color}]")
        console.print(table)

    if report.missed_words:
        console.print(f"\n{len(report.missed_words)} words ready to export.")
    else:
        console.print("\nNo missed words this run.")

    if report.daily_goal is not None:
        display_goal(report.daily_goal)


# =============================================================================
# Play Loop
# =============================================================================


class WallClock:
    """Turns elapsed wall-clock time into whole-second ticks."""

    def __init__(self, runner: DrillRunner):
        self.runner = runner
        self.carry = 0.0
        self.started = time.monotonic()

    def restart(self) -> None:
        self.started = time.monotonic()

    def advance(self) -> None:
        now = time.monotonic()
        self.carry += now - self.started
        self.started = now
        whole = int(self.carry)
        self.carry -= whole
        if whole:
            self.runner.tick(whole)


def parse_command(raw: str, is_choice: bool) -> str | None:
    """
    Recognize a session command ('q', 'p', 'm') in a reply.

    Typed questions need the ':' prefix so single-letter words stay answerable.
    """
    text = raw.strip().lower()
    if text.startswith(":"):
        text = text[1:]
    elif not is_choice:
        return None
    return text if text in COMMANDS else None


def _ask_answer(runner: DrillRunner, question: Question, clock: WallClock, announcer: TerminalAnnouncer) -> AnswerResult | None:
    """
    Prompt until the question gets a verdict.

    Returns None when the session ended before a verdict.
    """
    if question.is_choice:
        hint = f"[1-{len(question.choices)}]"
        console.print("[dim]'p'=pause, 'm'=sound, 'q'=end session[/dim]")
    else:
        hint = "[answer]"
        console.print("[dim]':p'=pause, ':m'=sound, ':q'=end session[/dim]")

    clock.advance()
    while not runner.engine.is_ended:
        raw = Prompt.ask(f">_ {hint}", default="", show_default=False)
        clock.advance()

        if runner.engine.is_ended:
            return None
        if runner.evaluator.answered:
            return runner.evaluator.last_result

        command = parse_command(raw, question.is_choice)
        if command == "q":
            runner.end()
            return None
        if command == "p":
            runner.pause()
            Prompt.ask("[yellow]Paused.[/yellow] Press Enter to resume", default="", show_default=False)
            runner.resume()
            clock.restart()
            continue
        if command == "m":
            announcer.enabled = not announcer.enabled
            console.print(f"[dim]Sound {'on' if announcer.enabled else 'off'}[/dim]")
            continue

        reply = raw.strip()
        if question.is_choice:
            if not reply.isdigit() or not 1 <= int(reply) <= len(question.choices):
                console.print(f"[yellow]Enter a number {hint}[/yellow]")
                continue
            return runner.answer_choice(int(reply) - 1)

        if not reply:
            continue
        return runner.answer_text(reply)
    return None


def run_session(runner: DrillRunner, minutes: int | None, announcer: TerminalAnnouncer) -> SessionReport:
    runner.start(minutes)
    clock = WallClock(runner)

    try:
        while runner.engine.is_running:
            question = runner.next_question()
            console.print()
            display_status(runner.state, runner.engine.zen)
            display_question(question)

            result = _ask_answer(runner, question, clock, announcer)
            if result is None:
                break
            display_result(result, question)

            if runner.engine.is_ended:
                break

            rating = Prompt.ask(
                "[dim]How well do you know it? [k]now / [u]nsure / [n]eutral[/dim]",
                choices=list(RATING_KEYS),
                default="n",
                show_choices=False,
            )
            runner.rate(RATING_KEYS[rating])
            clock.advance()
    except KeyboardInterrupt:
        console.print("\n\n[yellow]Session interrupted.[/yellow]")

    runner.end()
    return runner.report()


# =============================================================================
# Commands
# =============================================================================


@app.command()
def load(
    path: Path = typer.Argument(..., help="Word list file (one word per line)"),
    keep_empty: bool = typer.Option(False, "--keep-empty", help="Keep blank lines"),
    keep_duplicates: bool = typer.Option(False, "--keep-duplicates", help="Keep repeated words"),
) -> None:
    """Parse a word list and show what would be drilled."""
    result = read_word_list(path, keep_empty, keep_duplicates)
    display_parse_result(result, path)


@app.command()
def play(
    path: Path = typer.Argument(..., help="Word list file (one word per line)"),
    difficulty: Optional[Difficulty] = typer.Option(
        None,
        "--difficulty", "-d",
        help="easy, normal, or hard",
    ),
    length: Optional[str] = typer.Option(
        None,
        "--length", "-l",
        help=f"Session length: {', '.join(str(v) for v in SESSION_LENGTHS)} (minutes or zen)",
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for repeatable drills"),
    export: Optional[Path] = typer.Option(
        None,
        "--export", "-o",
        help="Write missed words to this file when the session ends",
    ),
    keep_duplicates: bool = typer.Option(False, "--keep-duplicates", help="Keep repeated words"),
) -> None:
    """
    Start a drill session.

    Words you struggle with come back more often. The session ends when
    the clock runs out or your energy hits zero.
    """
    settings = get_settings()
    result = read_word_list(path, keep_empty=False, keep_duplicates=keep_duplicates)

    try:
        minutes = parse_session_length(length if length is not None else settings.default_session_minutes)
    except ValueError as exc:
        console.print(f"[red]Invalid session length: {exc}[/red]")
        raise typer.Exit(1)

    kv, store, goals = open_stores(settings)
    announcer = TerminalAnnouncer(settings.sound)
    runner = DrillRunner(
        result.entries,
        store,
        goals,
        difficulty=difficulty or settings.default_difficulty,
        rng=random.Random(seed),
        announcer=announcer,
        choice_count=settings.choice_count,
        question_seconds=settings.question_seconds,
    )

    console.print("\n[bold cyan]Neon Drift[/bold cyan] - Word Runner", style="bold")
    console.print("=" * 40)
    display_goal(goals.current())

    try:
        report = run_session(runner, minutes, announcer)
    except InsufficientWordPoolError as exc:
        console.print(f"\n[red]{exc}[/red]")
        kv.close()
        raise typer.Exit(1)

    display_summary(report)

    if report.missed_words:
        target = export
        if target is None and Confirm.ask("Download missed words?", default=False):
            target = Path(settings.export_filename)
        if target is not None:
            written = export_missed_words(report.missed_words, target)
            console.print(f"[green]Saved review list to {written}[/green]")

    kv.close()


@app.command()
def stats(
    path: Optional[Path] = typer.Argument(None, help="Limit to the words in this list"),
    limit: int = typer.Option(6, "--limit", "-n", help="Number of weak words to show"),
) -> None:
    """Show the daily goal and the weakest words."""
    settings = get_settings()
    kv, store, goals = open_stores(settings)

    console.print("\n[bold cyan]Learning Statistics[/bold cyan]")
    console.print("=" * 40)
    display_goal(goals.current())
    console.print(f"Words tracked: {len(store)}")

    if path is not None:
        words = [entry.word for entry in read_word_list(path, False, False).entries]
    else:
        words = list(store.snapshot())

    weak = store.weakest(words, limit=limit)
    if weak:
        table = Table(title="Weakest words")
        table.add_column("Word", style="bold")
        table.add_column("Mastery")
        table.add_column("Seen", justify="right")
        table.add_column("Correct", justify="right")
        table.add_column("Missed", justify="right")
        table.add_column("Accuracy", justify="right")
        for word, record in weak:
            color = mastery_color(record.mastery)
            table.add_row(
                word,
                f"[{color}]{round(record.mastery * 100)}%[/{color}]",
                str(record.exposures),
                str(record.correct),
                str(record.incorrect),
                f"{round(record.accuracy * 100)}%",
            )
        console.print(table)
    else:
        console.print("[dim]No words tracked yet.[/dim]")

    kv.close()


@app.command()
def reset(
    confirm: bool = typer.Option(
        False,
        "--yes", "-y",
        help="Skip confirmation",
    ),
) -> None:
    """Forget all mastery records for a fresh start."""
    if not confirm and not Confirm.ask("Reset ALL mastery records? This cannot be undone!", default=False):
        raise typer.Exit(0)

    kv, store, _ = open_stores(get_settings())
    count = store.reset()
    kv.close()
    console.print(f"[green]Reset {count} mastery records.[/green]")


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """CLI entry point."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=get_settings().log_level.upper(),
        format="<level>{message}</level>",
    )

    app()


if __name__ == "__main__":
    main()
