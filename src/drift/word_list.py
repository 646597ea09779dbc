"""
Word List: raw text ingestion.

Turns a pasted or loaded word list into an ordered, deduplicated
sequence of WordEntry values.

Format:
- One entry per line
- Optional hint after the first " - " separator ("run - to move fast")
- Blank lines are allowed and counted
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

HINT_SEPARATOR = " - "


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True)
class WordEntry:
    """A single quizzable word with an optional hint."""

    id: str
    word: str
    hint: str | None = None


@dataclass
class ParseResult:
    """Parsed entries plus cleanup statistics."""

    entries: list[WordEntry] = field(default_factory=list)
    empty_line_count: int = 0
    duplicate_count: int = 0
    total_line_count: int = 0

    @property
    def words(self) -> list[str]:
        return [entry.word for entry in self.entries]

    def preview(self, limit: int = 6) -> list[WordEntry]:
        """First few entries for display."""
        return self.entries[:limit]


# =============================================================================
# Parsing
# =============================================================================


def parse_word_list(
    raw_text: str,
    remove_empty_lines: bool = True,
    remove_duplicates: bool = True,
) -> ParseResult:
    """
    Parse raw multi-line text into word entries.

    Args:
        raw_text: Text with one word per line
        remove_empty_lines: Skip blank lines (they never produce entries either way)
        remove_duplicates: Drop repeated words, compared case-insensitively

    Returns:
        ParseResult with entries and counts
    """
    if not raw_text.strip():
        return ParseResult()

    lines = raw_text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    result = ParseResult(total_line_count=len(lines))
    seen: set[str] = set()

    for index, line in enumerate(lines):
        trimmed = line.strip()
        if not trimmed:
            result.empty_line_count += 1
            if remove_empty_lines:
                continue

        word_part, _, hint_part = trimmed.partition(HINT_SEPARATOR)
        word = word_part.strip()
        if not word:
            continue

        key = word.lower()
        if remove_duplicates and key in seen:
            result.duplicate_count += 1
            continue
        seen.add(key)

        hint = hint_part.strip()
        result.entries.append(WordEntry(id=f"{key}-{index}", word=word, hint=hint or None))

    logger.debug(
        f"Parsed {len(result.entries)} entries from {result.total_line_count} lines "
        f"({result.empty_line_count} empty, {result.duplicate_count} duplicates)"
    )
    return result


def load_word_file(
    path: Path,
    remove_empty_lines: bool = True,
    remove_duplicates: bool = True,
) -> ParseResult:
    """Read a UTF-8 word list file and parse it."""
    text = Path(path).read_text(encoding="utf-8")
    result = parse_word_list(text, remove_empty_lines, remove_duplicates)
    logger.info(f"Loaded {len(result.entries)} words from {path}")
    return result
