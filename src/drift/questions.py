"""
Question Generator: prompts, cloze sentences, and distractors.

Difficulty policy:
- easy:   multiple choice, pool distractors, 5-second question countdown
- normal: multiple choice, misspelling distractors when the word allows it
- hard:   typed answer, no choices

Easy and normal share their prompt text on purpose. They differ only in the
question timer and the distractor strategy.
"""

from __future__ import annotations

import random
import string
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from loguru import logger

from .word_list import WordEntry

SENTENCE_TEMPLATES = (
    "I decided to {word} the plan after reviewing the risks.",
    "She tried to {word} her schedule before the meeting.",
    "They needed to {word} the issue quickly.",
    "We should {word} the details before moving on.",
    "He promised to {word} the task by tonight.",
    "The team chose to {word} the idea with care.",
    "Please {word} the instructions once more.",
    "I had to {word} my response in a hurry.",
    "The coach asked us to {word} the strategy.",
    "They will {word} the results tomorrow.",
)

BLANK = "____"
MIN_MUTATION_LENGTH = 4
MAX_MUTATION_ATTEMPTS = 40


class Difficulty(str, Enum):
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"

    @property
    def mode(self) -> AnswerMode:
        return AnswerMode.TYPE if self is Difficulty.HARD else AnswerMode.CHOICE

    @property
    def timed_questions(self) -> bool:
        """Whether each question carries its own countdown."""
        return self is Difficulty.EASY


class AnswerMode(str, Enum):
    CHOICE = "choice"
    TYPE = "type"


@dataclass(frozen=True)
class Question:
    """A single quiz turn. Regenerated every time, never persisted."""

    word: WordEntry
    mode: AnswerMode
    prompt: str
    example_sentence: str
    cloze_sentence: str
    choices: tuple[str, ...] = ()
    correct_choice_index: int = -1
    time_limit: int = 0

    @property
    def answer(self) -> str:
        return self.word.word

    @property
    def is_choice(self) -> bool:
        return self.mode is AnswerMode.CHOICE


# =============================================================================
# Sentences
# =============================================================================


def hash_word(value: str) -> int:
    """
    Stable 31-multiplier rolling hash over UTF-16 code units.

    Wraps to a signed 32-bit integer at every step and returns the
    absolute value, so indices match the browser version of the game.
    """
    data = value.encode("utf-16-le")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def sentence_for(word: str) -> tuple[str, str]:
    """Return (full sentence, cloze sentence) for a word."""
    template = SENTENCE_TEMPLATES[hash_word(word) % len(SENTENCE_TEMPLATES)]
    return template.replace("{word}", word, 1), template.replace("{word}", BLANK, 1)


# =============================================================================
# Distractors
# =============================================================================


def mutate_word(word: str, rng: random.Random) -> str:
    """
    Produce a near-miss spelling of word.

    One of: swap two adjacent letters, delete a letter, or substitute a
    letter with a random lowercase one. Words shorter than 3 characters
    are returned unchanged.
    """
    letters = list(word)
    if len(letters) < 3:
        return word

    roll = rng.randrange(3)
    if roll == 0:
        idx = rng.randrange(len(letters) - 1)
        letters[idx], letters[idx + 1] = letters[idx + 1], letters[idx]
    elif roll == 1:
        del letters[rng.randrange(len(letters))]
    else:
        letters[rng.randrange(len(letters))] = rng.choice(string.ascii_lowercase)
    return "".join(letters)


def similar_choices(word: str, total: int, rng: random.Random) -> list[str] | None:
    """
    Correct word followed by total - 1 distinct misspellings.

    Returns None when the word is too short, contains a space, or not
    enough distinct variants turn up; callers then use pool distractors.
    """
    normalized = word.strip()
    if len(normalized) < MIN_MUTATION_LENGTH or " " in normalized:
        return None

    variants: dict[str, None] = {}
    attempts = 0
    while len(variants) < total - 1 and attempts < MAX_MUTATION_ATTEMPTS:
        candidate = mutate_word(normalized, rng)
        if candidate and candidate != normalized:
            variants[candidate] = None
        attempts += 1

    if len(variants) < total - 1:
        return None
    return [normalized, *variants]


def pool_choices(
    pool: Sequence[WordEntry],
    correct: WordEntry,
    size: int,
    rng: random.Random,
) -> list[str]:
    """Correct word plus random other pool words, shuffled."""
    candidates = list(pool)
    rng.shuffle(candidates)

    choices = [correct.word]
    for entry in candidates:
        if len(choices) >= size:
            break
        if entry.word not in choices:
            choices.append(entry.word)

    rng.shuffle(choices)
    return choices


# =============================================================================
# Generator
# =============================================================================


class QuestionGenerator:
    """Builds Question objects for sampled words."""

    def __init__(
        self,
        rng: random.Random | None = None,
        choice_count: int = 4,
        question_seconds: int = 5,
    ):
        self.rng = rng or random.Random()
        self.choice_count = choice_count
        self.question_seconds = question_seconds

    def choice_size(self, pool_size: int) -> int:
        return min(self.choice_count, max(2, pool_size))

    def prompt_for(self, entry: WordEntry, difficulty: Difficulty, cloze: str) -> str:
        if difficulty is Difficulty.HARD:
            if entry.hint:
                return f"Type the word for: {entry.hint}"
            return f"Type the word that completes: {cloze}"
        if entry.hint:
            return f"Hint: {entry.hint}"
        return f"Select the correct word: {cloze}"

    def generate(
        self,
        entry: WordEntry,
        pool: Sequence[WordEntry],
        difficulty: Difficulty | str = Difficulty.NORMAL,
    ) -> Question:
        """
        Build a question for entry.

        Args:
            entry: The sampled word
            pool: Active word pool (for distractors and choice sizing)
            difficulty: easy, normal, or hard

        Returns:
            Question with prompt, sentences, and choices
        """
        difficulty = Difficulty(difficulty)
        full, cloze = sentence_for(entry.word)
        prompt = self.prompt_for(entry, difficulty, cloze)

        choices: list[str] = []
        correct_index = -1
        if difficulty.mode is AnswerMode.CHOICE:
            size = self.choice_size(len(pool))
            variants = None
            if difficulty is Difficulty.NORMAL:
                variants = similar_choices(entry.word, size, self.rng)

            if variants is not None:
                choices = list(variants)
                self.rng.shuffle(choices)
            else:
                choices = pool_choices(pool, entry, size, self.rng)
            correct_index = choices.index(entry.word)

        logger.debug(
            f"Question for {entry.word!r}: {difficulty.value}/{difficulty.mode.value}, "
            f"{len(choices)} choices"
        )
        return Question(
            word=entry,
            mode=difficulty.mode,
            prompt=prompt,
            example_sentence=full,
            cloze_sentence=cloze,
            choices=tuple(choices),
            correct_choice_index=correct_index,
            time_limit=self.question_seconds if difficulty.timed_questions else 0,
        )
