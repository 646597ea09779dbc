"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.drift.mastery import DailyGoalStore, MasteryStore  # noqa: E402
from src.drift.state_store import MemoryKeyValueStore  # noqa: E402
from src.drift.word_list import WordEntry, parse_word_list  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def kv():
    return MemoryKeyValueStore()


@pytest.fixture
def store(kv):
    return MasteryStore(kv)


@pytest.fixture
def goals(kv):
    return DailyGoalStore(kv, today=lambda: "2026-10-19")


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def sample_text():
    """A small word list with hints, a duplicate, and blank lines."""
    return "\n".join([
        "focus - to concentrate attention",
        "",
        "sprint - run at full speed",
        "Focus",
        "glimmer",
        "   ",
        "resolve - to settle - or decide firmly",
    ])


@pytest.fixture
def pool(sample_text):
    return parse_word_list(sample_text).entries


@pytest.fixture
def two_word_pool():
    return [
        WordEntry(id="alpha-0", word="alpha"),
        WordEntry(id="beta-1", word="beta"),
    ]
