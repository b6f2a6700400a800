"""
Pytest Configuration and Fixtures.

Every test gets a fresh in-memory SQLite record store.
"""
from datetime import datetime, timezone

import pytest

from wordbank.runtime import Wordbank
from wordbank.schemas import Word

T0 = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


class FixedClock:
    """Callable clock that tests can move forward."""

    def __init__(self, now=T0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, delta):
        self.now = self.now + delta


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def app(clock):
    with Wordbank("sqlite://", clock=clock) as wordbank:
        yield wordbank


@pytest.fixture
def store(app):
    return app.store


@pytest.fixture
def words(app):
    return app.words


@pytest.fixture
def make_word(words):
    """Create and persist a word, returning the stored record."""
    def _make(lemma="apple", **fields):
        word = Word(lemma=lemma, **fields)
        words.create(word)
        return words.get_by_id(word.id)
    return _make
