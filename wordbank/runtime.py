"""
Application wiring.

Builds the record store once and hands the same instance to every
repository and service.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from wordbank.analytics import ProgressService, StatisticsService, StreakService
from wordbank.clock import utc_now
from wordbank.importer import ImportService
from wordbank.quizzes import QuizService
from wordbank.reminder import ReviewReminder
from wordbank.repos import (
    ImportJobRepository,
    NoteRepository,
    ProgressRepository,
    QuizRepository,
    TagRepository,
    WordSetRepository,
)
from wordbank.review import ReviewEngine
from wordbank.schemas import Word
from wordbank.sessions import LearningSessionTracker
from wordbank.store import RecordStore
from wordbank.word_deletion import WordDeletionService
from wordbank.word_filter import filter_words
from wordbank.word_repo import WordRepository
from wordbank.word_status import WordStatusService


class Wordbank:
    """
    Owns the store and every repository/service built on it.

    Usable as a context manager; close() releases the connection pool.
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        clock: Callable[[], datetime] = utc_now,
        echo: bool = False
    ):
        self.store = RecordStore(database_url, echo=echo)
        self.store.init_db()

        # Repositories
        self.words = WordRepository(self.store)
        self.notes = NoteRepository(self.store)
        self.tags = TagRepository(self.store)
        self.word_sets = WordSetRepository(self.store)
        self.quizzes = QuizRepository(self.store)
        self.import_jobs = ImportJobRepository(self.store)
        self.progress = ProgressRepository(self.store)

        # Services
        self.review = ReviewEngine(self.words)
        self.sessions = LearningSessionTracker(self.store, clock=clock)
        self.word_status = WordStatusService(self.words)
        self.word_deletion = WordDeletionService(self.words, self.notes, self.tags)
        self.quiz = QuizService(self.words, self.quizzes, clock=clock)
        self.statistics = StatisticsService(self.sessions.sessions, self.quizzes)
        self.streak = StreakService(self.statistics, self.progress)
        self.progress_service = ProgressService(self.words, self.progress, self.statistics, self.streak)
        self.importer = ImportService(self.words, self.import_jobs)
        self.reminder = ReviewReminder(self.review)

    def filter_words(self, **options) -> list[Word]:
        """List-view filter over the whole library (see word_filter.filter_words)."""
        return filter_words(self.words.get_all(), **options)

    def close(self) -> None:
        self.store.dispose()

    def __enter__(self) -> "Wordbank":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
