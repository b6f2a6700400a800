"""
Repositories for the supporting record types: notes, tags, word sets,
quizzes, import jobs and the progress singleton.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func

from wordbank.clock import utc_now
from wordbank.config import PROGRESS_ID
from wordbank.schemas import ImportJob, Note, Quiz, QuizQuestion, Tag, UserProgress, WordSet
from wordbank.store.models import (
    ImportJobRow,
    NoteRow,
    QuizQuestionRow,
    QuizRow,
    TagRow,
    UserProgressRow,
    WordSetRow,
)
from wordbank.store.repository import RecordRepository


class NoteRepository(RecordRepository[Note]):
    model = NoteRow
    schema = Note
    resource = "Note"

    def get_by_word_id(self, word_id: str) -> list[Note]:
        with self.store.session_scope() as session:
            return self._fetch(session, NoteRow.word_id == word_id, order_by=NoteRow.created_at)

    def update(self, note: Note) -> None:
        """Replace the note, stamping updated_at."""
        super().update(note.model_copy(update={"updated_at": utc_now()}))

    def delete_by_word_id(self, word_id: str) -> int:
        """
        Delete every note attached to a word in one transaction.

        Returns:
            Number of notes deleted
        """
        with self.store.session_scope() as session:
            return session.query(NoteRow).filter(NoteRow.word_id == word_id).delete()


class TagRepository(RecordRepository[Tag]):
    model = TagRow
    schema = Tag
    resource = "Tag"

    def get_by_label(self, label: str) -> Optional[Tag]:
        """Find a tag by label, ignoring case."""
        with self.store.session_scope() as session:
            tags = self._fetch(session, func.lower(TagRow.label) == label.strip().lower())
        return tags[0] if tags else None

    def increment_word_count(self, tag_id: str) -> None:
        self._adjust_word_count(tag_id, +1)

    def decrement_word_count(self, tag_id: str) -> None:
        self._adjust_word_count(tag_id, -1)

    def _adjust_word_count(self, tag_id: str, delta: int) -> None:
        # Unknown tag ids are ignored
        with self.store.session_scope() as session:
            row = session.get(TagRow, tag_id)
            if row is not None:
                row.word_count = max(0, row.word_count + delta)


class WordSetRepository(RecordRepository[WordSet]):
    model = WordSetRow
    schema = WordSet
    resource = "WordSet"


class QuizRepository(RecordRepository[Quiz]):
    """Quizzes plus their questions (stored in a separate table)."""
    model = QuizRow
    schema = Quiz
    resource = "Quiz"

    def __init__(self, store):
        super().__init__(store)
        self.questions = _QuizQuestionRepository(store)

    def get_latest(self) -> Optional[Quiz]:
        """Most recently created quiz, or None."""
        with self.store.session_scope() as session:
            row = session.query(QuizRow).order_by(QuizRow.created_at.desc()).first()
            return self._to_record(row) if row is not None else None

    # ---- Questions ----

    def create_question(self, question: QuizQuestion) -> str:
        return self.questions.create(question)

    def get_question_by_id(self, question_id: str) -> Optional[QuizQuestion]:
        return self.questions.get_by_id(question_id)

    def update_question(self, question: QuizQuestion) -> None:
        self.questions.update(question)

    def delete_question(self, question_id: str) -> None:
        self.questions.delete(question_id)

    def get_questions_by_quiz_id(self, quiz_id: str) -> list[QuizQuestion]:
        with self.store.session_scope() as session:
            return self.questions._fetch(session, QuizQuestionRow.quiz_id == quiz_id)

    def delete_questions_by_quiz_id(self, quiz_id: str) -> int:
        with self.store.session_scope() as session:
            return session.query(QuizQuestionRow).filter(QuizQuestionRow.quiz_id == quiz_id).delete()


class _QuizQuestionRepository(RecordRepository[QuizQuestion]):
    model = QuizQuestionRow
    schema = QuizQuestion
    resource = "QuizQuestion"


class ImportJobRepository(RecordRepository[ImportJob]):
    model = ImportJobRow
    schema = ImportJob
    resource = "ImportJob"

    def get_latest(self) -> Optional[ImportJob]:
        """Most recently started import job, or None."""
        with self.store.session_scope() as session:
            row = session.query(ImportJobRow).order_by(ImportJobRow.started_at.desc()).first()
            return self._to_record(row) if row is not None else None


class ProgressRepository(RecordRepository[UserProgress]):
    model = UserProgressRow
    schema = UserProgress
    resource = "UserProgress"

    def get(self) -> Optional[UserProgress]:
        return self.get_by_id(PROGRESS_ID)

    def save(self, progress: UserProgress) -> None:
        """Insert or replace the singleton."""
        if self.get() is None:
            self.create(progress)
        else:
            self.update(progress)
