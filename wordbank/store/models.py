"""
SQLAlchemy ORM models for the record store.

One table per entity type, keyed by the record id. Column names match the
pydantic field names in wordbank.schemas so rows map 1:1 onto records.

Timestamps are stored as fixed-width UTC ISO strings (see wordbank.clock),
which keeps the review_due_at index range-comparable.
"""

from sqlalchemy import JSON, Boolean, Column, Index, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()

ID_LENGTH = 64
TIMESTAMP_LENGTH = 40


class WordRow(Base):
    """
    Persistent state for a single word.

    Secondary indexes on status and review_due_at back the status and
    due-date range queries.
    """
    __tablename__ = "words"
    __timestamp_columns__ = ("last_studied_at", "review_due_at")

    id = Column(String(ID_LENGTH), primary_key=True, nullable=False)

    # Lexical fields
    lemma = Column(String(255), nullable=False)
    part_of_speech = Column(String(64), nullable=False, default="")
    phonetics = Column(JSON, nullable=False, default=list)
    audio_urls = Column(JSON, nullable=False, default=list)
    definition_en = Column(Text, nullable=False, default="")
    definition_zh = Column(Text, nullable=False, default="")
    examples = Column(JSON, nullable=False, default=list)
    synonyms = Column(JSON, nullable=False, default=list)
    antonyms = Column(JSON, nullable=False, default=list)

    # Learning state
    status = Column(String(20), nullable=False)
    needs_review = Column(Boolean, nullable=False, default=False)
    last_studied_at = Column(String(TIMESTAMP_LENGTH), nullable=True)
    review_due_at = Column(String(TIMESTAMP_LENGTH), nullable=True)

    # Bookkeeping
    notes = Column(Text, nullable=False, default="")
    source = Column(String(20), nullable=False)
    info_completeness = Column(String(32), nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    set_ids = Column(JSON, nullable=False, default=list)

    __table_args__ = (
        Index("idx_words_status", "status"),
        Index("idx_words_review_due", "review_due_at"),
    )

    def __repr__(self):
        return f"<WordRow({self.id}, {self.lemma!r}, {self.status})>"


class LearningSessionRow(Base):
    """A study/review session with its append-only action log."""
    __tablename__ = "learning_sessions"
    __timestamp_columns__ = ("started_at", "ended_at")

    id = Column(String(ID_LENGTH), primary_key=True, nullable=False)
    type = Column(String(20), nullable=False)
    word_ids = Column(JSON, nullable=False, default=list)
    started_at = Column(String(TIMESTAMP_LENGTH), nullable=False)
    ended_at = Column(String(TIMESTAMP_LENGTH), nullable=True)  # NULL while active
    duration_ms = Column(Integer, nullable=False, default=0)
    actions = Column(JSON, nullable=False, default=list)

    def __repr__(self):
        return f"<LearningSessionRow({self.id}, {self.type}, ended={self.ended_at})>"


class UserProgressRow(Base):
    """Singleton progress snapshot (id is always 'progress')."""
    __tablename__ = "user_progress"
    __timestamp_columns__ = ("last_activity_at",)

    id = Column(String(ID_LENGTH), primary_key=True, nullable=False)
    total_words = Column(Integer, nullable=False, default=0)
    mastered_words = Column(Integer, nullable=False, default=0)
    streak_days = Column(Integer, nullable=False, default=0)
    total_study_minutes = Column(Integer, nullable=False, default=0)
    last_activity_at = Column(String(TIMESTAMP_LENGTH), nullable=False)
    heatmap = Column(JSON, nullable=False, default=dict)


class TagRow(Base):
    __tablename__ = "tags"
    __timestamp_columns__ = ()

    id = Column(String(ID_LENGTH), primary_key=True, nullable=False)
    label = Column(String(255), nullable=False)
    color = Column(String(32), nullable=False)
    word_count = Column(Integer, nullable=False, default=0)


class NoteRow(Base):
    __tablename__ = "notes"
    __timestamp_columns__ = ("created_at", "updated_at")

    id = Column(String(ID_LENGTH), primary_key=True, nullable=False)
    word_id = Column(String(ID_LENGTH), nullable=False)
    content = Column(Text, nullable=False, default="")
    created_at = Column(String(TIMESTAMP_LENGTH), nullable=False)
    updated_at = Column(String(TIMESTAMP_LENGTH), nullable=False)

    __table_args__ = (
        Index("idx_notes_word_id", "word_id"),
    )


class WordSetRow(Base):
    __tablename__ = "word_sets"
    __timestamp_columns__ = ("created_at",)

    id = Column(String(ID_LENGTH), primary_key=True, nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    created_at = Column(String(TIMESTAMP_LENGTH), nullable=False)
    word_ids = Column(JSON, nullable=False, default=list)
    color_token = Column(String(32), nullable=False)


class QuizRow(Base):
    __tablename__ = "quizzes"
    __timestamp_columns__ = ("created_at",)

    id = Column(String(ID_LENGTH), primary_key=True, nullable=False)
    mode = Column(String(32), nullable=False)
    created_at = Column(String(TIMESTAMP_LENGTH), nullable=False)
    question_ids = Column(JSON, nullable=False, default=list)
    score_percent = Column(Integer, nullable=False, default=0)


class QuizQuestionRow(Base):
    __tablename__ = "quiz_questions"
    __timestamp_columns__ = ()

    id = Column(String(ID_LENGTH), primary_key=True, nullable=False)
    quiz_id = Column(String(ID_LENGTH), nullable=False)
    word_id = Column(String(ID_LENGTH), nullable=False)
    prompt = Column(Text, nullable=False)
    choices = Column(JSON, nullable=False, default=list)
    correct_answer = Column(Text, nullable=False)
    user_answer = Column(Text, nullable=False, default="")
    is_correct = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        Index("idx_quiz_questions_quiz_id", "quiz_id"),
    )


class ImportJobRow(Base):
    __tablename__ = "import_jobs"
    __timestamp_columns__ = ("started_at", "ended_at")

    id = Column(String(ID_LENGTH), primary_key=True, nullable=False)
    filename = Column(String(255), nullable=False)
    total_words = Column(Integer, nullable=False)
    processed_words = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False)
    errors = Column(JSON, nullable=False, default=list)  # [{row, message}]
    started_at = Column(String(TIMESTAMP_LENGTH), nullable=False)
    ended_at = Column(String(TIMESTAMP_LENGTH), nullable=True)
