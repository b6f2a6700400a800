"""
Pydantic models for the word library.

These models define the records held by the record store. Every mutation
builds a new model and replaces the whole stored record.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from wordbank.clock import ensure_utc, utc_now
from wordbank.config import PROGRESS_ID


def generate_id() -> str:
    """
    Generate a globally unique record ID (UUID).

    Returns:
        UUID string
    """
    return str(uuid.uuid4())


class WordStatus(str, Enum):
    """Learning state of a word."""
    UNLEARNED = "unlearned"
    LEARNING = "learning"
    MASTERED = "mastered"


class WordSource(str, Enum):
    """Where a word entered the library."""
    IMPORTED = "imported"  # CSV import pipeline
    MANUAL = "manual"


class InfoCompleteness(str, Enum):
    COMPLETE = "complete"
    MISSING_DEFINITION = "missing-definition"
    MISSING_AUDIO = "missing-audio"


class SessionType(str, Enum):
    STUDY = "study"
    REVIEW = "review"


class SessionActionKind(str, Enum):
    WORD_VIEWED = "word-viewed"
    WORD_REVIEWED = "word-reviewed"
    QUIZ_STARTED = "quiz-started"
    QUIZ_COMPLETED = "quiz-completed"


class QuizMode(str, Enum):
    MULTIPLE_CHOICE = "multiple-choice"
    FILL_IN = "fill-in"
    SPELL = "spell"


class ImportJobStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    FAILED = "failed"
    COMPLETED = "completed"


class Record(BaseModel):
    """Base for every stored record: an opaque id plus UTC timestamps."""
    model_config = ConfigDict(use_enum_values=True)

    id: str = Field(default_factory=generate_id)

    @field_validator("*", mode="after")
    @classmethod
    def _normalize_timestamps(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            return ensure_utc(value)
        return value


# ---- Word ----

class Word(Record):
    """
    A single entry in the personal word library.

    Learning state (status, needs_review, last_studied_at, review_due_at)
    is mutated only through full-record replacement.
    """
    # Lexical fields
    lemma: str = Field(..., description="Canonical form, trimmed, case preserved")
    part_of_speech: str = ""
    phonetics: list[str] = Field(default_factory=list)
    audio_urls: list[str] = Field(default_factory=list)
    definition_en: str = ""
    definition_zh: str = Field(default="", description="Localized definition")
    examples: list[str] = Field(default_factory=list)
    synonyms: list[str] = Field(default_factory=list)
    antonyms: list[str] = Field(default_factory=list)

    # Learning state
    status: WordStatus = WordStatus.UNLEARNED
    needs_review: bool = False
    last_studied_at: Optional[datetime] = None
    review_due_at: Optional[datetime] = None

    # Bookkeeping
    notes: str = ""
    source: WordSource = WordSource.MANUAL
    info_completeness: InfoCompleteness = InfoCompleteness.MISSING_DEFINITION
    tags: list[str] = Field(default_factory=list)
    set_ids: list[str] = Field(default_factory=list)

    @field_validator("lemma")
    @classmethod
    def _lemma_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("lemma must not be empty")
        return value


def new_word(lemma: str, source: WordSource = WordSource.MANUAL, **fields: Any) -> Word:
    """
    Create a word in its initial learning state.

    Args:
        lemma: Canonical form (trimmed)
        source: imported or manual
        **fields: Optional lexical fields (definition_en, phonetics, ...)

    Returns:
        New Word with a fresh id, status=unlearned and no schedule
    """
    return Word(
        lemma=lemma,
        source=source,
        status=WordStatus.UNLEARNED,
        needs_review=False,
        last_studied_at=None,
        review_due_at=None,
        **fields,
    )


# ---- Learning sessions ----

class SessionAction(BaseModel):
    """One timestamped entry in a session's action log."""
    model_config = ConfigDict(use_enum_values=True)

    kind: SessionActionKind
    timestamp: datetime
    word_id: Optional[str] = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("timestamp")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class LearningSession(Record):
    """A bounded interval of study or review activity."""
    type: SessionType
    word_ids: list[str] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=utc_now)
    ended_at: Optional[datetime] = None
    duration_ms: int = 0
    actions: list[SessionAction] = Field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return self.ended_at is None


# ---- Progress ----

class UserProgress(Record):
    """Derived snapshot, always rebuildable from words and sessions."""
    id: str = PROGRESS_ID
    total_words: int = 0
    mastered_words: int = 0
    streak_days: int = 0
    total_study_minutes: int = 0
    last_activity_at: datetime = Field(default_factory=utc_now)
    heatmap: dict[str, int] = Field(default_factory=dict, description="YYYY-MM-DD -> minutes")


# ---- Organisation ----

class Tag(Record):
    label: str
    color: str = "#1976D2"
    word_count: int = 0

    @field_validator("label")
    @classmethod
    def _strip_label(cls, value: str) -> str:
        return value.strip()


class Note(Record):
    word_id: str
    content: str = ""
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("content")
    @classmethod
    def _strip_content(cls, value: str) -> str:
        return value.strip()


class WordSet(Record):
    name: str
    description: str = ""
    created_at: datetime = Field(default_factory=utc_now)
    word_ids: list[str] = Field(default_factory=list)
    color_token: str = "primary"


# ---- Quizzes ----

class Quiz(Record):
    mode: QuizMode
    created_at: datetime = Field(default_factory=utc_now)
    question_ids: list[str] = Field(default_factory=list)
    score_percent: int = 0


class QuizQuestion(Record):
    quiz_id: str
    word_id: str
    prompt: str
    choices: list[str] = Field(default_factory=list)
    correct_answer: str
    user_answer: str = ""
    is_correct: bool = False


# ---- Import jobs ----

class RowError(BaseModel):
    """A problem with one CSV row (1-based, header is row 1)."""
    row: int
    message: str


class ImportJob(Record):
    filename: str
    total_words: int
    processed_words: int = 0
    status: ImportJobStatus = ImportJobStatus.PENDING
    errors: list[RowError] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=utc_now)
    ended_at: Optional[datetime] = None
