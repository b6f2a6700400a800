"""
Scheduling - Review Policy

Pure scheduling and state updates (no database calls).

Main workflow:
1. Caller loads the word
2. apply_review_outcome() builds the replacement record
3. Caller persists it with a full-record update

This module handles ONLY the policy. Persistence is handled by the
review engine and the word repository.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from wordbank.clock import ensure_utc
from wordbank.review.constants import (
    DAY,
    FAILURE_INTERVAL_DAYS,
    FLAGGED_INTERVAL_DAYS,
    LEARNING_MAX_DAYS,
    LEARNING_MIN_DAYS,
    MASTERED_GROWTH,
    MASTERED_MAX_DAYS,
    MASTERED_MIN_DAYS,
    UNLEARNED_INTERVAL_DAYS,
)
from wordbank.schemas import Word, WordStatus


def _clamp(value: int, lower: int, upper: int) -> int:
    return min(upper, max(lower, value))


def days_since_studied(word: Word, now: datetime) -> int:
    """
    Whole days elapsed since the word was last studied.

    A word that was never studied counts as studied now (0 days).

    Args:
        word: Word to inspect
        now: Current time

    Returns:
        floor((now - last_studied_at) / 1 day)
    """
    now = ensure_utc(now)
    last_studied = word.last_studied_at or now
    return (now - last_studied) // DAY


def compute_interval_days(word: Word, now: datetime) -> int:
    """
    Review interval in days for a word's current state.

    - mastered: clamp(days_since * 2, 7, 30)
    - learning, flagged: 1
    - learning, not flagged: clamp(days_since + 1, 1, 7)
    - unlearned: 1
    """
    days_since = days_since_studied(word, now)

    if word.status == WordStatus.MASTERED:
        return _clamp(days_since * MASTERED_GROWTH, MASTERED_MIN_DAYS, MASTERED_MAX_DAYS)

    if word.status == WordStatus.LEARNING:
        if word.needs_review:
            return FLAGGED_INTERVAL_DAYS
        return _clamp(days_since + 1, LEARNING_MIN_DAYS, LEARNING_MAX_DAYS)

    return UNLEARNED_INTERVAL_DAYS


def compute_next_due_date(word: Word, now: datetime) -> datetime:
    """
    Compute when a word should next be reviewed.

    Pure and idempotent: safe to call any number of times.

    Args:
        word: Word in its current state
        now: Current time

    Returns:
        now + interval days, as an aware UTC datetime
    """
    now = ensure_utc(now)
    return now + compute_interval_days(word, now) * DAY


def apply_review_outcome(word: Word, success: bool, now: datetime) -> Word:
    """
    Build the replacement record for a review attempt.

    Success: the due date is computed from the word's state before this
    review; needs_review is cleared and unlearned words move to learning.

    Failure: the word is due again in one day and flagged; a mastered word
    is demoted to learning. Learning/unlearned status is left unchanged.

    Args:
        word: Word before the review (not modified)
        success: Whether the review was successful
        now: Review time

    Returns:
        New Word with last_studied_at = now
    """
    now = ensure_utc(now)

    if success:
        status = word.status
        if status == WordStatus.UNLEARNED:
            status = WordStatus.LEARNING
        changes = {
            "last_studied_at": now,
            "review_due_at": compute_next_due_date(word, now),
            "needs_review": False,
            "status": WordStatus(status).value,
        }
    else:
        status = word.status
        if status == WordStatus.MASTERED:
            status = WordStatus.LEARNING
        changes = {
            "last_studied_at": now,
            "review_due_at": now + FAILURE_INTERVAL_DAYS * DAY,
            "needs_review": True,
            "status": WordStatus(status).value,
        }

    return word.model_copy(update=changes, deep=True)


# ---- Due words ----

def is_due(word: Word, now: datetime) -> bool:
    """
    A word is due if it is flagged for review, or its scheduled date has
    arrived. Words with no schedule and no flag are never due.
    """
    if word.needs_review:
        return True
    if word.review_due_at is not None:
        return word.review_due_at <= ensure_utc(now)
    return False


def get_due_words(words: Iterable[Word], now: datetime) -> list[Word]:
    """
    Filter words that are due for review.

    Input order is preserved; callers needing a priority order must sort.
    """
    now = ensure_utc(now)
    return [word for word in words if is_due(word, now)]


def get_due_count(words: Iterable[Word], now: datetime) -> int:
    """Number of due words."""
    now = ensure_utc(now)
    return sum(1 for word in words if is_due(word, now))
