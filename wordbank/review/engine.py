"""
Review Engine - Scheduling Against the Word Repository

Entry points for presentation code: record a review outcome, list due
words, count due words.

Every call re-reads from the repository; no word state is cached. Two
outcomes for the same word race with last-write-wins semantics (there is
no revision check on update).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from loguru import logger

from wordbank.clock import ensure_utc, utc_now
from wordbank.errors import NotFoundError
from wordbank.review import scheduling
from wordbank.schemas import Word
from wordbank.word_repo import WordRepository


class ReviewEngine:
    """
    Spaced repetition review engine.

    - New words: 1 day interval
    - Learning words: 1-7 days, 1 day while flagged
    - Mastered words: 7-30 days
    - Failed reviews reset to 1 day
    """

    def __init__(self, words: WordRepository):
        self.words = words

    def compute_next_due_date(self, word: Word, now: Optional[datetime] = None) -> datetime:
        """Next due date for a word (pure, no I/O)."""
        return scheduling.compute_next_due_date(word, now or utc_now())

    def record_review_outcome(
        self,
        word_id: str,
        success: bool,
        now: Optional[datetime] = None
    ) -> Word:
        """
        Update a word's schedule after a review attempt.

        The word is loaded first; nothing is written if it does not exist.

        Args:
            word_id: Word ID
            success: Whether the review was successful
            now: Review timestamp (defaults to now)

        Returns:
            The updated word as persisted

        Raises:
            NotFoundError: if the word id does not resolve
        """
        now = ensure_utc(now) if now is not None else utc_now()

        word = self.words.get_by_id(word_id)
        if word is None:
            raise NotFoundError("Word", word_id)

        updated = scheduling.apply_review_outcome(word, success, now)
        self.words.update(updated)

        if success:
            interval = scheduling.compute_interval_days(word, now)
            logger.info(
                f"Updated review schedule for word {word_id}: "
                f"status={updated.status} interval={interval}d next_review={updated.review_due_at.isoformat()}"
            )
        else:
            logger.info(
                f"Scheduled earlier review for word {word_id}: "
                f"status={updated.status} next_review={updated.review_due_at.isoformat()}"
            )
        return updated

    def mark_as_reviewed(
        self,
        word_id: str,
        success: bool = True,
        now: Optional[datetime] = None
    ) -> Word:
        """Convenience alias for record_review_outcome."""
        return self.record_review_outcome(word_id, success, now)

    def get_due_words(self, now: Optional[datetime] = None) -> list[Word]:
        """
        Get words that are due for review.

        Full scan of the library, in repository order.
        """
        return scheduling.get_due_words(self.words.get_all(), now or utc_now())

    def get_due_count(self, now: Optional[datetime] = None) -> int:
        """Count due words with a store-side count query."""
        count = self.words.count_due(now or utc_now())
        logger.debug(f"Due review count: {count}")
        return count
