"""
Explicit user status edits.

These bypass the review engine and write through the word repository.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from loguru import logger

from wordbank.clock import ensure_utc, utc_now
from wordbank.errors import NotFoundError
from wordbank.schemas import Word, WordStatus
from wordbank.word_repo import WordRepository


class WordStatusService:

    def __init__(self, words: WordRepository):
        self.words = words

    def _require(self, word_id: str) -> Word:
        word = self.words.get_by_id(word_id)
        if word is None:
            raise NotFoundError("Word", word_id)
        return word

    def update_status(
        self,
        word_id: str,
        status: Union[WordStatus, str],
        now: Optional[datetime] = None
    ) -> Word:
        """
        Set a word's status and stamp it as studied.

        Raises:
            NotFoundError: if the word id does not resolve
        """
        word = self._require(word_id)
        updated = word.model_copy(update={
            "status": WordStatus(status).value,
            "last_studied_at": ensure_utc(now) if now is not None else utc_now(),
        })
        self.words.update(updated)
        logger.info(f"Word status updated: {word_id} -> {updated.status}")
        return updated

    def mark_as_mastered(self, word_id: str, now: Optional[datetime] = None) -> Word:
        return self.update_status(word_id, WordStatus.MASTERED, now)

    def mark_as_needs_review(self, word_id: str) -> Word:
        """
        Flag a word for review. A mastered word drops back to learning;
        other statuses only gain the flag.
        """
        word = self._require(word_id)
        changes = {"needs_review": True}
        if word.status == WordStatus.MASTERED:
            changes["status"] = WordStatus.LEARNING.value
        updated = word.model_copy(update=changes)
        self.words.update(updated)
        logger.info(f"Word marked as needs review: {word_id}")
        return updated
