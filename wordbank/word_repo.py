"""
Repository for the word library.

Provides CRUD plus the index-backed status and due-date queries used by
the review engine and list views.
"""

from __future__ import annotations

from datetime import datetime
from typing import Union

from sqlalchemy import and_, func, or_

from wordbank.clock import to_iso
from wordbank.schemas import Word, WordStatus
from wordbank.store.models import WordRow
from wordbank.store.repository import RecordRepository


def _due_criterion(now: datetime):
    """needs_review OR (review_due_at IS NOT NULL AND review_due_at <= now)."""
    return or_(
        WordRow.needs_review.is_(True),
        and_(WordRow.review_due_at.isnot(None), WordRow.review_due_at <= to_iso(now)),
    )


class WordRepository(RecordRepository[Word]):
    model = WordRow
    schema = Word
    resource = "Word"

    # ---- Query Functions ----

    def get_by_status(self, status: Union[WordStatus, str]) -> list[Word]:
        """
        Get all words with a given learning status.

        Args:
            status: unlearned, learning or mastered

        Returns:
            List of words (id order)
        """
        value = WordStatus(status).value
        with self.store.session_scope() as session:
            return self._fetch(session, WordRow.status == value)

    def get_by_review_due(self, before: datetime) -> list[Word]:
        """
        Get words whose scheduled review date is at or before a timestamp.

        Words without a scheduled date are never returned, even when
        flagged with needs_review.

        Args:
            before: Inclusive upper bound

        Returns:
            List of words ordered by review_due_at ascending
        """
        with self.store.session_scope() as session:
            return self._fetch(
                session,
                WordRow.review_due_at.isnot(None),
                WordRow.review_due_at <= to_iso(before),
                order_by=WordRow.review_due_at,
            )

    def count_due(self, now: datetime) -> int:
        """
        Count words that are due for review without loading them.

        Args:
            now: Current time

        Returns:
            Number of words flagged for review or scheduled at or before now
        """
        with self.store.session_scope() as session:
            return session.query(WordRow).filter(_due_criterion(now)).count()

    def search_by_lemma(self, query: str) -> list[Word]:
        """
        Search the library by lemma or definition.

        Lemma and English definition match case-insensitively; the localized
        definition matches as a plain substring.

        Args:
            query: Search text

        Returns:
            Matching words (id order)
        """
        lowered = query.lower()
        with self.store.session_scope() as session:
            return self._fetch(
                session,
                or_(
                    func.lower(WordRow.lemma).contains(lowered, autoescape=True),
                    WordRow.definition_zh.contains(query, autoescape=True),
                    func.lower(WordRow.definition_en).contains(lowered, autoescape=True),
                ),
            )

    def get_by_lemma(self, lemma: str) -> list[Word]:
        """Words whose lemma equals the given one, ignoring case."""
        with self.store.session_scope() as session:
            return self._fetch(session, func.lower(WordRow.lemma) == lemma.strip().lower())

    def delete_all(self) -> int:
        """
        Delete every word in one transaction.

        Returns:
            Number of words deleted
        """
        with self.store.session_scope() as session:
            return session.query(WordRow).delete()
