"""
Word deletion with cascade to notes and tag counts.

The steps run sequentially, each in its own transaction; a failure part
way leaves the earlier steps applied.
"""

from __future__ import annotations

from typing import Iterable

from loguru import logger

from wordbank.errors import NotFoundError
from wordbank.repos import NoteRepository, TagRepository
from wordbank.word_repo import WordRepository


class WordDeletionService:

    def __init__(self, words: WordRepository, notes: NoteRepository, tags: TagRepository):
        self.words = words
        self.notes = notes
        self.tags = tags

    def delete_word(self, word_id: str) -> None:
        """
        Delete a word, its notes and its tag memberships.

        Raises:
            NotFoundError: if the word id does not resolve
        """
        word = self.words.get_by_id(word_id)
        if word is None:
            raise NotFoundError("Word", word_id)

        removed_notes = self.notes.delete_by_word_id(word_id)

        for tag_id in word.tags:
            self.tags.decrement_word_count(tag_id)

        self.words.delete(word_id)
        logger.info(f"Word {word_id} deleted ({removed_notes} notes, {len(word.tags)} tags)")

    def delete_words(self, word_ids: Iterable[str]) -> None:
        for word_id in word_ids:
            self.delete_word(word_id)
