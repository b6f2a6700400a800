"""
Tests for status edits, cascading deletion and list filtering.
Run: pytest tests/test_word_services.py -v
"""
import pytest

from tests.conftest import T0
from wordbank.errors import NotFoundError
from wordbank.schemas import Note, Tag, Word, WordStatus
from wordbank.word_filter import filter_words, get_filtered_count


class TestWordStatusService:

    def test_update_status_stamps_last_studied(self, app, make_word):
        word = make_word("apple")
        updated = app.word_status.update_status(word.id, "learning", now=T0)
        stored = app.words.get_by_id(word.id)

        assert stored == updated
        assert stored.status == "learning"
        assert stored.last_studied_at == T0

    def test_mark_as_mastered(self, app, make_word):
        word = make_word("apple")
        app.word_status.mark_as_mastered(word.id, now=T0)
        assert app.words.get_by_id(word.id).status == WordStatus.MASTERED.value

    def test_mark_as_needs_review_demotes_mastered(self, app, make_word):
        word = make_word("apple", status=WordStatus.MASTERED)
        app.word_status.mark_as_needs_review(word.id)
        stored = app.words.get_by_id(word.id)
        assert stored.needs_review is True
        assert stored.status == WordStatus.LEARNING.value

    def test_mark_as_needs_review_keeps_unlearned(self, app, make_word):
        word = make_word("apple")
        app.word_status.mark_as_needs_review(word.id)
        assert app.words.get_by_id(word.id).status == WordStatus.UNLEARNED.value

    def test_unknown_word(self, app):
        with pytest.raises(NotFoundError):
            app.word_status.update_status("missing", "learning")
        with pytest.raises(NotFoundError):
            app.word_status.mark_as_needs_review("missing")


class TestWordDeletionService:

    def test_delete_cascades_to_notes_and_tags(self, app, make_word):
        tag = Tag(label="fruit", word_count=2)
        app.tags.create(tag)
        word = make_word("apple", tags=[tag.id])
        other = make_word("pear", tags=[tag.id])
        app.notes.create(Note(word_id=word.id, content="red"))
        app.notes.create(Note(word_id=other.id, content="green"))

        app.word_deletion.delete_word(word.id)

        assert app.words.get_by_id(word.id) is None
        assert app.notes.get_by_word_id(word.id) == []
        assert len(app.notes.get_by_word_id(other.id)) == 1
        assert app.tags.get_by_id(tag.id).word_count == 1

    def test_delete_unknown_word(self, app):
        with pytest.raises(NotFoundError):
            app.word_deletion.delete_word("missing")

    def test_delete_words(self, app, make_word):
        ids = [make_word(lemma).id for lemma in ("apple", "pear", "plum")]
        app.word_deletion.delete_words(ids[:2])
        assert [w.id for w in app.words.get_all()] == [ids[2]]


class TestFilterWords:

    @pytest.fixture
    def library(self):
        return [
            Word(lemma="apple", status="learning", tags=["fruit", "red"], definition_zh="蘋果"),
            Word(lemma="pear", status="mastered", tags=["fruit"], examples=["A ripe pear."]),
            Word(lemma="run", status="learning", needs_review=True, definition_en="To move fast"),
        ]

    def test_no_filters_keeps_everything(self, library):
        assert filter_words(library) == library

    def test_status(self, library):
        assert [w.lemma for w in filter_words(library, status="learning")] == ["apple", "run"]

    def test_tags_require_all(self, library):
        assert [w.lemma for w in filter_words(library, tags=["fruit"])] == ["apple", "pear"]
        assert [w.lemma for w in filter_words(library, tags=["fruit", "red"])] == ["apple"]

    def test_search_covers_definitions_and_examples(self, library):
        assert [w.lemma for w in filter_words(library, search_query="RIPE")] == ["pear"]
        assert [w.lemma for w in filter_words(library, search_query="蘋")] == ["apple"]
        assert [w.lemma for w in filter_words(library, search_query="move")] == ["run"]

    def test_needs_review(self, library):
        assert [w.lemma for w in filter_words(library, needs_review=True)] == ["run"]
        assert get_filtered_count(library, needs_review=False) == 2

    def test_combined(self, library):
        assert get_filtered_count(library, status="learning", tags=["fruit"], search_query="app") == 1

    def test_filter_over_stored_library(self, app, make_word):
        apple = make_word("apple", status="learning", tags=["fruit"])
        make_word("pear", tags=["fruit"])
        make_word("run", status="learning")

        assert [w.id for w in app.filter_words(status="learning", tags=["fruit"])] == [apple.id]
        assert len(app.filter_words()) == 3
