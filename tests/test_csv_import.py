"""
Tests for CSV parsing and the import service.
Run: pytest tests/test_csv_import.py -v
"""
import pytest

from wordbank.config import MAX_CSV_BYTES
from wordbank.errors import ValidationError
from wordbank.importer import ImportService, parse_csv, validate_csv_file
from wordbank.schemas import InfoCompleteness, Word, WordSource, WordStatus

HEADER = "ID,單字,音標,發音音檔連結,詞類,解釋\n"


@pytest.fixture
def write_csv(tmp_path):
    def _write(content, name="words.csv"):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path
    return _write


class TestValidateCsvFile:

    def test_valid_file(self, write_csv):
        validate_csv_file(write_csv(HEADER + "1,hello,,,,你好\n"))

    def test_rejects_other_extensions(self, write_csv):
        with pytest.raises(ValidationError):
            validate_csv_file(write_csv("word\nhello\n", name="words.txt"))

    def test_rejects_empty_file(self, write_csv):
        with pytest.raises(ValidationError):
            validate_csv_file(write_csv(""))

    def test_rejects_files_over_10mb(self, tmp_path):
        path = tmp_path / "big.csv"
        path.write_bytes(b"a" * (MAX_CSV_BYTES + 1))
        with pytest.raises(ValidationError):
            validate_csv_file(path)


class TestParseCsv:

    def test_all_fields(self, write_csv):
        path = write_csv(
            HEADER
            + "1,hello,/həˈloʊ/,https://example.com/hello.mp3,noun,你好\n"
            + "2,world,/wɜːrld/,https://example.com/world.mp3,noun,世界\n"
        )
        result = parse_csv(path)

        assert result.errors == []
        assert len(result.rows) == 2
        first = result.rows[0]
        assert first.row == 2
        assert first.id == "1"
        assert first.word == "hello"
        assert first.phonetic == "/həˈloʊ/"
        assert first.audio_url == "https://example.com/hello.mp3"
        assert first.part_of_speech == "noun"
        assert first.definition == "你好"

    def test_optional_fields_are_none(self, write_csv):
        result = parse_csv(write_csv(HEADER + "1,hello,,,,你好\n"))
        row = result.rows[0]
        assert row.phonetic is None
        assert row.audio_url is None
        assert row.part_of_speech is None

    def test_english_headers(self, write_csv):
        result = parse_csv(write_csv("Word,Definition,IPA,Audio\napple,a fruit,ˈæpəl,\n"))
        assert result.rows[0].word == "apple"
        assert result.rows[0].definition == "a fruit"
        assert result.rows[0].phonetic == "ˈæpəl"

    def test_missing_word_column(self, write_csv):
        with pytest.raises(ValidationError):
            parse_csv(write_csv("ID,音標,解釋\n1,/x/,你好\n"))

    def test_empty_word(self, write_csv):
        result = parse_csv(write_csv(HEADER + "1,,/x/,,noun,你好\n2,world,,,noun,世界\n"))
        assert [r.word for r in result.rows] == ["world"]
        assert len(result.errors) == 1
        assert result.errors[0].row == 2
        assert result.errors[0].message == "Empty word"

    def test_invalid_word_format(self, write_csv):
        result = parse_csv(write_csv(HEADER + "1,hello@world,,,,你好\n2,world,,,,世界\n"))
        assert [r.word for r in result.rows] == ["world"]
        assert result.errors[0].row == 2
        assert "Invalid word format" in result.errors[0].message

    def test_missing_definition(self, write_csv):
        result = parse_csv(write_csv(HEADER + "1,hello,,,noun,\n2,world,,,noun,世界\n"))
        assert [r.word for r in result.rows] == ["world"]
        assert result.errors[0].row == 2
        assert "Missing definition" in result.errors[0].message

    def test_phrases_and_punctuation(self, write_csv):
        result = parse_csv(write_csv(
            HEADER + "1,a few,,,,一些\n2,Mr.,,,,先生\n3,O.K.,,,,好\n4,shoe(s),,,,鞋子\n5,ice-cream,,,,冰淇淋\n"
        ))
        assert [r.word for r in result.rows] == ["a few", "Mr.", "O.K.", "shoe(s)", "ice-cream"]
        assert result.errors == []

    def test_in_file_duplicates_dropped(self, write_csv):
        result = parse_csv(write_csv(HEADER + "1,Apple,,,,蘋果\n2,apple,,,,蘋果\n3,pear,,,,梨\n"))
        assert [r.word for r in result.rows] == ["Apple", "pear"]
        assert result.duplicates == ["apple"]

    def test_row_numbers_skip_blank_lines(self, write_csv):
        result = parse_csv(write_csv(HEADER + "1,hello,,,,你好\n\n2,,,,,世界\n"))
        assert result.errors[0].row == 3

    def test_phonetic_kept_raw(self, write_csv):
        result = parse_csv(write_csv(HEADER + "1,hat,[hat],,,帽子\n"))
        assert result.rows[0].phonetic == "[hat]"


class TestImportService:

    def test_import_creates_words_and_job(self, app, write_csv):
        path = write_csv(
            HEADER
            + "1,hat,[hat],https://example.com/hat.mp3,noun,帽子\n"
            + "2,man,[mɛn],,noun,男人\n"
            + "3,bad@word,,,,壞\n"
        )
        result = app.importer.import_csv(path)

        assert result.success_count == 2
        assert result.error_count == 0
        assert result.job.status == "completed"
        assert result.job.total_words == 2
        assert result.job.processed_words == 2
        assert result.job.ended_at is not None
        assert [e.row for e in result.job.errors] == [4]
        assert app.import_jobs.get_by_id(result.job.id) == result.job

        hat = app.words.get_by_lemma("hat")[0]
        assert hat.source == WordSource.IMPORTED.value
        assert hat.status == WordStatus.UNLEARNED.value
        assert hat.phonetics == ["hat"]
        assert hat.definition_zh == "帽子"
        assert hat.info_completeness == InfoCompleteness.COMPLETE.value

        man = app.words.get_by_lemma("man")[0]
        assert man.info_completeness == InfoCompleteness.MISSING_AUDIO.value

    def test_skip_existing(self, app, write_csv):
        app.words.create(Word(lemma="Hello", definition_zh="舊"))
        result = app.importer.import_csv(write_csv(HEADER + "1,hello,,,,你好\n2,world,,,,世界\n"))

        assert result.duplicate_count == 1
        assert result.skipped_count == 1
        assert result.success_count == 1
        assert result.job.errors[0].row == 2
        assert app.words.get_by_lemma("hello")[0].definition_zh == "舊"

    def test_overwrite_keeps_id(self, app, write_csv):
        existing = Word(lemma="hello", definition_zh="舊", status=WordStatus.MASTERED)
        app.words.create(existing)
        result = app.importer.import_csv(
            write_csv(HEADER + "1,Hello,,,,你好\n"),
            duplicate_action="overwrite",
        )

        assert result.duplicate_count == 1
        assert result.success_count == 1
        stored = app.words.get_by_id(existing.id)
        assert stored.lemma == "Hello"
        assert stored.definition_zh == "你好"
        assert app.words.count() == 1

    def test_clear_database_first(self, app, write_csv):
        app.words.create(Word(lemma="old"))
        app.importer.import_csv(write_csv(HEADER + "1,new,,,,新\n"), database_action="clear")
        assert [w.lemma for w in app.words.get_all()] == ["new"]

    def test_progress_callback(self, app, write_csv):
        calls = []
        app.importer.import_csv(
            write_csv(HEADER + "1,hello,,,,你好\n2,world,,,,世界\n"),
            on_progress=lambda current, total, word: calls.append((current, total, word)),
        )
        assert calls == [(1, 2, "hello"), (2, 2, "world")]

    def test_too_many_rows(self, app, write_csv):
        importer = ImportService(app.words, app.import_jobs, max_words=1)
        with pytest.raises(ValidationError):
            importer.import_csv(write_csv(HEADER + "1,hello,,,,你好\n2,world,,,,世界\n"))
        assert app.import_jobs.count() == 0
        assert app.words.count() == 0

    def test_import_rows_reuses_parse_result(self, app, write_csv):
        parsed = parse_csv(write_csv(HEADER + "1,hello,,,,你好\n2,,,,,空\n"))
        result = app.importer.import_rows(parsed.rows, "words.csv", parsed.errors)
        assert result.success_count == 1
        assert result.job.filename == "words.csv"
        assert [e.message for e in result.job.errors] == ["Empty word"]

    def test_check_duplicates(self, app, write_csv):
        app.words.create(Word(lemma="pear"))
        duplicates, total = app.importer.check_duplicates(
            write_csv(HEADER + "1,apple,,,,蘋果\n2,Apple,,,,蘋果\n3,Pear,,,,梨\n")
        )
        assert duplicates == ["Apple", "Pear"]
        assert total == 2

    def test_check_duplicates_validates_file(self, app, write_csv):
        with pytest.raises(ValidationError):
            app.importer.check_duplicates(write_csv("word,definition\napple,蘋果\n", name="words.txt"))
