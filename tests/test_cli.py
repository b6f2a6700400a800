"""
Smoke tests for the command line.
Run: pytest tests/test_cli.py -v
"""
import pytest

from wordbank.cli import main
from wordbank.config import configure_logging
from wordbank.runtime import Wordbank
from wordbank.schemas import Word


@pytest.fixture(autouse=True)
def restore_logging():
    """main() reconfigures the global loguru sink; point it back at the real stderr."""
    yield
    configure_logging()


@pytest.fixture
def db_args(tmp_path):
    return ["--database-url", f"sqlite:///{tmp_path / 'cli.db'}", "--log-level", "ERROR"]


@pytest.fixture
def csv_path(tmp_path):
    path = tmp_path / "words.csv"
    path.write_text("word,definition\napple,蘋果\npear,梨\n", encoding="utf-8")
    return path


class TestCli:

    def test_import_then_due(self, db_args, csv_path, capsys):
        assert main(db_args + ["import", str(csv_path)]) == 0
        out = capsys.readouterr().out
        assert "Imported:            2" in out

        assert main(db_args + ["due"]) == 0
        assert "0 words due for review" in capsys.readouterr().out

    def test_import_skips_existing_on_second_run(self, db_args, csv_path, capsys):
        main(db_args + ["import", str(csv_path)])
        capsys.readouterr()
        main(db_args + ["import", str(csv_path)])
        assert "Skipped:             2" in capsys.readouterr().out

    def test_invalid_file_exits_with_error(self, db_args, tmp_path, capsys):
        bad = tmp_path / "words.txt"
        bad.write_text("word\napple\n", encoding="utf-8")
        assert main(db_args + ["import", str(bad)]) == 2
        assert "CSV" in capsys.readouterr().out

    def test_reset_requires_confirmation(self, db_args, csv_path, capsys):
        main(db_args + ["import", str(csv_path)])
        assert main(db_args + ["reset-db"]) == 1
        assert main(db_args + ["reset-db", "--yes"]) == 0
        capsys.readouterr()

        main(db_args + ["import", str(csv_path)])
        assert "Imported:            2" in capsys.readouterr().out

    def test_due_limit_zero_lists_no_words(self, db_args, capsys):
        with Wordbank(db_args[1]) as app:
            app.words.create(Word(lemma="apple", needs_review=True))

        assert main(db_args + ["due", "--limit", "0"]) == 0
        out = capsys.readouterr().out
        assert "1 words due for review" in out
        assert "apple" not in out
