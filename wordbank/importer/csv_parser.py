"""
CSV parsing for word imports.

Reads a word list with pandas, maps the known header aliases onto
CsvRow fields and collects per-row problems instead of failing the file.
Row numbers are 1-based and count the header line, so the first data row
is row 2.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

import pandas as pd
from loguru import logger

from wordbank.config import MAX_CSV_BYTES
from wordbank.errors import ValidationError
from wordbank.schemas import RowError

# Header aliases, matched case-insensitively
WORD_HEADERS = ["word", "單字", "words", "vocabulary", "lemma"]
ID_HEADERS = ["id"]
PHONETIC_HEADERS = ["phonetic", "音標", "ipa"]
AUDIO_HEADERS = ["audio_url", "audiourl", "發音音檔連結", "audio"]
POS_HEADERS = ["part_of_speech", "partofspeech", "pos", "詞類"]
DEFINITION_HEADERS = ["definition", "解釋", "meaning"]

WORD_PATTERN = re.compile(r"^[A-Za-z\s\-'.()]+$")


@dataclass
class CsvRow:
    """One accepted data row. Optional fields are None when blank."""
    row: int
    word: str
    definition: str
    id: Optional[str] = None
    phonetic: Optional[str] = None
    audio_url: Optional[str] = None
    part_of_speech: Optional[str] = None


@dataclass
class ParseResult:
    rows: list[CsvRow] = field(default_factory=list)
    errors: list[RowError] = field(default_factory=list)
    duplicates: list[str] = field(default_factory=list)  # in-file repeats, as written


def validate_csv_file(path: Union[str, Path]) -> None:
    """
    Check that a file can be imported.

    Raises:
        ValidationError: wrong extension, empty file or larger than 10 MB
    """
    path = Path(path)
    if path.suffix.lower() != ".csv":
        raise ValidationError("File must be a CSV file", field="file")
    if not path.exists():
        raise ValidationError(f"File not found: {path}", field="file")

    size = path.stat().st_size
    if size == 0:
        raise ValidationError("File must not be empty", field="file")
    if size > MAX_CSV_BYTES:
        raise ValidationError("File must not be larger than 10MB", field="file")


def find_column(columns: list[str], aliases: list[str]) -> Optional[str]:
    """First column whose name matches one of the aliases (in alias order)."""
    normalized = {str(c).strip().lower(): c for c in columns}
    for alias in aliases:
        if alias.lower() in normalized:
            return normalized[alias.lower()]
    return None


def _cell(record: pd.Series, column: Optional[str]) -> Optional[str]:
    if column is None:
        return None
    value = str(record[column]).strip()
    return value or None


def parse_csv(path: Union[str, Path]) -> ParseResult:
    """
    Parse a word list CSV.

    Args:
        path: CSV file with a header row

    Returns:
        ParseResult with accepted rows, row errors and in-file duplicates

    Raises:
        ValidationError: if there is no word column or the file is unreadable
    """
    try:
        df = pd.read_csv(
            path,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding="utf-8-sig",
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        logger.error(f"CSV parsing failed for {path}: {exc}")
        raise ValidationError(f"Could not parse CSV file: {exc}", field="file") from exc

    columns = list(df.columns)
    word_col = find_column(columns, WORD_HEADERS)
    if word_col is None:
        raise ValidationError("No word column found in CSV (expected 'word' or '單字')", field="word")

    id_col = find_column(columns, ID_HEADERS)
    phonetic_col = find_column(columns, PHONETIC_HEADERS)
    audio_col = find_column(columns, AUDIO_HEADERS)
    pos_col = find_column(columns, POS_HEADERS)
    definition_col = find_column(columns, DEFINITION_HEADERS)

    result = ParseResult()
    seen: set[str] = set()

    for position, (_, record) in enumerate(df.iterrows()):
        row_number = position + 2  # header is row 1
        word = _cell(record, word_col)

        if word is None:
            result.errors.append(RowError(row=row_number, message="Empty word"))
            continue
        if not WORD_PATTERN.match(word):
            result.errors.append(RowError(row=row_number, message=f"Invalid word format: {word}"))
            continue

        definition = _cell(record, definition_col)
        if definition is None:
            result.errors.append(RowError(row=row_number, message=f"Missing definition for: {word}"))
            continue

        key = word.lower()
        if key in seen:
            if word not in result.duplicates:
                result.duplicates.append(word)
            continue
        seen.add(key)

        result.rows.append(CsvRow(
            row=row_number,
            word=word,
            definition=definition,
            id=_cell(record, id_col),
            phonetic=_cell(record, phonetic_col),
            audio_url=_cell(record, audio_col),
            part_of_speech=_cell(record, pos_col),
        ))

    logger.info(f"CSV parsed: {len(result.rows)} rows, {len(result.errors)} errors, {len(result.duplicates)} duplicates")
    return result
