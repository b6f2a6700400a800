"""
Import Service - CSV Word Lists into the Library

Creates one ImportJob per run and feeds accepted rows into the word
repository. Rows that already exist (same lemma, ignoring case) are either
skipped with a row error or overwritten in place.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union

from loguru import logger

from wordbank.clock import utc_now
from wordbank.config import get_max_words_per_import
from wordbank.errors import ValidationError, WordbankError
from wordbank.importer.csv_parser import CsvRow, parse_csv, validate_csv_file
from wordbank.repos import ImportJobRepository
from wordbank.schemas import (
    ImportJob,
    ImportJobStatus,
    InfoCompleteness,
    RowError,
    Word,
    WordSource,
    new_word,
)
from wordbank.word_repo import WordRepository

ProgressCallback = Callable[[int, int, str], None]

PHONETIC_BRACKETS = re.compile(r"[\[\]()]")
JOB_UPDATE_EVERY = 10


class DuplicateAction(str, Enum):
    SKIP = "skip"
    OVERWRITE = "overwrite"


class DatabaseAction(str, Enum):
    APPEND = "append"
    CLEAR = "clear"


@dataclass
class ImportResult:
    job: ImportJob
    success_count: int = 0
    error_count: int = 0
    duplicate_count: int = 0
    skipped_count: int = 0


def derive_info_completeness(word: Word) -> InfoCompleteness:
    """complete / missing-definition / missing-audio from the filled fields."""
    if not word.definition_zh:
        return InfoCompleteness.MISSING_DEFINITION
    if not word.audio_urls:
        return InfoCompleteness.MISSING_AUDIO
    return InfoCompleteness.COMPLETE


def row_to_word(row: CsvRow, existing_id: Optional[str] = None) -> Word:
    """
    Build a fresh imported word from a CSV row.

    With existing_id the word takes over that id (overwrite).
    """
    fields = {}
    if row.phonetic:
        phonetic = PHONETIC_BRACKETS.sub("", row.phonetic).strip()
        if phonetic:
            fields["phonetics"] = [phonetic]
    if row.audio_url:
        fields["audio_urls"] = [row.audio_url]
    if row.part_of_speech:
        fields["part_of_speech"] = row.part_of_speech
    if row.definition:
        fields["definition_zh"] = row.definition

    word = new_word(row.word, source=WordSource.IMPORTED, **fields)
    update = {"info_completeness": derive_info_completeness(word).value}
    if existing_id is not None:
        update["id"] = existing_id
    return word.model_copy(update=update)


class ImportService:
    def __init__(
        self,
        words: WordRepository,
        jobs: ImportJobRepository,
        max_words: Optional[int] = None
    ):
        self.words = words
        self.jobs = jobs
        self.max_words = max_words if max_words is not None else get_max_words_per_import()

    def import_csv(
        self,
        path: Union[str, Path],
        duplicate_action: Union[DuplicateAction, str] = DuplicateAction.SKIP,
        database_action: Union[DatabaseAction, str] = DatabaseAction.APPEND,
        on_progress: Optional[ProgressCallback] = None
    ) -> ImportResult:
        """
        Validate, parse and import a CSV file.

        Raises:
            ValidationError: if the file is rejected or has too many rows
        """
        validate_csv_file(path)
        parsed = parse_csv(path)
        return self.import_rows(
            parsed.rows,
            filename=Path(path).name,
            parse_errors=parsed.errors,
            duplicate_action=duplicate_action,
            database_action=database_action,
            on_progress=on_progress,
        )

    def import_rows(
        self,
        rows: list[CsvRow],
        filename: str,
        parse_errors: Optional[list[RowError]] = None,
        duplicate_action: Union[DuplicateAction, str] = DuplicateAction.SKIP,
        database_action: Union[DatabaseAction, str] = DatabaseAction.APPEND,
        on_progress: Optional[ProgressCallback] = None
    ) -> ImportResult:
        """
        Import already parsed rows (no re-parse).

        Args:
            rows: Accepted CSV rows
            filename: Source file name recorded on the job
            parse_errors: Row errors from parsing, copied onto the job
            duplicate_action: skip or overwrite words that already exist
            database_action: append, or clear the library first
            on_progress: Called as (current, total, word) after each row

        Returns:
            ImportResult with the finished job and counters
        """
        duplicate_action = DuplicateAction(duplicate_action)
        database_action = DatabaseAction(database_action)

        if len(rows) > self.max_words:
            raise ValidationError(
                f"Too many words in one import: {len(rows)} (limit {self.max_words})",
                field="rows",
            )

        job = ImportJob(
            filename=filename,
            total_words=len(rows),
            status=ImportJobStatus.RUNNING,
            errors=list(parse_errors or []),
        )
        self.jobs.create(job)
        logger.info(f"Import job {job.id} started: {filename} ({len(rows)} rows)")

        try:
            return self._process(job, rows, duplicate_action, database_action, on_progress)
        except Exception as exc:
            logger.error(f"Import job {job.id} failed: {exc}")
            job.status = ImportJobStatus.FAILED.value
            job.ended_at = utc_now()
            self.jobs.update(job)
            raise

    def _process(
        self,
        job: ImportJob,
        rows: list[CsvRow],
        duplicate_action: DuplicateAction,
        database_action: DatabaseAction,
        on_progress: Optional[ProgressCallback]
    ) -> ImportResult:
        result = ImportResult(job=job)

        if database_action == DatabaseAction.CLEAR:
            self.clear_all_words()

        existing = {w.lemma.lower(): w for w in self.words.get_all()}

        for index, row in enumerate(rows):
            job.processed_words = index + 1
            key = row.word.lower()

            try:
                current = existing.get(key)
                if current is not None:
                    result.duplicate_count += 1
                    if duplicate_action == DuplicateAction.SKIP:
                        result.skipped_count += 1
                        job.errors.append(RowError(row=row.row, message=f'Word "{row.word}" already exists, skipped'))
                        continue
                    word = row_to_word(row, existing_id=current.id)
                    self.words.update(word)
                else:
                    word = row_to_word(row)
                    self.words.create(word)
                existing[key] = word
                result.success_count += 1
            except WordbankError as exc:
                result.error_count += 1
                job.errors.append(RowError(row=row.row, message=f'Failed to import "{row.word}": {exc}'))
                logger.error(f"Failed to import row {row.row} ({row.word}): {exc}")
                continue

            if on_progress is not None:
                on_progress(index + 1, len(rows), row.word)

            if (index + 1) % JOB_UPDATE_EVERY == 0:
                self.jobs.update(job)

        job.status = ImportJobStatus.COMPLETED.value
        job.ended_at = utc_now()
        self.jobs.update(job)

        logger.info(
            f"Import job {job.id} completed: {result.success_count} imported, "
            f"{result.skipped_count} skipped, {result.error_count} errors"
        )
        return result

    def clear_all_words(self) -> int:
        """Delete every word in the library. Notes and tags are left alone."""
        removed = self.words.delete_all()
        logger.warning(f"All words cleared ({removed})")
        return removed

    def check_duplicates(self, path: Union[str, Path]) -> tuple[list[str], int]:
        """
        Report words in a CSV that repeat within the file or already exist.

        Returns:
            (duplicate words as written in the file, number of accepted rows)

        Raises:
            ValidationError: if the file is rejected
        """
        validate_csv_file(path)
        parsed = parse_csv(path)
        known = {w.lemma.lower() for w in self.words.get_all()}

        duplicates = list(parsed.duplicates)
        for row in parsed.rows:
            if row.word.lower() in known and row.word not in duplicates:
                duplicates.append(row.word)
        return duplicates, len(parsed.rows)
