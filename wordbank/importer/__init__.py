"""
CSV import pipeline.
"""

from wordbank.importer.csv_parser import CsvRow, ParseResult, parse_csv, validate_csv_file
from wordbank.importer.import_service import (
    DatabaseAction,
    DuplicateAction,
    ImportResult,
    ImportService,
)

__all__ = [
    "CsvRow",
    "DatabaseAction",
    "DuplicateAction",
    "ImportResult",
    "ImportService",
    "ParseResult",
    "parse_csv",
    "validate_csv_file",
]
