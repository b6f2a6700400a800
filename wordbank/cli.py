"""
Command line entry point.

Usage:
    python -m wordbank.cli import words.csv [--overwrite] [--clear]
    python -m wordbank.cli due [--limit N]
    python -m wordbank.cli reset-db --yes
"""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from loguru import logger

from wordbank.config import configure_logging, get_max_review_words_per_session
from wordbank.errors import WordbankError
from wordbank.importer import DatabaseAction, DuplicateAction
from wordbank.runtime import Wordbank


def _import(app: Wordbank, args: argparse.Namespace) -> int:
    result = app.importer.import_csv(
        args.path,
        duplicate_action=DuplicateAction.OVERWRITE if args.overwrite else DuplicateAction.SKIP,
        database_action=DatabaseAction.CLEAR if args.clear else DatabaseAction.APPEND,
    )

    print(f"\n{'='*60}")
    print("Import complete!")
    print(f"{'='*60}")
    print(f"Imported:            {result.success_count}")
    print(f"Duplicates:          {result.duplicate_count}")
    print(f"Skipped:             {result.skipped_count}")
    print(f"Errors:              {result.error_count}")
    print(f"Total rows:          {result.job.total_words}")

    for error in result.job.errors:
        print(f"  row {error.row}: {error.message}")
    return 0


def _due(app: Wordbank, args: argparse.Namespace) -> int:
    limit = args.limit if args.limit is not None else get_max_review_words_per_session()
    due = app.review.get_due_words()
    print(f"{len(due)} words due for review")
    for word in due[:limit]:
        flag = " (flagged)" if word.needs_review else ""
        due_at = word.review_due_at.date().isoformat() if word.review_due_at else "-"
        print(f"  {word.lemma:<24} {word.status:<10} due {due_at}{flag}")
    return 0


def _reset_db(app: Wordbank, args: argparse.Namespace) -> int:
    if not args.yes:
        print("Refusing to reset without --yes (all words and history will be lost)")
        return 1
    app.store.reset_db()
    print(f"✓ Database reset: {app.store.database_url}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wordbank", description="Personal vocabulary library")
    parser.add_argument("--database-url", help="SQLAlchemy URL (default: WORDBANK_DATABASE_URL)")
    parser.add_argument("--log-level", help="Log level (default: WORDBANK_LOG_LEVEL)")
    commands = parser.add_subparsers(dest="command", required=True)

    import_cmd = commands.add_parser("import", help="Import words from a CSV file")
    import_cmd.add_argument("path", help="CSV file")
    import_cmd.add_argument("--overwrite", action="store_true", help="Overwrite words that already exist")
    import_cmd.add_argument("--clear", action="store_true", help="Delete every word before importing")
    import_cmd.set_defaults(handler=_import)

    due_cmd = commands.add_parser("due", help="List words due for review")
    due_cmd.add_argument("--limit", type=int, help="Maximum number of words to list")
    due_cmd.set_defaults(handler=_due)

    reset_cmd = commands.add_parser("reset-db", help="Drop and recreate every table")
    reset_cmd.add_argument("--yes", action="store_true", help="Confirm data loss")
    reset_cmd.set_defaults(handler=_reset_db)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        with Wordbank(args.database_url) as app:
            return args.handler(app, args)
    except WordbankError as exc:
        logger.error(f"{exc.code}: {exc}")
        print(f"✗ {exc}")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
