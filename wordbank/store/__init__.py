"""
Record store: SQLAlchemy tables, transactions and the generic repository.

Quick start:
    from wordbank.store import RecordStore

    store = RecordStore("sqlite:///wordbank.db")
    store.init_db()
"""

from wordbank.store.database import RecordStore, build_engine
from wordbank.store.models import Base
from wordbank.store.repository import Page, RecordRepository

__all__ = [
    "RecordStore",
    "build_engine",
    "Base",
    "Page",
    "RecordRepository",
]
