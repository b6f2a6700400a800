"""
Error taxonomy for the word library.

Callers distinguish "doesn't exist" (NotFoundError, expected and handled)
from "storage broke" (StorageError, unexpected and surfaced).
"""

from __future__ import annotations

from typing import Optional


class WordbankError(Exception):
    """Base class for all domain errors."""
    code = "WORDBANK_ERROR"


class NotFoundError(WordbankError):
    """A referenced record id does not resolve."""
    code = "NOT_FOUND"

    def __init__(self, resource: str, record_id: Optional[str] = None):
        self.resource = resource
        self.record_id = record_id
        if record_id is None:
            message = f"{resource} not found"
        else:
            message = f"{resource} with id {record_id} not found"
        super().__init__(message)


class ConflictError(WordbankError):
    """A record with the same id already exists, or the record is closed."""
    code = "CONFLICT"


class ValidationError(WordbankError):
    """Malformed input to the import pipeline."""
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class StorageError(WordbankError):
    """Underlying persistence failure."""
    code = "STORAGE_ERROR"
