"""
Generic repository over one record table.

Implements the contract shared by every entity type:
- create: fails with ConflictError on a duplicate id
- get_by_id: returns None when absent (not an error)
- update: full-record replace, fails with NotFoundError when absent
- delete: idempotent
- get_all / get_page / count
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wordbank.clock import from_iso, to_iso
from wordbank.errors import ConflictError, NotFoundError
from wordbank.store.database import RecordStore

R = TypeVar("R", bound=BaseModel)


@dataclass(frozen=True)
class Page(Generic[R]):
    """One page of records in primary-key order."""
    items: list[R]
    total: int
    has_more: bool


class RecordRepository(Generic[R]):
    """
    CRUD façade for one record type.

    Subclasses set `model` (ORM class), `schema` (pydantic class) and
    `resource` (name used in error messages).
    """
    model: Any = None
    schema: type[BaseModel] = BaseModel
    resource: str = "Record"

    def __init__(self, store: RecordStore):
        self.store = store

    # ---- Mapping ----

    def _to_columns(self, record: R) -> dict[str, Any]:
        data = record.model_dump(mode="json")
        for name in self.model.__timestamp_columns__:
            data[name] = to_iso(getattr(record, name))
        return data

    def _to_record(self, row: Any) -> R:
        data = {column.name: getattr(row, column.name) for column in self.model.__table__.columns}
        for name in self.model.__timestamp_columns__:
            data[name] = from_iso(data[name])
        return self.schema.model_validate(data)

    def _fetch(self, session: Session, *criteria: Any, order_by: Any = None) -> list[R]:
        query = session.query(self.model)
        if criteria:
            query = query.filter(*criteria)
        query = query.order_by(order_by if order_by is not None else self.model.id)
        return [self._to_record(row) for row in query.all()]

    # ---- Contract ----

    def create(self, record: R) -> str:
        """
        Insert a new record. Identity is assigned by the caller.

        Returns:
            The record id

        Raises:
            ConflictError: if a record with this id already exists
        """
        with self.store.session_scope() as session:
            if session.get(self.model, record.id) is not None:
                raise ConflictError(f"{self.resource} with id {record.id} already exists")
            session.add(self.model(**self._to_columns(record)))
            try:
                session.flush()
            except IntegrityError as exc:
                raise ConflictError(f"{self.resource} with id {record.id} already exists") from exc
        return record.id

    def get_by_id(self, record_id: str) -> Optional[R]:
        """
        Get a record by id.

        Returns:
            The record, or None if not found
        """
        with self.store.session_scope() as session:
            row = session.get(self.model, record_id)
            return self._to_record(row) if row is not None else None

    def update(self, record: R) -> None:
        """
        Replace the stored record with this one (every column is written).

        Raises:
            NotFoundError: if no record with this id exists
        """
        with self.store.session_scope() as session:
            row = session.get(self.model, record.id)
            if row is None:
                raise NotFoundError(self.resource, record.id)
            for name, value in self._to_columns(record).items():
                setattr(row, name, value)

    def delete(self, record_id: str) -> None:
        """Delete a record. Deleting a missing id is not an error."""
        with self.store.session_scope() as session:
            session.query(self.model).filter(self.model.id == record_id).delete()

    def get_all(self) -> list[R]:
        """Every record of this type, in primary-key order."""
        with self.store.session_scope() as session:
            return self._fetch(session)

    def get_page(self, offset: int, limit: int) -> Page[R]:
        """
        Load one page without materializing the whole table.

        Args:
            offset: Number of records to skip (>= 0)
            limit: Maximum number of records to return (> 0)

        Returns:
            Page with items, the total count and whether more remain
        """
        if offset < 0:
            raise ValueError("offset must be >= 0")
        if limit <= 0:
            raise ValueError("limit must be > 0")
        with self.store.session_scope() as session:
            total = session.query(self.model).count()
            rows = (
                session.query(self.model)
                .order_by(self.model.id)
                .offset(offset)
                .limit(limit)
                .all()
            )
            items = [self._to_record(row) for row in rows]
        return Page(items=items, total=total, has_more=offset + len(items) < total)

    def count(self) -> int:
        with self.store.session_scope() as session:
            return session.query(self.model).count()
