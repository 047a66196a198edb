# hostel_gate/services/document_store.py
"""
Document store used by lookup, recorder and reconciliation.

Only four operations are needed:
  - get(collection, key)                    point lookup
  - set(collection, key, data)              create-or-overwrite
  - update(collection, key, fields)         merge fields; ArrayAppend appends to a list field
  - query(collection, where, order_by, ...) filtered, ordered, limited read

SqlDocumentStore keeps documents in the `documents` JSON table and opens one
session per call. InMemoryDocumentStore is the drop-in used by tests and demos.
"""

import copy
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Sequence, Tuple

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from hostel_gate.exceptions import StoreError, DocumentNotFoundError
from hostel_gate.models.document import Document
from hostel_gate.utils.logger import get_logger

logger = get_logger(__name__)

# (field, value) — value None matches a null/missing field
WhereClause = Sequence[Tuple[str, Optional[str]]]


@dataclass(frozen=True)
class ArrayAppend:
    """Field mutator: append `value` to the list stored in the field."""
    value: Any


@dataclass
class DocumentSnapshot:
    key: str
    data: dict


def _apply_fields(current: dict, fields: dict) -> dict:
    merged = copy.deepcopy(current)
    for name, value in fields.items():
        if isinstance(value, ArrayAppend):
            items = list(merged.get(name) or [])
            items.append(copy.deepcopy(value.value))
            merged[name] = items
        else:
            merged[name] = copy.deepcopy(value)
    return merged


class DocumentStore:
    """Interface shared by every store backend."""

    def get(self, collection: str, key: str) -> Optional[DocumentSnapshot]:
        raise NotImplementedError

    def set(self, collection: str, key: str, data: dict) -> None:
        raise NotImplementedError

    def update(self, collection: str, key: str, fields: dict) -> None:
        raise NotImplementedError

    def query(
        self,
        collection: str,
        where: Optional[WhereClause] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list:
        raise NotImplementedError

    def ping(self) -> None:
        """Raise StoreError if the backend is unreachable."""


class InMemoryDocumentStore(DocumentStore):
    def __init__(self):
        self._collections: dict = {}

    def get(self, collection, key):
        data = self._collections.get(collection, {}).get(key)
        if data is None:
            return None
        return DocumentSnapshot(key=key, data=copy.deepcopy(data))

    def set(self, collection, key, data):
        self._collections.setdefault(collection, {})[key] = copy.deepcopy(data)

    def update(self, collection, key, fields):
        docs = self._collections.get(collection, {})
        if key not in docs:
            raise DocumentNotFoundError(collection, key)
        docs[key] = _apply_fields(docs[key], fields)

    def query(self, collection, where=None, order_by=None, descending=False, limit=None):
        rows = [
            (key, data) for key, data in self._collections.get(collection, {}).items()
            if all(data.get(name) == value for name, value in (where or ()))
        ]
        if order_by:
            # Documents without the order field are left out, as an ordered query would
            rows = [r for r in rows if r[1].get(order_by) is not None]
            rows.sort(key=lambda r: r[1][order_by], reverse=descending)
        if limit is not None:
            rows = rows[:limit]
        return [DocumentSnapshot(key=key, data=copy.deepcopy(data)) for key, data in rows]


class SqlDocumentStore(DocumentStore):
    def __init__(self, session_factory):
        self._session_factory = session_factory

    def get(self, collection, key):
        try:
            with self._session_factory() as db:
                doc = db.get(Document, (collection, key))
                if doc is None:
                    return None
                return DocumentSnapshot(key=doc.key, data=copy.deepcopy(doc.data))
        except SQLAlchemyError as e:
            raise StoreError(f"get {collection}/{key} failed: {e}") from e

    def set(self, collection, key, data):
        now = datetime.utcnow()
        try:
            with self._session_factory() as db:
                doc = db.get(Document, (collection, key))
                if doc is None:
                    db.add(Document(collection=collection, key=key, data=copy.deepcopy(data),
                                    created_at=now, updated_at=now))
                else:
                    doc.data = copy.deepcopy(data)
                    doc.updated_at = now
                db.commit()
        except SQLAlchemyError as e:
            raise StoreError(f"set {collection}/{key} failed: {e}") from e

    def update(self, collection, key, fields):
        try:
            with self._session_factory() as db:
                doc = db.get(Document, (collection, key))
                if doc is None:
                    raise DocumentNotFoundError(collection, key)
                # New dict object so the JSON column is flagged dirty
                doc.data = _apply_fields(doc.data or {}, fields)
                doc.updated_at = datetime.utcnow()
                db.commit()
        except SQLAlchemyError as e:
            raise StoreError(f"update {collection}/{key} failed: {e}") from e

    def query(self, collection, where=None, order_by=None, descending=False, limit=None):
        try:
            with self._session_factory() as db:
                q = db.query(Document).filter(Document.collection == collection)
                for name, value in where or ():
                    field = Document.data[name].as_string()
                    q = q.filter(field.is_(None) if value is None else field == value)
                if order_by:
                    field = Document.data[order_by].as_string()
                    q = q.filter(field.isnot(None))
                    q = q.order_by(field.desc() if descending else field.asc())
                if limit is not None:
                    q = q.limit(limit)
                return [DocumentSnapshot(key=doc.key, data=copy.deepcopy(doc.data)) for doc in q.all()]
        except SQLAlchemyError as e:
            raise StoreError(f"query {collection} failed: {e}") from e

    def ping(self):
        try:
            with self._session_factory() as db:
                db.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise StoreError(f"database unreachable: {e}") from e
