"""Document store interface and its SQLite implementation.

The store is always constructed explicitly and handed to its consumers;
there is no process-wide connection.
"""

import asyncio
import json
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol, Sequence

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from plantlog.database.schema import Document
from plantlog.database.sqlite_client import session_context
from plantlog.utils.logging import get_logger
from plantlog.utils.time import parse_utc_z, utc_now_z

logger = get_logger(__name__)

_FIELD_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

SUPPORTED_OPERATORS = ("==",)


class StoreError(RuntimeError):
    """Raised when the underlying storage call fails (I/O, permissions, corruption)."""


class _ServerTimestamp:
    """Placeholder asking the store to fill a field with its own clock."""

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass(frozen=True)
class StoreTimestamp:
    """Store-native timestamp as returned for server-assigned fields."""

    iso: str

    def to_datetime(self) -> datetime:
        return parse_utc_z(self.iso)


@dataclass(frozen=True)
class Predicate:
    """Equality constraint on one document field."""

    field: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in SUPPORTED_OPERATORS:
            raise ValueError(f"Unsupported operator {self.op!r} (supported: {', '.join(SUPPORTED_OPERATORS)})")
        _validate_field_name(self.field)


@dataclass
class StoreDocument:
    id: str
    data: Dict[str, Any] = field(default_factory=dict)


class DocumentStore(Protocol):
    async def get_documents(
        self,
        collection: str,
        predicates: Sequence[Predicate] = (),
    ) -> List[StoreDocument]:
        ...

    async def add_document(self, collection: str, fields: Dict[str, Any]) -> str:
        ...


def _validate_field_name(name: str) -> None:
    if not isinstance(name, str) or not _FIELD_NAME_RE.match(name):
        raise ValueError(f"Invalid field name: {name!r}")


class SqliteDocumentStore:
    """
    Schemaless collections on top of one SQLite table.

    Documents are JSON objects; equality predicates are evaluated with
    SQLite's json_extract and combined with AND. Results are ordered by
    creation time, then id, so identical queries return identical sequences.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    async def get_documents(
        self,
        collection: str,
        predicates: Sequence[Predicate] = (),
    ) -> List[StoreDocument]:
        return await asyncio.to_thread(self._get_documents_sync, collection, list(predicates))

    async def add_document(self, collection: str, fields: Dict[str, Any]) -> str:
        return await asyncio.to_thread(self._add_document_sync, collection, dict(fields))

    def _get_documents_sync(self, collection: str, predicates: List[Predicate]) -> List[StoreDocument]:
        try:
            with session_context(self.engine) as session:
                query = session.query(Document).filter(Document.collection == collection)
                for predicate in predicates:
                    query = query.filter(
                        func.json_extract(Document.data_json, f"$.{predicate.field}") == predicate.value
                    )
                rows = query.order_by(Document.created_at_utc.asc(), Document.doc_id.asc()).all()
                return [self._row_to_document(row) for row in rows]
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to query collection '{collection}': {e}") from e

    def _add_document_sync(self, collection: str, fields: Dict[str, Any]) -> str:
        now = utc_now_z()
        data: Dict[str, Any] = {}
        timestamp_fields: List[str] = []
        for name, value in fields.items():
            _validate_field_name(name)
            if value is SERVER_TIMESTAMP:
                data[name] = now
                timestamp_fields.append(name)
            else:
                data[name] = value

        doc_id = uuid.uuid4().hex
        row = Document(
            doc_id=doc_id,
            collection=collection,
            data_json=json.dumps(data, default=str),
            timestamp_fields_json=json.dumps(timestamp_fields) if timestamp_fields else None,
            created_at_utc=now,
        )
        try:
            with session_context(self.engine) as session:
                session.add(row)
                session.commit()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to add document to '{collection}': {e}") from e

        logger.debug(f"Created document {doc_id} in {collection}")
        return doc_id

    @staticmethod
    def _row_to_document(row: Document) -> StoreDocument:
        data: Dict[str, Any] = {}
        try:
            loaded = json.loads(row.data_json)
            if isinstance(loaded, dict):
                data = loaded
        except (json.JSONDecodeError, TypeError):
            logger.warning(f"Document {row.doc_id} has unreadable data; returning it empty")

        timestamp_fields: List[str] = []
        if row.timestamp_fields_json:
            try:
                timestamp_fields = list(json.loads(row.timestamp_fields_json))
            except (json.JSONDecodeError, TypeError):
                timestamp_fields = []

        for name in timestamp_fields:
            value: Optional[Any] = data.get(name)
            if isinstance(value, str):
                data[name] = StoreTimestamp(value)

        return StoreDocument(id=row.doc_id, data=data)
