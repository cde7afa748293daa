"""
SQLite-backed document store.

Documents are stored as JSON text in a single `documents` table. Declared
unique fields are mirrored into `unique_values`, whose primary key is the
store-level uniqueness constraint; the mirror rows and the document are
written in one transaction, so a conflicting write leaves nothing behind.

Schema lives in migrations/001_documents.sql (applied by SQLiteMigrator).
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime
from typing import Any
from uuid import uuid4

from src.adapters.clock import SystemClock
from src.core.errors import StoreUnavailable, UniquenessConflict
from src.ports.clock import ClockPort
from src.ports.store import SortDirection, StoredDocument, resolve_server_timestamps

logger = logging.getLogger(__name__)


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _json_path(field: str) -> str:
    if not field.replace("_", "").isalnum():
        raise ValueError(f"Invalid field name: {field!r}")
    return f"$.{field}"


def _query_value(value: Any) -> Any:
    # json_extract yields 1/0 for JSON booleans and ISO text for datetimes
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class SQLiteDocumentStore:
    def __init__(
        self,
        db_path: str,
        clock: ClockPort | None = None,
        unique_fields: dict[str, tuple[str, ...]] | None = None,
    ):
        self.db_path = db_path
        self._clock = clock or SystemClock()
        self._unique = dict(unique_fields or {})

    def _get_conn(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise StoreUnavailable(f"Cannot open {self.db_path}: {e}") from e
        conn.row_factory = dict_factory
        return conn

    def _rows_to_docs(self, rows: list[dict[str, Any]]) -> list[StoredDocument]:
        return [StoredDocument(id=row["id"], data=json.loads(row["data"])) for row in rows]

    def _select(self, query: str, params: tuple[Any, ...]) -> list[dict[str, Any]]:
        conn = self._get_conn()
        try:
            return conn.execute(query, params).fetchall()
        except sqlite3.Error as e:
            raise StoreUnavailable(str(e)) from e
        finally:
            conn.close()

    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        rows = self._select(
            "SELECT id, data FROM documents WHERE collection = ? AND id = ?",
            (collection, doc_id),
        )
        if not rows:
            return None
        data: dict[str, Any] = json.loads(rows[0]["data"])
        return data

    def add(self, collection: str, fields: dict[str, Any]) -> str:
        doc_id = uuid4().hex
        self.put(collection, doc_id, fields)
        return doc_id

    def put(
        self,
        collection: str,
        doc_id: str,
        fields: dict[str, Any],
        *,
        merge: bool = False,
    ) -> None:
        data = resolve_server_timestamps(fields, self._clock.now_utc())
        conn = self._get_conn()
        try:
            with conn:
                if merge:
                    row = conn.execute(
                        "SELECT data FROM documents WHERE collection = ? AND id = ?",
                        (collection, doc_id),
                    ).fetchone()
                    if row:
                        data = {**json.loads(row["data"]), **data}

                payload = json.dumps(data, default=_json_default)

                conn.execute(
                    "DELETE FROM unique_values WHERE collection = ? AND doc_id = ?",
                    (collection, doc_id),
                )
                for field in self._unique.get(collection, ()):
                    value = data.get(field)
                    if value is None:
                        continue
                    try:
                        conn.execute(
                            "INSERT INTO unique_values (collection, field, value, doc_id) "
                            "VALUES (?, ?, ?, ?)",
                            (collection, field, json.dumps(value, default=_json_default), doc_id),
                        )
                    except sqlite3.IntegrityError as e:
                        raise UniquenessConflict(collection, field, value) from e

                conn.execute(
                    """
                    INSERT INTO documents (collection, id, data) VALUES (?, ?, ?)
                    ON CONFLICT(collection, id) DO UPDATE SET data = excluded.data
                    """,
                    (collection, doc_id, payload),
                )
        except sqlite3.Error as e:
            raise StoreUnavailable(str(e)) from e
        finally:
            conn.close()
        logger.debug("put %s/%s (merge=%s)", collection, doc_id, merge)

    def delete(self, collection: str, doc_id: str) -> None:
        conn = self._get_conn()
        try:
            with conn:
                conn.execute(
                    "DELETE FROM unique_values WHERE collection = ? AND doc_id = ?",
                    (collection, doc_id),
                )
                conn.execute(
                    "DELETE FROM documents WHERE collection = ? AND id = ?",
                    (collection, doc_id),
                )
        except sqlite3.Error as e:
            raise StoreUnavailable(str(e)) from e
        finally:
            conn.close()

    def query_equals(
        self,
        collection: str,
        field: str,
        value: Any,
        *,
        exclude_id: str | None = None,
    ) -> list[StoredDocument]:
        query = (
            "SELECT id, data FROM documents "
            "WHERE collection = ? AND json_extract(data, ?) = ?"
        )
        params: tuple[Any, ...] = (collection, _json_path(field), _query_value(value))
        if exclude_id is not None:
            query += " AND id != ?"
            params += (exclude_id,)
        return self._rows_to_docs(self._select(query, params))

    def query_equals_ordered(
        self,
        collection: str,
        field: str,
        value: Any,
        order_field: str,
        direction: SortDirection = "desc",
    ) -> list[StoredDocument]:
        order = "DESC" if direction == "desc" else "ASC"
        rows = self._select(
            "SELECT id, data FROM documents "
            "WHERE collection = ? AND json_extract(data, ?) = ? "
            f"ORDER BY json_extract(data, ?) IS NULL, json_extract(data, ?) {order}",
            (
                collection,
                _json_path(field),
                _query_value(value),
                _json_path(order_field),
                _json_path(order_field),
            ),
        )
        return self._rows_to_docs(rows)

    def list_all(self, collection: str) -> list[StoredDocument]:
        rows = self._select(
            "SELECT id, data FROM documents WHERE collection = ?",
            (collection,),
        )
        return self._rows_to_docs(rows)
