"""
In-memory document store.

Used by tests, local development (SITE_STORE_BACKEND=memory) and static
builds from a snapshot. Implements DocumentStorePort including declared
unique fields, which are checked inside the same lock as the write.
"""

from __future__ import annotations

import copy
import logging
from threading import Lock
from typing import Any
from uuid import uuid4

from src.adapters.clock import SystemClock
from src.core.errors import OrderingUnsupported, UniquenessConflict
from src.ports.clock import ClockPort
from src.ports.store import (
    SortDirection,
    StoredDocument,
    resolve_server_timestamps,
)

logger = logging.getLogger(__name__)


class InMemoryDocumentStore:
    def __init__(
        self,
        clock: ClockPort | None = None,
        unique_fields: dict[str, tuple[str, ...]] | None = None,
        *,
        ordering_supported: bool = True,
    ) -> None:
        self._clock = clock or SystemClock()
        self._unique = dict(unique_fields or {})
        self._ordering_supported = ordering_supported
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}
        self._lock = Lock()

    def _coll(self, collection: str) -> dict[str, dict[str, Any]]:
        return self._collections.setdefault(collection, {})

    def _check_unique(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        for field in self._unique.get(collection, ()):
            value = data.get(field)
            if value is None:
                continue
            for other_id, other in self._coll(collection).items():
                if other_id != doc_id and other.get(field) == value:
                    raise UniquenessConflict(collection, field, value)

    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        with self._lock:
            doc = self._coll(collection).get(doc_id)
            return copy.deepcopy(doc) if doc is not None else None

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
        with self._lock:
            data = copy.deepcopy(resolve_server_timestamps(fields, self._clock.now_utc()))
            coll = self._coll(collection)
            if merge and doc_id in coll:
                data = {**coll[doc_id], **data}
            self._check_unique(collection, doc_id, data)
            coll[doc_id] = data
        logger.debug("put %s/%s (merge=%s)", collection, doc_id, merge)

    def delete(self, collection: str, doc_id: str) -> None:
        with self._lock:
            self._coll(collection).pop(doc_id, None)

    def query_equals(
        self,
        collection: str,
        field: str,
        value: Any,
        *,
        exclude_id: str | None = None,
    ) -> list[StoredDocument]:
        with self._lock:
            return [
                StoredDocument(id=doc_id, data=copy.deepcopy(data))
                for doc_id, data in self._coll(collection).items()
                if data.get(field) == value and doc_id != exclude_id
            ]

    def query_equals_ordered(
        self,
        collection: str,
        field: str,
        value: Any,
        order_field: str,
        direction: SortDirection = "desc",
    ) -> list[StoredDocument]:
        if not self._ordering_supported:
            raise OrderingUnsupported(f"No index for {collection}.{field} ordered by {order_field}")

        docs = self.query_equals(collection, field, value)
        present = [d for d in docs if d.data.get(order_field) is not None]
        missing = [d for d in docs if d.data.get(order_field) is None]
        present.sort(key=lambda d: d.data[order_field], reverse=direction == "desc")
        return present + missing

    def list_all(self, collection: str) -> list[StoredDocument]:
        with self._lock:
            return [
                StoredDocument(id=doc_id, data=copy.deepcopy(data))
                for doc_id, data in self._coll(collection).items()
            ]
