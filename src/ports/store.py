"""
Document store port.

A collection-of-documents store with equality queries and an optional
ordered variant. Documents are plain dicts; ids are opaque strings assigned
by the store on `add`.

Key behaviors:
- `SERVER_TIMESTAMP` placed in a field value is replaced by the store's
  clock at write time
- each `put`/`add` is a single-document atomic write
- stores may declare unique fields per collection; a write that would
  duplicate one raises UniquenessConflict and persists nothing
- `query_equals_ordered` may raise OrderingUnsupported; callers fall back to
  `query_equals` and sort client-side
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Protocol

SortDirection = Literal["asc", "desc"]


class _ServerTimestamp:
    """Sentinel resolved by the store to its current UTC time."""

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"

    # Identity checks must survive copies of the fields
    def __copy__(self) -> _ServerTimestamp:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> _ServerTimestamp:
        return self


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass(frozen=True)
class StoredDocument:
    """A document as returned by a query."""

    id: str
    data: dict[str, Any]


class DocumentStorePort(Protocol):
    """Interface every document store adapter implements."""

    def get(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        """Fetch one document, or None if it does not exist."""
        ...

    def add(self, collection: str, fields: dict[str, Any]) -> str:
        """Create a document with a store-assigned id and return the id."""
        ...

    def put(
        self,
        collection: str,
        doc_id: str,
        fields: dict[str, Any],
        *,
        merge: bool = False,
    ) -> None:
        """Write a document (full replace, or field merge when merge=True)."""
        ...

    def delete(self, collection: str, doc_id: str) -> None:
        """Remove a document. Missing documents are ignored."""
        ...

    def query_equals(
        self,
        collection: str,
        field: str,
        value: Any,
        *,
        exclude_id: str | None = None,
    ) -> list[StoredDocument]:
        """Documents whose `field` equals `value`, in no particular order."""
        ...

    def query_equals_ordered(
        self,
        collection: str,
        field: str,
        value: Any,
        order_field: str,
        direction: SortDirection = "desc",
    ) -> list[StoredDocument]:
        """Like query_equals, ordered by `order_field`. May raise OrderingUnsupported."""
        ...

    def list_all(self, collection: str) -> list[StoredDocument]:
        """Every document in a collection."""
        ...


def resolve_server_timestamps(fields: dict[str, Any], now: Any) -> dict[str, Any]:
    """Return a copy of `fields` with SERVER_TIMESTAMP sentinels replaced by `now`."""
    return {k: (now if v is SERVER_TIMESTAMP else v) for k, v in fields.items()}
