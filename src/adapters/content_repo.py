"""
Content repository backed by a DocumentStorePort.

Maps `content` collection documents to ContentItem. Every document read is
validated against ContentDocument; a document that fails validation raises
MalformedDocumentError instead of surfacing half-populated items.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from src.core.errors import MalformedDocumentError
from src.domain.entities import ContentDocument, ContentItem, ContentStatus
from src.ports.store import DocumentStorePort, StoredDocument

CONTENT_COLLECTION = "content"

# Declared to the store so slug and source video uniqueness are enforced at write time
CONTENT_UNIQUE_FIELDS: dict[str, tuple[str, ...]] = {CONTENT_COLLECTION: ("slug", "youtube_video_id")}


def to_content_item(doc_id: str, data: dict[str, Any]) -> ContentItem:
    try:
        doc = ContentDocument.model_validate(data)
    except ValidationError as e:
        raise MalformedDocumentError(CONTENT_COLLECTION, doc_id, str(e)) from e
    return ContentItem(id=doc_id, **doc.model_dump())


def to_document(item: ContentItem) -> dict[str, Any]:
    return item.model_dump(exclude={"id"})


class DocumentContentRepo:
    def __init__(self, store: DocumentStorePort):
        self.store = store

    def _items(self, docs: list[StoredDocument]) -> list[ContentItem]:
        return [to_content_item(d.id, d.data) for d in docs]

    def get_by_id(self, content_id: str) -> ContentItem | None:
        data = self.store.get(CONTENT_COLLECTION, content_id)
        if data is None:
            return None
        return to_content_item(content_id, data)

    def find_by_slug(self, slug: str) -> ContentItem | None:
        docs = self.store.query_equals(CONTENT_COLLECTION, "slug", slug)
        if not docs:
            return None
        return to_content_item(docs[0].id, docs[0].data)

    def slug_taken(self, slug: str, exclude_id: str | None = None) -> bool:
        return bool(self.store.query_equals(CONTENT_COLLECTION, "slug", slug, exclude_id=exclude_id))

    def find_by_video_id(self, video_id: str) -> ContentItem | None:
        docs = self.store.query_equals(CONTENT_COLLECTION, "youtube_video_id", video_id)
        if not docs:
            return None
        return to_content_item(docs[0].id, docs[0].data)

    def list_by_status(
        self,
        status: ContentStatus | None,
        *,
        order_by: str | None = None,
    ) -> list[ContentItem]:
        """
        Items with the given status (all items when status is None).

        With order_by set, asks the store for a descending ordered query and
        lets OrderingUnsupported propagate to the caller.
        """
        if status is None:
            return self._items(self.store.list_all(CONTENT_COLLECTION))
        if order_by:
            return self._items(
                self.store.query_equals_ordered(CONTENT_COLLECTION, "status", status, order_by, "desc")
            )
        return self._items(self.store.query_equals(CONTENT_COLLECTION, "status", status))

    def create(self, fields: dict[str, Any]) -> str:
        return self.store.add(CONTENT_COLLECTION, fields)

    def save(self, content_id: str, fields: dict[str, Any]) -> None:
        self.store.put(CONTENT_COLLECTION, content_id, fields)

    def delete(self, content_id: str) -> None:
        self.store.delete(CONTENT_COLLECTION, content_id)
