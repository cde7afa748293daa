"""
Page view persistence on a DocumentStorePort.

One document per visitor-day in `page_views`. The fingerprint is a declared
unique field, so a repeat view loses the insert race instead of double counting.
"""

from __future__ import annotations

from src.core.errors import UniquenessConflict
from src.ports.store import SERVER_TIMESTAMP, DocumentStorePort

PAGE_VIEWS_COLLECTION = "page_views"

PAGE_VIEW_UNIQUE_FIELDS: dict[str, tuple[str, ...]] = {PAGE_VIEWS_COLLECTION: ("fingerprint",)}


class DocumentPageViewRepo:
    def __init__(self, store: DocumentStorePort):
        self.store = store

    def record_view(self, fingerprint: str, path: str, day_key: str) -> bool:
        try:
            self.store.add(
                PAGE_VIEWS_COLLECTION,
                {"fingerprint": fingerprint, "path": path, "day_key": day_key, "created_at": SERVER_TIMESTAMP},
            )
        except UniquenessConflict:
            return False
        return True

    def count_views(self) -> int:
        return len(self.store.list_all(PAGE_VIEWS_COLLECTION))
