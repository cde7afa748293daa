"""
Content component port definitions.
"""

from __future__ import annotations

from typing import Any, Protocol

from src.domain.entities import ContentItem, ContentStatus


class ContentRepoPort(Protocol):
    """Repository interface for content persistence."""

    def get_by_id(self, content_id: str) -> ContentItem | None:
        """Get content by ID."""
        ...

    def find_by_slug(self, slug: str) -> ContentItem | None:
        """Get the item currently holding a slug, in any status."""
        ...

    def slug_taken(self, slug: str, exclude_id: str | None = None) -> bool:
        """True if an item other than exclude_id currently holds the slug."""
        ...

    def list_by_status(
        self,
        status: ContentStatus | None,
        *,
        order_by: str | None = None,
    ) -> list[ContentItem]:
        """List items by status, newest first by order_by. May raise OrderingUnsupported."""
        ...

    def create(self, fields: dict[str, Any]) -> str:
        """Create a record and return its store-assigned id."""
        ...

    def save(self, content_id: str, fields: dict[str, Any]) -> None:
        """Replace a record with the full set of fields."""
        ...

    def delete(self, content_id: str) -> None:
        """Delete content by ID."""
        ...
