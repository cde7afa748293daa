"""
Slugs component port definitions.
"""

from __future__ import annotations

from typing import Protocol


class SlugLookupPort(Protocol):
    """Answers whether a live content item already holds a slug."""

    def slug_taken(self, slug: str, exclude_id: str | None = None) -> bool:
        """True if an item other than `exclude_id` currently holds `slug`."""
        ...
