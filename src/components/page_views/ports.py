"""
Page view component port definitions.
"""

from __future__ import annotations

from typing import Protocol


class PageViewRepoPort(Protocol):
    def record_view(self, fingerprint: str, path: str, day_key: str) -> bool:
        """Store a first view for the fingerprint; False when it was already recorded."""
        ...

    def count_views(self) -> int:
        """Number of distinct visitor-days recorded."""
        ...
