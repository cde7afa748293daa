from __future__ import annotations

from typing import Protocol

from src.domain.entities import SiteSettings


class SettingsRepoPort(Protocol):
    """Single-document store for the emergency switches."""

    def get(self) -> SiteSettings | None: ...

    def save(self, settings: SiteSettings) -> SiteSettings:
        """Replace the stored switches; returns what was written."""
        ...
