"""
SettingsContext - emergency site settings with snapshot reads and push updates.

Key behaviors:
- snapshot() never touches the store; it returns the last loaded or saved value
- missing or unreadable settings fall back to defaults (site runs normally)
- update() validates, persists, then publishes the new snapshot to every
  subscriber queue
- subscribers are plain queue.Queue objects; slow consumers only ever miss
  intermediate snapshots, never block the publisher
"""

from __future__ import annotations

import logging
import queue
from threading import Lock
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from src.adapters.clock import SystemClock
from src.core.errors import ContentCoreError
from src.domain.entities import SiteSettings
from src.ports.clock import ClockPort

from .models import SettingsFieldError
from .ports import SettingsRepoPort

logger = logging.getLogger(__name__)

# Only the switches are editable; bookkeeping fields are set here
EDITABLE_FIELDS: frozenset[str] = frozenset(
    {
        "maintenance_mode",
        "disable_registrations",
        "disable_comments",
        "disable_contact_forms",
        "disable_problem_reports",
        "read_only_mode",
        "nuclear_lockdown",
    }
)


def get_default_settings() -> SiteSettings:
    """Fail-safe defaults used when nothing is stored."""
    return SiteSettings()


def _parse_pydantic_errors(exc: PydanticValidationError) -> list[SettingsFieldError]:
    errors: list[SettingsFieldError] = []
    for error in exc.errors():
        loc = error.get("loc", ())
        field = ".".join(str(part) for part in loc) if loc else "_schema"
        code = "required" if "missing" in error.get("type", "") else "invalid_value"
        errors.append(
            SettingsFieldError(
                field=field,
                code=code,
                message=f"Field '{field}': {error.get('msg', 'Invalid value')}",
            )
        )
    return errors


def validate_updates(updates: dict[str, Any]) -> list[SettingsFieldError]:
    errors: list[SettingsFieldError] = []
    for key, value in updates.items():
        if key not in EDITABLE_FIELDS:
            errors.append(
                SettingsFieldError(
                    field=key,
                    code="unknown_field",
                    message=f"Field '{key}' is not an editable setting",
                )
            )
        elif not isinstance(value, bool):
            errors.append(
                SettingsFieldError(
                    field=key,
                    code="invalid_type",
                    message=f"Field '{key}' must be true or false",
                )
            )
    return errors


class SettingsContext:
    """
    Holds the current emergency settings for the process.

    Created once at startup and shared through a FastAPI dependency.
    """

    def __init__(
        self,
        repo: SettingsRepoPort,
        clock: ClockPort | None = None,
    ) -> None:
        self._repo = repo
        self._clock = clock or SystemClock()
        self._lock = Lock()
        self._subscribers: list[queue.Queue[SiteSettings]] = []
        self._current = get_default_settings()

    def refresh(self) -> SiteSettings:
        """Reload from the store; keeps the previous snapshot if the store fails."""
        try:
            stored = self._repo.get()
        except ContentCoreError as e:
            logger.warning("Settings reload failed, keeping current snapshot: %s", e)
            return self.snapshot()

        with self._lock:
            self._current = stored or get_default_settings()
            return self._current

    def snapshot(self) -> SiteSettings:
        with self._lock:
            return self._current

    def update(
        self,
        updates: dict[str, Any],
        updated_by: str | None = None,
    ) -> tuple[SiteSettings, list[SettingsFieldError]]:
        """
        Apply switch changes.

        Returns (settings, errors). When errors is non-empty nothing was saved
        and the current snapshot is returned unchanged.
        """
        errors = validate_updates(updates)
        if errors:
            return self.snapshot(), errors

        data = self.snapshot().model_dump()
        data.update(updates)
        data["updated_at"] = self._clock.now_utc()
        data["updated_by"] = updated_by

        try:
            new_settings = SiteSettings.model_validate(data)
        except PydanticValidationError as e:
            return self.snapshot(), _parse_pydantic_errors(e)

        saved = self._repo.save(new_settings)
        with self._lock:
            self._current = saved
            subscribers = list(self._subscribers)

        for q in subscribers:
            self._offer(q, saved)

        logger.info(
            "Site settings updated by %s: %s",
            updated_by or "unknown",
            ", ".join(f"{k}={v}" for k, v in sorted(updates.items())),
        )
        return saved, []

    # --- Push Channel ---

    def subscribe(self, maxsize: int = 16) -> queue.Queue[SiteSettings]:
        """Register a listener; the current snapshot is delivered immediately."""
        q: queue.Queue[SiteSettings] = queue.Queue(maxsize=maxsize)
        with self._lock:
            self._subscribers.append(q)
            current = self._current
        self._offer(q, current)
        return q

    def unsubscribe(self, q: queue.Queue[SiteSettings]) -> None:
        with self._lock:
            if q in self._subscribers:
                self._subscribers.remove(q)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    @staticmethod
    def _offer(q: queue.Queue[SiteSettings], settings: SiteSettings) -> None:
        # Full queue: drop the oldest snapshot so the newest always lands
        while True:
            try:
                q.put_nowait(settings)
                return
            except queue.Full:
                try:
                    q.get_nowait()
                except queue.Empty:
                    pass
