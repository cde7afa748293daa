from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.domain.entities import SiteSettings


@dataclass(frozen=True)
class GetSettingsInput:
    pass


@dataclass(frozen=True)
class UpdateSettingsInput:
    """Switch changes keyed by field name; `actor` is recorded as updated_by."""

    changes: dict[str, Any]
    actor: str | None = None


@dataclass(frozen=True)
class SettingsFieldError:
    field: str
    code: str  # unknown_field | invalid_type | invalid_value | required
    message: str


@dataclass(frozen=True)
class SettingsOutput:
    settings: SiteSettings
    errors: list[SettingsFieldError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors
